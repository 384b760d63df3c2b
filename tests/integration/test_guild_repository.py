"""Integration tests for guild and equipment storage."""

from __future__ import annotations

import pytest

from guildhall.core.exceptions import DatabaseOperationError
from guildhall.models.characters import Warrior
from guildhall.models.enums import EquipmentType, Rarity
from guildhall.models.guild import Equipment, Guild
from guildhall.storage.character_repository import CharacterRepository
from guildhall.storage.guild_repository import EquipmentRepository, GuildRepository


class TestGuildRepository:
    """CRUD over the guilds table."""

    def test_create_and_get(self, guild_repository: GuildRepository, sample_guild: Guild) -> None:
        created = guild_repository.create(sample_guild)

        loaded = guild_repository.get_by_id(created.id)
        assert loaded == created
        assert loaded.level == 5

    def test_get_by_name_ignores_case(self, guild_repository: GuildRepository, sample_guild: Guild) -> None:
        guild_repository.create(sample_guild)
        assert guild_repository.get_by_name("dragon SLAYERS") is not None
        assert guild_repository.get_by_name("Knights") is None

    def test_get_by_name_folds_non_ascii_case(self, guild_repository: GuildRepository) -> None:
        guild_repository.create(Guild(guild_name="Ørder of Ash"))
        assert guild_repository.get_by_name("ørder of ash").guild_name == "Ørder of Ash"

    def test_unique_name(self, guild_repository: GuildRepository, sample_guild: Guild) -> None:
        guild_repository.create(sample_guild)
        with pytest.raises(DatabaseOperationError):
            guild_repository.create(Guild(guild_name="DRAGON SLAYERS"))

    def test_unique_name_non_ascii(self, guild_repository: GuildRepository) -> None:
        guild_repository.create(Guild(guild_name="Ørder of Ash"))
        with pytest.raises(DatabaseOperationError):
            guild_repository.create(Guild(guild_name="ØRDER OF ASH"))

    def test_update(self, guild_repository: GuildRepository, sample_guild: Guild) -> None:
        created = guild_repository.create(sample_guild)
        created.level_up()
        created.add_member()

        assert guild_repository.update(created.id, created)

        loaded = guild_repository.get_by_id(created.id)
        assert (loaded.level, loaded.member_count) == (6, 1)

    def test_update_and_delete_missing(self, guild_repository: GuildRepository, sample_guild: Guild) -> None:
        assert guild_repository.update(3, sample_guild) is False
        assert guild_repository.delete(3) is False

    def test_delete(self, guild_repository: GuildRepository, sample_guild: Guild) -> None:
        created = guild_repository.create(sample_guild)
        assert guild_repository.delete(created.id)
        assert guild_repository.get_all() == []

    def test_delete_referenced_guild_fails(
        self,
        guild_repository: GuildRepository,
        character_repository: CharacterRepository,
        sample_guild: Guild,
        sample_warrior: Warrior,
    ) -> None:
        """Storage refuses to orphan members even if a caller skips the service."""
        guild = guild_repository.create(sample_guild)
        character_repository.create(sample_warrior.model_copy(update={"guild_id": guild.id}))

        with pytest.raises(DatabaseOperationError):
            guild_repository.delete(guild.id)


class TestEquipmentRepository:
    """Items owned by characters."""

    def test_create_and_list(
        self,
        equipment_repository: EquipmentRepository,
        character_repository: CharacterRepository,
        sample_warrior: Warrior,
    ) -> None:
        owner = character_repository.create(sample_warrior)
        equipment_repository.create(
            Equipment(name="Warhammer", equipment_type=EquipmentType.WEAPON, bonus_stats=7, character_id=owner.id)
        )
        equipment_repository.create(
            Equipment(name="Plate", equipment_type="ARMOR", rarity=Rarity.RARE, character_id=owner.id)
        )

        items = equipment_repository.get_by_character(owner.id)

        assert [item.name for item in items] == ["Warhammer", "Plate"]
        assert items[0].bonus_stats == 7
        assert items[1].rarity is Rarity.RARE

    def test_delete(
        self,
        equipment_repository: EquipmentRepository,
        character_repository: CharacterRepository,
        sample_warrior: Warrior,
    ) -> None:
        owner = character_repository.create(sample_warrior)
        item = equipment_repository.create(Equipment(name="Shield", equipment_type="ARMOR", character_id=owner.id))

        assert equipment_repository.delete(item.id)
        assert equipment_repository.delete(item.id) is False
