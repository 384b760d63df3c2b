"""Integration tests for character storage."""

from __future__ import annotations

from pathlib import Path

import pytest

from guildhall.core.exceptions import DatabaseOperationError
from guildhall.models.characters import Mage, Rogue, Warrior, create_warrior
from guildhall.models.enums import CharacterType
from guildhall.models.guild import Equipment, Guild
from guildhall.storage.character_repository import CharacterRepository
from guildhall.storage.database import Database
from guildhall.storage.guild_repository import EquipmentRepository, GuildRepository


class TestCreateAndRead:
    """Round trips through the base row and the attribute tables."""

    def test_create_assigns_id(self, character_repository: CharacterRepository, sample_warrior: Warrior) -> None:
        created = character_repository.create(sample_warrior)

        assert created.id is not None and created.id > 0
        assert sample_warrior.id is None

    def test_each_variant_restored(
        self,
        character_repository: CharacterRepository,
        sample_warrior: Warrior,
        sample_mage: Mage,
        sample_rogue: Rogue,
    ) -> None:
        for character in (sample_warrior, sample_mage, sample_rogue):
            created = character_repository.create(character)
            loaded = character_repository.get_by_id(created.id)
            assert loaded == created
            assert type(loaded) is type(character)

    def test_attribute_row_in_variant_table(
        self,
        db: Database,
        character_repository: CharacterRepository,
        sample_mage: Mage,
    ) -> None:
        created = character_repository.create(sample_mage)

        row = db.connection.execute(
            "SELECT mana, intelligence, spell_school FROM mage_attributes WHERE character_id = ?",
            (created.id,),
        ).fetchone()
        assert tuple(row) == (200, 40, "Arcane")
        assert db.connection.execute("SELECT COUNT(*) FROM warrior_attributes").fetchone()[0] == 0

    def test_get_missing_returns_none(self, character_repository: CharacterRepository) -> None:
        assert character_repository.get_by_id(999) is None

    def test_get_by_name_ignores_case(self, character_repository: CharacterRepository, sample_warrior: Warrior) -> None:
        character_repository.create(sample_warrior)
        assert character_repository.get_by_name("THORIN").name == "Thorin"

    def test_get_by_name_folds_non_ascii_case(self, character_repository: CharacterRepository) -> None:
        character_repository.create(create_warrior("Élodie", 3, 20, 10, "Spear"))

        assert character_repository.get_by_name("ÉLODIE").name == "Élodie"
        assert character_repository.get_by_name("Elodie") is None

    def test_unique_name_non_ascii(self, character_repository: CharacterRepository) -> None:
        character_repository.create(create_warrior("Élodie", 3, 20, 10, "Spear"))
        with pytest.raises(DatabaseOperationError):
            character_repository.create(create_warrior("élodie", 3, 20, 10, "Spear"))
        assert character_repository.count() == 1

    def test_get_by_type_and_count(
        self,
        character_repository: CharacterRepository,
        sample_warrior: Warrior,
        sample_mage: Mage,
    ) -> None:
        character_repository.create(sample_warrior)
        character_repository.create(sample_mage)

        mages = character_repository.get_by_type(CharacterType.MAGE)
        assert [m.name for m in mages] == ["Merlin"]
        assert character_repository.count() == 2

    def test_get_all_ordered_by_id(
        self,
        character_repository: CharacterRepository,
        sample_warrior: Warrior,
        sample_rogue: Rogue,
    ) -> None:
        first = character_repository.create(sample_rogue)
        second = character_repository.create(sample_warrior)
        assert [c.id for c in character_repository.get_all()] == [first.id, second.id]

    def test_duplicate_name_rejected_by_storage(
        self,
        character_repository: CharacterRepository,
        sample_warrior: Warrior,
    ) -> None:
        character_repository.create(sample_warrior)
        with pytest.raises(DatabaseOperationError):
            character_repository.create(create_warrior("thorin", 1, 1, 1, "Axe"))
        assert character_repository.count() == 1


class TestUpdateAndDelete:
    """Writes and removals."""

    def test_update_both_rows(self, character_repository: CharacterRepository, sample_warrior: Warrior) -> None:
        created = character_repository.create(sample_warrior)
        created.level_up()

        assert character_repository.update(created.id, created) is True

        loaded = character_repository.get_by_id(created.id)
        assert loaded.level == 11
        assert loaded.strength == 55
        assert loaded.health_points == 350

    def test_update_missing(self, character_repository: CharacterRepository, sample_warrior: Warrior) -> None:
        assert character_repository.update(42, sample_warrior) is False

    def test_set_guild(
        self,
        character_repository: CharacterRepository,
        guild_repository: GuildRepository,
        sample_warrior: Warrior,
        sample_guild: Guild,
    ) -> None:
        guild = guild_repository.create(sample_guild)
        created = character_repository.create(sample_warrior)

        assert character_repository.set_guild(created.id, guild.id)
        assert character_repository.count_by_guild(guild.id) == 1
        assert [c.id for c in character_repository.get_by_guild(guild.id)] == [created.id]

        character_repository.set_guild(created.id, None)
        assert character_repository.get_by_id(created.id).guild_id is None

    def test_unknown_guild_violates_foreign_key(
        self,
        character_repository: CharacterRepository,
        sample_warrior: Warrior,
    ) -> None:
        created = character_repository.create(sample_warrior)
        with pytest.raises(DatabaseOperationError):
            character_repository.set_guild(created.id, 77)

    def test_delete_removes_attributes_and_equipment(
        self,
        db: Database,
        character_repository: CharacterRepository,
        equipment_repository: EquipmentRepository,
        sample_rogue: Rogue,
    ) -> None:
        created = character_repository.create(sample_rogue)
        equipment_repository.create(Equipment(name="Dagger", equipment_type="WEAPON", character_id=created.id))

        assert character_repository.delete(created.id) is True

        assert character_repository.get_by_id(created.id) is None
        assert db.connection.execute("SELECT COUNT(*) FROM rogue_attributes").fetchone()[0] == 0
        assert equipment_repository.get_by_character(created.id) == []

    def test_delete_missing(self, character_repository: CharacterRepository) -> None:
        assert character_repository.delete(5) is False


class TestCorruptRows:
    def test_missing_attribute_row(
        self,
        db: Database,
        character_repository: CharacterRepository,
        sample_warrior: Warrior,
    ) -> None:
        """A base row without its attribute row cannot be rebuilt."""
        created = character_repository.create(sample_warrior)
        db.connection.execute("DELETE FROM warrior_attributes WHERE character_id = ?", (created.id,))

        with pytest.raises(DatabaseOperationError):
            character_repository.get_by_id(created.id)

    def test_closed_database(self, tmp_path: Path, sample_warrior: Warrior) -> None:
        db = Database(tmp_path / "closed.db")
        repository = CharacterRepository(db)

        with pytest.raises(DatabaseOperationError):
            repository.create(sample_warrior)
