"""Business rules for characters.

Validates input before any storage call, enforces name uniqueness and the
level ceiling, and keeps guild member counts correct when a character that
belongs to a guild is created or deleted.
"""

from __future__ import annotations

from guildhall.core.exceptions import (
    DuplicateResourceError,
    InvalidInputError,
    ResourceNotFoundError,
)
from guildhall.core.logging import get_logger
from guildhall.models.characters import Character
from guildhall.models.combat import CombatReport, simulate_combat
from guildhall.models.enums import CharacterSortKey, CharacterType
from guildhall.models.guild import Equipment, Guild
from guildhall.models.results import CharacterStatistics, ExperienceResult
from guildhall.services.validation import (
    validate_character,
    validate_equipment,
    validate_id,
)
from guildhall.storage.character_repository import CharacterRepository
from guildhall.storage.database import Database
from guildhall.storage.guild_repository import EquipmentRepository, GuildRepository

logger = get_logger(__name__)


class CharacterService:
    """Character operations for the presentation layer.

    Args:
        db: Open database shared with the repositories.
        characters: Character repository.
        guilds: Guild repository, used to maintain member counts.
        equipment: Equipment repository.
        combat_max_rounds: Round limit for simulated combat.
    """

    def __init__(
        self,
        db: Database,
        characters: CharacterRepository,
        guilds: GuildRepository,
        equipment: EquipmentRepository,
        *,
        combat_max_rounds: int = 20,
    ) -> None:
        self._db = db
        self._characters = characters
        self._guilds = guilds
        self._equipment = equipment
        self._combat_max_rounds = combat_max_rounds

    # =========================================================================
    # CRUD
    # =========================================================================

    def create_character(self, character: Character) -> int:
        """Validate and store a new character.

        If the character names a guild, that guild's member count is
        incremented in the same transaction.

        Returns:
            The new character id.

        Raises:
            InvalidInputError: If a field is invalid.
            DuplicateResourceError: If the name is taken (case-insensitive).
            ResourceNotFoundError: If ``guild_id`` names an unknown guild.
        """
        validate_character(character)
        self._ensure_name_available(character.name)

        with self._db.transaction():
            if character.guild_id is not None:
                guild = self._require_guild(character.guild_id)
                guild.add_member()
                self._guilds.update(character.guild_id, guild)
            created = self._characters.create(character)

        logger.info(
            "Character created",
            character_id=created.id,
            name=created.name,
            character_type=created.character_type.value,
        )
        return created.id

    def get_all_characters(self, sort_by: CharacterSortKey | str = CharacterSortKey.ID) -> list[Character]:
        """List every character in the requested order.

        Name sorts ascending; level and power sort strongest first.

        Raises:
            InvalidInputError: If the sort key is not id, name, level or power.
        """
        try:
            key = CharacterSortKey(sort_by)
        except ValueError as exc:
            raise InvalidInputError(
                f"Unknown sort key: {sort_by}",
                field_name="sort_by",
                invalid_value=sort_by,
            ) from exc
        characters = self._characters.get_all()
        if key is CharacterSortKey.NAME:
            characters.sort(key=lambda c: c.name.casefold())
        elif key is CharacterSortKey.LEVEL:
            characters.sort(key=lambda c: c.level, reverse=True)
        elif key is CharacterSortKey.POWER:
            characters.sort(key=lambda c: c.calculate_power(), reverse=True)
        return characters

    def get_character_by_id(self, character_id: int) -> Character:
        """Get a character.

        Raises:
            ResourceNotFoundError: If the id is not positive or not stored.
        """
        validate_id(character_id, resource="character")
        character = self._characters.get_by_id(character_id)
        if character is None:
            raise ResourceNotFoundError(
                f"Character with ID {character_id} not found",
                resource="character",
                resource_id=character_id,
            )
        return character

    def get_characters_by_type(self, character_type: CharacterType | str) -> list[Character]:
        """List characters of one variant.

        Raises:
            InvalidInputError: If the type is not WARRIOR, MAGE or ROGUE.
        """
        try:
            resolved = CharacterType(str(character_type).upper())
        except ValueError as exc:
            raise InvalidInputError(
                f"Unknown character type: {character_type}",
                field_name="character_type",
                invalid_value=character_type,
            ) from exc
        return self._characters.get_by_type(resolved)

    def update_character(self, character_id: int, character: Character) -> Character:
        """Overwrite the mutable fields of a stored character.

        Id, type, creation date and guild membership are kept from the
        stored row; membership only changes through the guild service.

        Returns:
            The character as stored.

        Raises:
            InvalidInputError: If a field is invalid or the type changes.
            DuplicateResourceError: If the new name belongs to another character.
            ResourceNotFoundError: If the id is unknown.
        """
        validate_character(character)
        existing = self.get_character_by_id(character_id)

        if character.character_type != existing.character_type:
            raise InvalidInputError(
                "Character type cannot be changed",
                field_name="character_type",
                invalid_value=character.character_type.value,
            )
        self._ensure_name_available(character.name, exclude_id=character_id)

        updated = character.model_copy(
            update={
                "id": character_id,
                "guild_id": existing.guild_id,
                "created_date": existing.created_date,
            }
        )
        if not self._characters.update(character_id, updated):
            raise ResourceNotFoundError(
                f"Character with ID {character_id} not found",
                resource="character",
                resource_id=character_id,
            )
        logger.info("Character updated", character_id=character_id, name=updated.name)
        return updated

    def delete_character(self, character_id: int) -> Character:
        """Delete a character, its attributes and its equipment.

        A guild member is removed from its guild first, in the same
        transaction, so the member count never goes stale.

        Returns:
            The deleted character.
        """
        character = self.get_character_by_id(character_id)

        with self._db.transaction():
            if character.guild_id is not None:
                guild = self._require_guild(character.guild_id)
                guild.remove_member()
                self._guilds.update(character.guild_id, guild)
            if not self._characters.delete(character_id):
                raise ResourceNotFoundError(
                    f"Character with ID {character_id} not found",
                    resource="character",
                    resource_id=character_id,
                )

        logger.info(
            "Character removed",
            character_id=character_id,
            name=character.name,
            guild_id=character.guild_id,
        )
        return character

    # =========================================================================
    # Progression
    # =========================================================================

    def add_experience(self, character_id: int, xp: int) -> ExperienceResult:
        """Award experience and level up at most once.

        Raises:
            InvalidInputError: If ``xp`` is not positive.
            ResourceNotFoundError: If the id is unknown.
        """
        if xp <= 0:
            raise InvalidInputError(
                "Experience to add must be positive",
                field_name="xp",
                invalid_value=xp,
            )
        character = self.get_character_by_id(character_id)
        previous_level = character.level

        character.gain_experience(xp)
        leveled_up = character.can_level_up()
        if leveled_up:
            character.level_up()

        self._characters.update(character_id, character)
        logger.info(
            "Experience added",
            character_id=character_id,
            xp=xp,
            experience=character.experience,
            leveled_up=leveled_up,
        )
        return ExperienceResult(
            character=character,
            previous_level=previous_level,
            leveled_up=leveled_up,
        )

    def level_up_character(self, character_id: int) -> Character:
        """Force one level-up regardless of experience.

        Raises:
            MaxLevelReachedError: If the character is at level 100.
        """
        character = self.get_character_by_id(character_id)
        character.level_up()
        self._characters.update(character_id, character)
        logger.info("Character leveled up", character_id=character_id, level=character.level)
        return character

    # =========================================================================
    # Reports
    # =========================================================================

    def get_statistics(self) -> CharacterStatistics:
        characters = self._characters.get_all()
        if not characters:
            return CharacterStatistics()

        strongest = max(characters, key=lambda c: c.calculate_power())
        by_type = {character_type: 0 for character_type in CharacterType}
        for character in characters:
            by_type[character.character_type] += 1

        return CharacterStatistics(
            total=len(characters),
            by_type=by_type,
            average_level=round(sum(c.level for c in characters) / len(characters), 2),
            total_experience=sum(c.experience for c in characters),
            unaffiliated=sum(1 for c in characters if c.guild_id is None),
            strongest_name=strongest.name,
            strongest_power=strongest.calculate_power(),
        )

    def simulate_combat(self, attacker_id: int, defender_id: int) -> CombatReport:
        """Simulate a fight between two stored characters. Nothing is saved."""
        if attacker_id == defender_id:
            raise InvalidInputError(
                "A character cannot fight itself",
                field_name="defender_id",
                invalid_value=defender_id,
            )
        attacker = self.get_character_by_id(attacker_id)
        defender = self.get_character_by_id(defender_id)
        report = simulate_combat(attacker, defender, max_rounds=self._combat_max_rounds)
        logger.info(
            "Combat simulated",
            attacker_id=attacker_id,
            defender_id=defender_id,
            winner=report.winner_name,
            attacks=len(report.rounds),
        )
        return report

    # =========================================================================
    # Equipment
    # =========================================================================

    def add_equipment(self, character_id: int, equipment: Equipment) -> Equipment:
        """Give an item to a character."""
        validate_equipment(equipment)
        self.get_character_by_id(character_id)
        stored = self._equipment.create(equipment.model_copy(update={"character_id": character_id}))
        logger.info("Equipment added", equipment_id=stored.id, character_id=character_id)
        return stored

    def get_equipment(self, character_id: int) -> list[Equipment]:
        self.get_character_by_id(character_id)
        return self._equipment.get_by_character(character_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _ensure_name_available(self, name: str, *, exclude_id: int | None = None) -> None:
        clash = self._characters.get_by_name(name)
        if clash is not None and clash.id != exclude_id:
            logger.info("Duplicate character name rejected", name=name)
            raise DuplicateResourceError(
                f"Character with name '{name}' already exists",
                resource="character",
                name=name,
            )

    def _require_guild(self, guild_id: int) -> Guild:
        guild = self._guilds.get_by_id(guild_id)
        if guild is None:
            raise ResourceNotFoundError(
                f"Guild with ID {guild_id} not found",
                resource="guild",
                resource_id=guild_id,
            )
        return guild


__all__ = [
    "CharacterService",
]
