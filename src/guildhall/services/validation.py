"""Field-level validation shared by the services and the console.

Every check raises ``InvalidInputError`` and runs before any storage call.
"""

from __future__ import annotations

from guildhall.core.constants import (
    CHARACTER_NAME_MAX_LENGTH,
    CHARACTER_NAME_MIN_LENGTH,
    GUILD_NAME_MAX_LENGTH,
    GUILD_NAME_MIN_LENGTH,
    MAX_CHARACTER_LEVEL,
    MIN_CHARACTER_LEVEL,
    MIN_GUILD_LEVEL,
)
from guildhall.core.exceptions import InvalidInputError, ResourceNotFoundError
from guildhall.models.characters import Character, Mage, Rogue, Warrior
from guildhall.models.guild import Equipment, Guild


def _validate_name(name: str | None, *, label: str, min_length: int, max_length: int) -> None:
    if name is None or not name.strip():
        raise InvalidInputError(f"{label} cannot be empty", field_name="name")
    if not min_length <= len(name) <= max_length:
        raise InvalidInputError(
            f"{label} must be between {min_length} and {max_length} characters",
            field_name="name",
            invalid_value=name,
        )


def validate_character_name(name: str | None) -> None:
    _validate_name(
        name,
        label="Character name",
        min_length=CHARACTER_NAME_MIN_LENGTH,
        max_length=CHARACTER_NAME_MAX_LENGTH,
    )


def validate_guild_name(name: str | None) -> None:
    _validate_name(
        name,
        label="Guild name",
        min_length=GUILD_NAME_MIN_LENGTH,
        max_length=GUILD_NAME_MAX_LENGTH,
    )


def validate_level(level: int) -> None:
    if not MIN_CHARACTER_LEVEL <= level <= MAX_CHARACTER_LEVEL:
        raise InvalidInputError(
            f"Level must be between {MIN_CHARACTER_LEVEL} and {MAX_CHARACTER_LEVEL}",
            field_name="level",
            invalid_value=level,
        )


def validate_id(entity_id: int, *, resource: str) -> None:
    """Reject ids that can never exist.

    Raises:
        ResourceNotFoundError: If ``entity_id`` is not positive.
    """
    if entity_id <= 0:
        raise ResourceNotFoundError(
            f"Invalid {resource} ID: {entity_id}",
            resource=resource,
            resource_id=entity_id,
        )


def _require_non_negative(**stats: int | float) -> None:
    for field_name, value in stats.items():
        if value < 0:
            raise InvalidInputError(
                f"{field_name.replace('_', ' ').capitalize()} cannot be negative",
                field_name=field_name,
                invalid_value=value,
            )


def _require_text(**fields: str) -> None:
    for field_name, value in fields.items():
        if not value or not value.strip():
            raise InvalidInputError(
                f"{field_name.replace('_', ' ').capitalize()} is required",
                field_name=field_name,
            )


def validate_character(character: Character | None) -> None:
    """Validate name, level and the variant's stats.

    Raises:
        InvalidInputError: On the first violated constraint.
    """
    if character is None:
        raise InvalidInputError("Character cannot be null")

    validate_character_name(character.name)
    validate_level(character.level)
    _require_non_negative(experience=character.experience)

    if isinstance(character, Warrior):
        _require_non_negative(strength=character.strength, armor=character.armor)
        _require_text(weapon_type=character.weapon_type)
    elif isinstance(character, Mage):
        _require_non_negative(mana=character.mana, intelligence=character.intelligence)
        _require_text(spell_school=character.spell_school)
    elif isinstance(character, Rogue):
        _require_non_negative(agility=character.agility, stealth=character.stealth)


def validate_guild(guild: Guild | None) -> None:
    """Validate guild name length and level.

    Raises:
        InvalidInputError: On the first violated constraint.
    """
    if guild is None:
        raise InvalidInputError("Guild cannot be null")

    validate_guild_name(guild.guild_name)
    if guild.level < MIN_GUILD_LEVEL:
        raise InvalidInputError(
            f"Guild level must be at least {MIN_GUILD_LEVEL}",
            field_name="level",
            invalid_value=guild.level,
        )


def validate_equipment(equipment: Equipment) -> None:
    _require_text(name=equipment.name)
    _require_non_negative(bonus_stats=equipment.bonus_stats)


__all__ = [
    "validate_character",
    "validate_character_name",
    "validate_guild",
    "validate_guild_name",
    "validate_level",
    "validate_id",
    "validate_equipment",
]
