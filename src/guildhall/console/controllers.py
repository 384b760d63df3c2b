"""Controllers between the console menu and the services.

Controllers take already-parsed arguments, build entities, call a
service and hand back an ``OperationResult``. Every ``GuildhallError`` is
turned into a failed result so the menu loop never has to catch anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from guildhall.core.config import Settings
from guildhall.core.exceptions import GuildhallError, InvalidInputError
from guildhall.core.logging import get_logger
from guildhall.models.characters import CHARACTER_ADAPTER, Character
from guildhall.models.enums import CharacterSortKey, CharacterType, EquipmentType, Rarity
from guildhall.models.guild import Equipment, Guild
from guildhall.models.results import OperationResult
from guildhall.services.character_service import CharacterService
from guildhall.services.guild_service import GuildService
from guildhall.storage.character_repository import CharacterRepository
from guildhall.storage.database import Database
from guildhall.storage.guild_repository import EquipmentRepository, GuildRepository

logger = get_logger(__name__)

T = TypeVar("T")

# Fields the console may change on an existing character.
_MUTABLE_CHARACTER_FIELDS = frozenset(
    {
        "name",
        "level",
        "experience",
        "health_points",
        "strength",
        "armor",
        "weapon_type",
        "mana",
        "intelligence",
        "spell_school",
        "agility",
        "stealth",
        "critical_chance",
    }
)


def _first_error(exc: ValidationError) -> InvalidInputError:
    error = exc.errors()[0]
    # Union errors are prefixed with the discriminator tag; keep the field.
    field_name = str(error["loc"][-1]) if error["loc"] else None
    return InvalidInputError(
        f"Invalid {field_name or 'value'}: {error['msg']}",
        field_name=field_name,
        invalid_value=error.get("input") if not isinstance(error.get("input"), dict) else None,
    )


def build_character(character_type: CharacterType | str, **fields: Any) -> Character:
    """Build a character variant from console input.

    Raises:
        InvalidInputError: If the type is unknown or a field fails model validation.
    """
    try:
        resolved = CharacterType(str(character_type).upper())
    except ValueError as exc:
        raise InvalidInputError(
            f"Unknown character type: {character_type}",
            field_name="character_type",
            invalid_value=character_type,
        ) from exc
    try:
        return CHARACTER_ADAPTER.validate_python({"character_type": resolved, **fields})
    except ValidationError as exc:
        raise _first_error(exc) from exc


def build_guild(guild_name: str, level: int = 1) -> Guild:
    try:
        return Guild(guild_name=guild_name, level=level)
    except ValidationError as exc:
        raise _first_error(exc) from exc


def _attempt(operation: Callable[[], T], describe: Callable[[T], str]) -> OperationResult:
    try:
        value = operation()
    except GuildhallError as exc:
        logger.info("Operation failed", error_kind=exc.kind.value, error=exc.message)
        return OperationResult.from_error(exc)
    return OperationResult.ok(describe(value), data=value)


# =============================================================================
# Character Controller
# =============================================================================


class CharacterController:
    """Character menu actions."""

    def __init__(self, service: CharacterService, *, default_sort: str = CharacterSortKey.ID) -> None:
        self._service = service
        self._default_sort = default_sort

    def create_character(self, character_type: CharacterType | str, **fields: Any) -> OperationResult:
        def create() -> int:
            return self._service.create_character(build_character(character_type, **fields))

        return _attempt(create, lambda new_id: f"Character created with ID {new_id}")

    def list_characters(self, sort_by: CharacterSortKey | str | None = None) -> OperationResult:
        return _attempt(
            lambda: self._service.get_all_characters(sort_by or self._default_sort),
            lambda found: f"{len(found)} character(s)",
        )

    def get_character(self, character_id: int) -> OperationResult:
        return _attempt(
            lambda: self._service.get_character_by_id(character_id),
            lambda character: f"Found {character.name}",
        )

    def characters_by_type(self, character_type: CharacterType | str) -> OperationResult:
        return _attempt(
            lambda: self._service.get_characters_by_type(character_type),
            lambda found: f"{len(found)} {str(character_type).upper()} character(s)",
        )

    def update_character(self, character_id: int, **changes: Any) -> OperationResult:
        """Apply a partial change set on top of the stored character."""

        def update() -> Character:
            unknown = set(changes) - _MUTABLE_CHARACTER_FIELDS
            if unknown:
                raise InvalidInputError(
                    f"Fields cannot be updated: {', '.join(sorted(unknown))}",
                    field_name=sorted(unknown)[0],
                )
            existing = self._service.get_character_by_id(character_id)
            data = existing.model_dump(exclude={"character_type"})
            data.update({key: value for key, value in changes.items() if value is not None})
            return self._service.update_character(
                character_id, build_character(existing.character_type, **data)
            )

        return _attempt(update, lambda character: f"{character.name} updated")

    def delete_character(self, character_id: int) -> OperationResult:
        return _attempt(
            lambda: self._service.delete_character(character_id),
            lambda character: f"{character.name} deleted",
        )

    def add_experience(self, character_id: int, xp: int) -> OperationResult:
        def describe(result: Any) -> str:
            character = result.character
            if result.leveled_up:
                return f"{character.name} gained {xp} XP and reached level {character.level}!"
            return f"{character.name} gained {xp} XP (level {character.level})"

        return _attempt(lambda: self._service.add_experience(character_id, xp), describe)

    def level_up(self, character_id: int) -> OperationResult:
        return _attempt(
            lambda: self._service.level_up_character(character_id),
            lambda character: f"{character.name} is now level {character.level}",
        )

    def statistics(self) -> OperationResult:
        return _attempt(self._service.get_statistics, lambda stats: f"{stats.total} character(s)")

    def simulate_combat(self, attacker_id: int, defender_id: int) -> OperationResult:
        def describe(report: Any) -> str:
            if report.is_draw:
                return f"{report.first} and {report.second} fought to a draw"
            return f"{report.winner_name} wins after {report.round_count} round(s)"

        return _attempt(lambda: self._service.simulate_combat(attacker_id, defender_id), describe)

    def add_equipment(
        self,
        character_id: int,
        name: str,
        equipment_type: EquipmentType | str,
        bonus_stats: int = 0,
        rarity: Rarity | str = Rarity.COMMON,
    ) -> OperationResult:
        def add() -> Equipment:
            try:
                equipment = Equipment(
                    name=name,
                    equipment_type=str(equipment_type).upper(),
                    bonus_stats=bonus_stats,
                    rarity=str(rarity).upper(),
                )
            except ValidationError as exc:
                raise _first_error(exc) from exc
            return self._service.add_equipment(character_id, equipment)

        return _attempt(add, lambda item: f"{item.name} equipped (ID {item.id})")

    def list_equipment(self, character_id: int) -> OperationResult:
        return _attempt(
            lambda: self._service.get_equipment(character_id),
            lambda items: f"{len(items)} item(s)",
        )


# =============================================================================
# Guild Controller
# =============================================================================


class GuildController:
    """Guild menu actions."""

    def __init__(self, service: GuildService) -> None:
        self._service = service

    def create_guild(self, guild_name: str, level: int = 1) -> OperationResult:
        return _attempt(
            lambda: self._service.create_guild(build_guild(guild_name, level)),
            lambda new_id: f"Guild created with ID {new_id}",
        )

    def list_guilds(self) -> OperationResult:
        return _attempt(self._service.get_all_guilds, lambda found: f"{len(found)} guild(s)")

    def get_guild(self, guild_id: int) -> OperationResult:
        return _attempt(
            lambda: self._service.get_guild_by_id(guild_id),
            lambda guild: f"Found {guild.guild_name}",
        )

    def update_guild(
        self,
        guild_id: int,
        guild_name: str | None = None,
        level: int | None = None,
    ) -> OperationResult:
        def update() -> Guild:
            existing = self._service.get_guild_by_id(guild_id)
            changed = build_guild(
                guild_name if guild_name is not None else existing.guild_name,
                level if level is not None else existing.level,
            )
            return self._service.update_guild(guild_id, changed)

        return _attempt(update, lambda guild: f"{guild.guild_name} updated")

    def delete_guild(self, guild_id: int) -> OperationResult:
        return _attempt(
            lambda: self._service.delete_guild(guild_id),
            lambda guild: f"{guild.guild_name} deleted",
        )

    def add_character_to_guild(self, character_id: int, guild_id: int) -> OperationResult:
        return _attempt(
            lambda: self._service.add_character_to_guild(character_id, guild_id),
            lambda change: f"{change.character.name} joined {change.guild.guild_name}!",
        )

    def remove_character_from_guild(self, character_id: int) -> OperationResult:
        def describe(change: Any) -> str:
            if not change.changed:
                return f"{change.character.name} is not in any guild"
            return f"{change.character.name} left {change.guild.guild_name}"

        return _attempt(lambda: self._service.remove_character_from_guild(character_id), describe)

    def level_up_guild(self, guild_id: int) -> OperationResult:
        return _attempt(
            lambda: self._service.level_up_guild(guild_id),
            lambda guild: f"{guild.guild_name} is now level {guild.level}",
        )

    def guild_members(self, guild_id: int) -> OperationResult:
        return _attempt(
            lambda: self._service.get_guild_members(guild_id),
            lambda members: f"{len(members)} member(s)",
        )

    def statistics(self) -> OperationResult:
        return _attempt(self._service.get_statistics, lambda stats: f"{stats.total_guilds} guild(s)")


# =============================================================================
# Wiring
# =============================================================================


@dataclass
class Controllers:
    """Controllers sharing one open database."""

    characters: CharacterController
    guilds: GuildController


def create_controllers(db: Database, settings: Settings) -> Controllers:
    """Wire repositories, services and controllers around ``db``."""
    character_repository = CharacterRepository(db)
    guild_repository = GuildRepository(db)
    equipment_repository = EquipmentRepository(db)

    character_service = CharacterService(
        db,
        character_repository,
        guild_repository,
        equipment_repository,
        combat_max_rounds=settings.game.combat_max_rounds,
    )
    guild_service = GuildService(db, guild_repository, character_repository)

    return Controllers(
        characters=CharacterController(character_service, default_sort=settings.game.default_sort),
        guilds=GuildController(guild_service),
    )


__all__ = [
    "CharacterController",
    "GuildController",
    "Controllers",
    "build_character",
    "build_guild",
    "create_controllers",
]
