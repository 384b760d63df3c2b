"""Data access for characters.

A character is stored as one row in ``characters`` plus one row in the
attribute table of its variant. ``_VARIANT_TABLES`` maps the
``character_type`` discriminator to that table and its columns; reads
join all three attribute tables and pick the columns for the row's type.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ValidationError

from guildhall.core.exceptions import DatabaseOperationError
from guildhall.core.logging import get_logger
from guildhall.models.characters import CHARACTER_ADAPTER, Character
from guildhall.models.enums import CharacterType
from guildhall.storage.database import Database, name_key

logger = get_logger(__name__)


_VARIANT_TABLES: dict[CharacterType, tuple[str, tuple[str, ...]]] = {
    CharacterType.WARRIOR: ("warrior_attributes", ("strength", "armor", "weapon_type")),
    CharacterType.MAGE: ("mage_attributes", ("mana", "intelligence", "spell_school")),
    CharacterType.ROGUE: ("rogue_attributes", ("agility", "stealth", "critical_chance")),
}

_BASE_COLUMNS = (
    "id",
    "name",
    "character_type",
    "level",
    "experience",
    "health_points",
    "guild_id",
    "created_date",
)

_SELECT_CHARACTERS = """
    SELECT c.id, c.name, c.character_type, c.level, c.experience,
           c.health_points, c.guild_id, c.created_date,
           w.strength, w.armor, w.weapon_type,
           m.mana, m.intelligence, m.spell_school,
           r.agility, r.stealth, r.critical_chance
    FROM characters c
    LEFT JOIN warrior_attributes w ON w.character_id = c.id
    LEFT JOIN mage_attributes m ON m.character_id = c.id
    LEFT JOIN rogue_attributes r ON r.character_id = c.id
"""


def _row_to_character(row: Any) -> Character:
    """Rebuild a character variant from a joined row.

    Raises:
        DatabaseOperationError: If the stored row is incomplete or invalid.
    """
    character_type = CharacterType(row["character_type"])
    _, columns = _VARIANT_TABLES[character_type]
    data = {column: row[column] for column in _BASE_COLUMNS}
    data["character_type"] = character_type
    data["created_date"] = datetime.fromisoformat(row["created_date"])
    data.update({column: row[column] for column in columns})
    try:
        return CHARACTER_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise DatabaseOperationError(
            f"Stored character {row['id']} is invalid: {exc.error_count()} error(s)",
            operation="read_character",
            details={"character_id": row["id"]},
        ) from exc


def _attribute_values(character: Character) -> tuple[str, tuple[str, ...], tuple[Any, ...]]:
    table, columns = _VARIANT_TABLES[character.character_type]
    return table, columns, tuple(getattr(character, column) for column in columns)


class CharacterRepository:
    """CRUD and queries over stored characters."""

    def __init__(self, db: Database) -> None:
        self._db = db

    # =========================================================================
    # Create
    # =========================================================================

    def create(self, character: Character) -> Character:
        """Insert the base row and the variant attribute row.

        Args:
            character: Character to store; its ``id`` is ignored.

        Returns:
            A copy of the character carrying the new id.
        """
        table, columns, values = _attribute_values(character)

        with self._db.transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO characters
                    (name, name_key, character_type, level, experience, health_points, guild_id, created_date)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    character.name,
                    name_key(character.name),
                    character.character_type.value,
                    character.level,
                    character.experience,
                    character.health_points,
                    character.guild_id,
                    character.created_date.isoformat(),
                ),
            )
            character_id = cursor.lastrowid
            placeholders = ", ".join("?" for _ in columns)
            conn.execute(
                f"INSERT INTO {table} (character_id, {', '.join(columns)}) VALUES (?, {placeholders})",
                (character_id, *values),
            )

        logger.debug(
            "Character stored",
            character_id=character_id,
            name=character.name,
            character_type=character.character_type.value,
        )
        return character.model_copy(update={"id": character_id})

    # =========================================================================
    # Read
    # =========================================================================

    def _fetch_all(self, where: str = "", params: tuple[Any, ...] = ()) -> list[Character]:
        with self._db.transaction() as conn:
            rows = conn.execute(f"{_SELECT_CHARACTERS} {where} ORDER BY c.id", params).fetchall()
        return [_row_to_character(row) for row in rows]

    def get_all(self) -> list[Character]:
        return self._fetch_all()

    def get_by_id(self, character_id: int) -> Character | None:
        """Get a character by id, or ``None`` if absent."""
        found = self._fetch_all("WHERE c.id = ?", (character_id,))
        return found[0] if found else None

    def get_by_name(self, name: str) -> Character | None:
        """Get a character by name, ignoring case."""
        found = self._fetch_all("WHERE c.name_key = ?", (name_key(name),))
        return found[0] if found else None

    def get_by_type(self, character_type: CharacterType) -> list[Character]:
        return self._fetch_all("WHERE c.character_type = ?", (character_type.value,))

    def get_by_guild(self, guild_id: int) -> list[Character]:
        return self._fetch_all("WHERE c.guild_id = ?", (guild_id,))

    def count_by_guild(self, guild_id: int) -> int:
        """Count characters whose ``guild_id`` references the guild."""
        with self._db.transaction() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM characters WHERE guild_id = ?", (guild_id,)
            ).fetchone()[0]

    def count(self) -> int:
        with self._db.transaction() as conn:
            return conn.execute("SELECT COUNT(*) FROM characters").fetchone()[0]

    # =========================================================================
    # Update
    # =========================================================================

    def update(self, character_id: int, character: Character) -> bool:
        """Overwrite every mutable column of a stored character.

        The base row and the attribute row are written in one transaction.

        Returns:
            True if updated, False if no character has that id.
        """
        table, columns, values = _attribute_values(character)
        assignments = ", ".join(f"{column} = ?" for column in columns)

        with self._db.transaction() as conn:
            cursor = conn.execute(
                """
                UPDATE characters
                SET name = ?, name_key = ?, level = ?, experience = ?, health_points = ?, guild_id = ?
                WHERE id = ?
                """,
                (
                    character.name,
                    name_key(character.name),
                    character.level,
                    character.experience,
                    character.health_points,
                    character.guild_id,
                    character_id,
                ),
            )
            if cursor.rowcount == 0:
                return False
            conn.execute(
                f"UPDATE {table} SET {assignments} WHERE character_id = ?",
                (*values, character_id),
            )

        logger.debug("Character updated", character_id=character_id, level=character.level)
        return True

    def set_guild(self, character_id: int, guild_id: int | None) -> bool:
        """Point a character at a guild, or clear it with ``None``."""
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "UPDATE characters SET guild_id = ? WHERE id = ?",
                (guild_id, character_id),
            )
            updated = cursor.rowcount > 0

        if updated:
            logger.debug("Character guild set", character_id=character_id, guild_id=guild_id)
        return updated

    # =========================================================================
    # Delete
    # =========================================================================

    def delete(self, character_id: int) -> bool:
        """Delete a character with its attribute and equipment rows.

        Returns:
            True if deleted, False if not found.
        """
        with self._db.transaction() as conn:
            conn.execute("DELETE FROM equipment WHERE character_id = ?", (character_id,))
            for table, _ in _VARIANT_TABLES.values():
                conn.execute(f"DELETE FROM {table} WHERE character_id = ?", (character_id,))
            cursor = conn.execute("DELETE FROM characters WHERE id = ?", (character_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug("Character deleted", character_id=character_id)
        return deleted


__all__ = [
    "CharacterRepository",
]
