"""Data access for guilds and equipment."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from guildhall.core.logging import get_logger
from guildhall.models.enums import EquipmentType, Rarity
from guildhall.models.guild import Equipment, Guild
from guildhall.storage.database import Database, name_key

logger = get_logger(__name__)


def _row_to_guild(row: Any) -> Guild:
    return Guild(
        id=row["id"],
        guild_name=row["guild_name"],
        level=row["level"],
        member_count=row["member_count"],
        created_date=datetime.fromisoformat(row["created_date"]),
    )


def _row_to_equipment(row: Any) -> Equipment:
    return Equipment(
        id=row["id"],
        name=row["name"],
        equipment_type=EquipmentType(row["equipment_type"]),
        bonus_stats=row["bonus_stats"],
        rarity=Rarity(row["rarity"]),
        character_id=row["character_id"],
    )


class GuildRepository:
    """CRUD over stored guilds."""

    _SELECT = "SELECT id, guild_name, level, member_count, created_date FROM guilds"

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, guild: Guild) -> Guild:
        """Insert a guild.

        Returns:
            A copy of the guild carrying the new id.
        """
        with self._db.transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO guilds (guild_name, guild_name_key, level, member_count, created_date)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    guild.guild_name,
                    name_key(guild.guild_name),
                    guild.level,
                    guild.member_count,
                    guild.created_date.isoformat(),
                ),
            )
            guild_id = cursor.lastrowid

        logger.debug("Guild stored", guild_id=guild_id, guild_name=guild.guild_name)
        return guild.model_copy(update={"id": guild_id})

    def get_all(self) -> list[Guild]:
        with self._db.transaction() as conn:
            rows = conn.execute(f"{self._SELECT} ORDER BY id").fetchall()
        return [_row_to_guild(row) for row in rows]

    def get_by_id(self, guild_id: int) -> Guild | None:
        """Get a guild by id, or ``None`` if absent."""
        with self._db.transaction() as conn:
            row = conn.execute(f"{self._SELECT} WHERE id = ?", (guild_id,)).fetchone()
        return _row_to_guild(row) if row else None

    def get_by_name(self, guild_name: str) -> Guild | None:
        """Get a guild by name, ignoring case."""
        with self._db.transaction() as conn:
            row = conn.execute(
                f"{self._SELECT} WHERE guild_name_key = ?", (name_key(guild_name),)
            ).fetchone()
        return _row_to_guild(row) if row else None

    def update(self, guild_id: int, guild: Guild) -> bool:
        """Overwrite name, level and member count.

        Returns:
            True if updated, False if not found.
        """
        with self._db.transaction() as conn:
            cursor = conn.execute(
                """
                UPDATE guilds SET guild_name = ?, guild_name_key = ?, level = ?, member_count = ?
                WHERE id = ?
                """,
                (
                    guild.guild_name,
                    name_key(guild.guild_name),
                    guild.level,
                    guild.member_count,
                    guild_id,
                ),
            )
            updated = cursor.rowcount > 0

        if updated:
            logger.debug(
                "Guild updated",
                guild_id=guild_id,
                level=guild.level,
                member_count=guild.member_count,
            )
        return updated

    def delete(self, guild_id: int) -> bool:
        """Delete a guild row.

        Returns:
            True if deleted, False if not found.
        """
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM guilds WHERE id = ?", (guild_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug("Guild deleted", guild_id=guild_id)
        return deleted


class EquipmentRepository:
    """Equipment rows owned by characters."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, equipment: Equipment) -> Equipment:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO equipment (name, equipment_type, bonus_stats, rarity, character_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    equipment.name,
                    equipment.equipment_type.value,
                    equipment.bonus_stats,
                    equipment.rarity.value,
                    equipment.character_id,
                ),
            )
            equipment_id = cursor.lastrowid

        logger.debug(
            "Equipment stored",
            equipment_id=equipment_id,
            character_id=equipment.character_id,
        )
        return equipment.model_copy(update={"id": equipment_id})

    def get_by_character(self, character_id: int) -> list[Equipment]:
        with self._db.transaction() as conn:
            rows = conn.execute(
                """
                SELECT id, name, equipment_type, bonus_stats, rarity, character_id
                FROM equipment WHERE character_id = ? ORDER BY id
                """,
                (character_id,),
            ).fetchall()
        return [_row_to_equipment(row) for row in rows]

    def delete(self, equipment_id: int) -> bool:
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM equipment WHERE id = ?", (equipment_id,))
            return cursor.rowcount > 0


__all__ = [
    "GuildRepository",
    "EquipmentRepository",
]
