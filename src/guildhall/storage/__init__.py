"""Storage module for Guildhall persistence.

Provides SQLite-based storage for:
- Characters (base row + per-variant attribute row)
- Guilds
- Equipment owned by characters
"""

from guildhall.storage.character_repository import CharacterRepository
from guildhall.storage.database import Database
from guildhall.storage.guild_repository import EquipmentRepository, GuildRepository

__all__ = [
    "Database",
    "CharacterRepository",
    "GuildRepository",
    "EquipmentRepository",
]
