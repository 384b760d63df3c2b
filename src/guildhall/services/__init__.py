"""Validation and business-rule layer.

Sits between the console controllers and the repositories. Services
validate input, enforce uniqueness and membership rules, and group
multi-row writes into single transactions.
"""

from guildhall.services.character_service import CharacterService
from guildhall.services.guild_service import GuildService

__all__ = [
    "CharacterService",
    "GuildService",
]
