"""Application-wide constants for the Guildhall character manager.

Game rule limits shared by the entity model, the validation layer and
the schema CHECK constraints.
"""

from __future__ import annotations

# =============================================================================
# Character Limits
# =============================================================================

MIN_CHARACTER_LEVEL = 1
"""Minimum character level."""

MAX_CHARACTER_LEVEL = 100
"""Maximum character level."""

XP_PER_LEVEL = 1000
"""Experience required per level: requiredXP(level) = level * XP_PER_LEVEL."""

CHARACTER_NAME_MIN_LENGTH = 3
CHARACTER_NAME_MAX_LENGTH = 50

# =============================================================================
# Guild Limits
# =============================================================================

MIN_GUILD_LEVEL = 1
"""Guilds have a floor but no ceiling."""

GUILD_NAME_MIN_LENGTH = 3
GUILD_NAME_MAX_LENGTH = 100

# =============================================================================
# Health
# =============================================================================

BASE_HEALTH = {
    "WARRIOR": 150,
    "MAGE": 80,
    "ROGUE": 100,
}
"""Starting health points per character type at level 1."""

HEALTH_PER_LEVEL = {
    "WARRIOR": 20,
    "MAGE": 10,
    "ROGUE": 15,
}
"""Health added per level, both by default stats and by level-up."""

# =============================================================================
# Storage
# =============================================================================

IN_MEMORY_DATABASE = ":memory:"


__all__ = [
    "MIN_CHARACTER_LEVEL",
    "MAX_CHARACTER_LEVEL",
    "XP_PER_LEVEL",
    "CHARACTER_NAME_MIN_LENGTH",
    "CHARACTER_NAME_MAX_LENGTH",
    "MIN_GUILD_LEVEL",
    "GUILD_NAME_MIN_LENGTH",
    "GUILD_NAME_MAX_LENGTH",
    "BASE_HEALTH",
    "HEALTH_PER_LEVEL",
    "IN_MEMORY_DATABASE",
]
