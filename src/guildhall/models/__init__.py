"""Pydantic V2 models for the Guildhall character manager.

Submodules:
    enums: Enumeration types (CharacterType, EquipmentType, Rarity, ...)
    characters: GameEntity, Warrior, Mage, Rogue and the Character union
    guild: Guild and Equipment
    combat: Deterministic combat simulation
    results: Service results, statistics and OperationResult

Example:
    >>> from guildhall.models import create_warrior, Guild
    >>> thorin = create_warrior("Thorin", 10, 50, 30, "Sword")
    >>> guild = Guild(guild_name="Dragon Slayers")
"""

from __future__ import annotations

from guildhall.models.characters import (
    CHARACTER_ADAPTER,
    Character,
    GameEntity,
    Mage,
    Rogue,
    Warrior,
    create_mage,
    create_rogue,
    create_warrior,
)
from guildhall.models.combat import CombatReport, CombatRound, simulate_combat
from guildhall.models.enums import CharacterSortKey, CharacterType, EquipmentType, Rarity
from guildhall.models.guild import Equipment, Guild
from guildhall.models.results import (
    CharacterStatistics,
    ExperienceResult,
    GuildStatistics,
    MembershipChange,
    OperationResult,
)


__all__ = [
    # Enums
    "CharacterType",
    "CharacterSortKey",
    "EquipmentType",
    "Rarity",
    # Characters
    "GameEntity",
    "Warrior",
    "Mage",
    "Rogue",
    "Character",
    "CHARACTER_ADAPTER",
    "create_warrior",
    "create_mage",
    "create_rogue",
    # Guilds
    "Guild",
    "Equipment",
    # Combat
    "CombatRound",
    "CombatReport",
    "simulate_combat",
    # Results
    "ExperienceResult",
    "MembershipChange",
    "CharacterStatistics",
    "GuildStatistics",
    "OperationResult",
]
