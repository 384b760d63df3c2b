"""Enumeration types for the Guildhall character manager."""

from __future__ import annotations

from enum import StrEnum


class CharacterType(StrEnum):
    """Character variants.

    Values match the ``character_type`` column of the characters table.
    """

    WARRIOR = "WARRIOR"
    MAGE = "MAGE"
    ROGUE = "ROGUE"

    @property
    def display_name(self) -> str:
        """Get the capitalised name (e.g. 'Warrior')."""
        return self.value.capitalize()


class EquipmentType(StrEnum):
    """Equipment slots."""

    WEAPON = "WEAPON"
    ARMOR = "ARMOR"
    ACCESSORY = "ACCESSORY"


class Rarity(StrEnum):
    """Equipment rarity tiers."""

    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    EPIC = "EPIC"
    LEGENDARY = "LEGENDARY"


class CharacterSortKey(StrEnum):
    """Orderings available for character listings."""

    ID = "id"
    NAME = "name"
    LEVEL = "level"
    POWER = "power"


__all__ = [
    "CharacterType",
    "EquipmentType",
    "Rarity",
    "CharacterSortKey",
]
