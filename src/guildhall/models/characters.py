"""Character entity models.

A character is a ``GameEntity`` specialised into one of three variants.
Variants share the base attributes and add their own stats plus their own
rules for power, stat growth on level-up, and combat numbers. The
``character_type`` field is the discriminator used both by pydantic and by
the storage layer to pick the attribute table.

Entities:
    GameEntity: Abstract base class with progression rules.
    Warrior: Strength/armor fighter.
    Mage: Intelligence/mana caster.
    Rogue: Agility/stealth striker with critical hits.
    Character: Discriminated union of the three variants.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from guildhall.core.constants import (
    BASE_HEALTH,
    HEALTH_PER_LEVEL,
    MAX_CHARACTER_LEVEL,
    MIN_CHARACTER_LEVEL,
    XP_PER_LEVEL,
)
from guildhall.core.exceptions import InvalidInputError, MaxLevelReachedError
from guildhall.models.enums import CharacterType


# =============================================================================
# Base Entity
# =============================================================================


class GameEntity(BaseModel, ABC):
    """Base class for all characters.

    Never instantiated directly; use one of the variants.

    Attributes:
        id: Storage-assigned identifier, ``None`` until created.
        name: Character name.
        character_type: Variant discriminator, fixed at creation.
        level: Current level (1-100).
        experience: Accumulated experience points.
        health_points: Maximum health.
        guild_id: Guild the character belongs to, if any.
        created_date: When the character was created.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    id: int | None = Field(
        default=None,
        frozen=True,
        description="Storage-assigned identifier",
    )
    name: str = Field(description="Character name")
    character_type: CharacterType = Field(
        frozen=True,
        description="Entity type discriminator",
    )
    level: int = Field(
        default=MIN_CHARACTER_LEVEL,
        ge=MIN_CHARACTER_LEVEL,
        le=MAX_CHARACTER_LEVEL,
        description="Character level",
    )
    experience: int = Field(default=0, ge=0, description="Experience points")
    health_points: int = Field(gt=0, description="Maximum health")
    guild_id: int | None = Field(default=None, description="Guild membership")
    created_date: datetime = Field(
        default_factory=datetime.now,
        frozen=True,
        description="Creation timestamp",
    )

    @model_validator(mode="before")
    @classmethod
    def default_health(cls, data: Any) -> Any:
        """Derive health from type and level when it is not supplied."""
        if not isinstance(data, dict) or data.get("health_points") is not None:
            return data
        character_type = data.get("character_type", cls.model_fields["character_type"].default)
        level = data.get("level", MIN_CHARACTER_LEVEL)
        if isinstance(character_type, str) and isinstance(level, int):
            key = str(character_type)
            if key in BASE_HEALTH:
                data = dict(data)
                data["health_points"] = BASE_HEALTH[key] + HEALTH_PER_LEVEL[key] * (level - 1)
        return data

    # -------------------------------------------------------------------------
    # Progression
    # -------------------------------------------------------------------------

    @staticmethod
    def required_xp(level: int) -> int:
        """Experience needed to advance past ``level``."""
        return level * XP_PER_LEVEL

    def gain_experience(self, amount: int) -> None:
        """Add experience points.

        Raises:
            InvalidInputError: If ``amount`` is negative.
        """
        if amount < 0:
            raise InvalidInputError(
                "Experience gain cannot be negative",
                field_name="experience",
                invalid_value=amount,
            )
        self.experience += amount

    def can_level_up(self) -> bool:
        """Check whether accumulated experience crosses the level threshold."""
        return (
            self.level < MAX_CHARACTER_LEVEL
            and self.experience >= self.required_xp(self.level)
        )

    def level_up(self) -> None:
        """Advance one level and apply the variant's stat growth.

        Raises:
            MaxLevelReachedError: If the character is already at level 100.
        """
        if self.level >= MAX_CHARACTER_LEVEL:
            raise MaxLevelReachedError(
                f"{self.name} is already at the maximum level",
                max_level=MAX_CHARACTER_LEVEL,
            )
        self.level += 1
        self.health_points += HEALTH_PER_LEVEL[self.character_type.value]
        self._apply_level_bonus()

    def reset_experience(self) -> None:
        """Explicitly zero the experience counter."""
        self.experience = 0

    @abstractmethod
    def _apply_level_bonus(self) -> None:
        ...

    # -------------------------------------------------------------------------
    # Combat
    # -------------------------------------------------------------------------

    @abstractmethod
    def calculate_power(self) -> int:
        """Overall strength rating used for rankings."""
        ...

    @abstractmethod
    def calculate_damage(self) -> int:
        """Base damage of a single hit."""
        ...

    def attack(self) -> int:
        """Damage dealt by one attack action."""
        return self.calculate_damage()

    @abstractmethod
    def defend(self) -> int:
        """Damage absorbed from each incoming hit."""
        ...

    def display_info(self) -> str:
        """Render a multi-line description for the console."""
        guild = str(self.guild_id) if self.guild_id is not None else "none"
        return "\n".join(
            [
                f"[{self.character_type.display_name}] {self.name} (id={self.id})",
                f"  Level {self.level} | XP {self.experience}/{self.required_xp(self.level)}"
                f" | HP {self.health_points}",
                f"  Guild: {guild}",
                f"  Power: {self.calculate_power()}",
            ]
        )


# =============================================================================
# Variants
# =============================================================================


class Warrior(GameEntity):
    """Melee fighter relying on strength and armor."""

    character_type: Literal[CharacterType.WARRIOR] = Field(
        default=CharacterType.WARRIOR,
        frozen=True,
        description="Entity type discriminator",
    )
    strength: int = Field(description="Physical strength")
    armor: int = Field(description="Armor rating")
    weapon_type: str = Field(description="Weapon of choice")

    def calculate_power(self) -> int:
        return self.strength * 2 + self.armor

    def _apply_level_bonus(self) -> None:
        self.strength += 5
        self.armor += 3

    def calculate_damage(self) -> int:
        return self.strength + self.level * 2

    def defend(self) -> int:
        return self.armor + self.level

    def display_info(self) -> str:
        return (
            super().display_info()
            + f"\n  Strength {self.strength} | Armor {self.armor} | Weapon {self.weapon_type}"
        )


class Mage(GameEntity):
    """Spellcaster relying on intelligence and mana."""

    character_type: Literal[CharacterType.MAGE] = Field(
        default=CharacterType.MAGE,
        frozen=True,
        description="Entity type discriminator",
    )
    mana: int = Field(description="Mana pool")
    intelligence: int = Field(description="Intelligence")
    spell_school: str = Field(description="School of magic")

    def calculate_power(self) -> int:
        return self.intelligence * 3 + self.mana // 2

    def _apply_level_bonus(self) -> None:
        self.intelligence += 4
        self.mana += 25

    def calculate_damage(self) -> int:
        return self.intelligence * 2 + self.mana // 10

    def defend(self) -> int:
        return self.intelligence // 2 + self.level

    def display_info(self) -> str:
        return (
            super().display_info()
            + f"\n  Intelligence {self.intelligence} | Mana {self.mana} | School {self.spell_school}"
        )


class Rogue(GameEntity):
    """Striker relying on agility, stealth and critical hits."""

    character_type: Literal[CharacterType.ROGUE] = Field(
        default=CharacterType.ROGUE,
        frozen=True,
        description="Entity type discriminator",
    )
    agility: int = Field(description="Agility")
    stealth: int = Field(description="Stealth")
    critical_chance: float = Field(ge=0.0, le=1.0, description="Critical hit chance")

    def calculate_power(self) -> int:
        return self.agility * 2 + self.stealth + round(self.critical_chance * 100)

    def _apply_level_bonus(self) -> None:
        self.agility += 5
        self.stealth += 3
        self.critical_chance = min(1.0, round(self.critical_chance + 0.02, 4))

    def calculate_damage(self) -> int:
        return self.agility + self.stealth // 2 + self.level

    def attack(self) -> int:
        # Expected value of a hit, crits double the damage.
        return round(self.calculate_damage() * (1 + self.critical_chance))

    def defend(self) -> int:
        return self.agility // 2 + self.level

    def display_info(self) -> str:
        return (
            super().display_info()
            + f"\n  Agility {self.agility} | Stealth {self.stealth}"
            f" | Crit {self.critical_chance:.0%}"
        )


# =============================================================================
# Discriminated Union
# =============================================================================

Character = Annotated[
    Warrior | Mage | Rogue,
    Field(discriminator="character_type"),
]
"""Any character variant, discriminated by ``character_type``.

Example:
    >>> data = {"character_type": "MAGE", "name": "Merlin", "mana": 100, ...}
    >>> isinstance(CHARACTER_ADAPTER.validate_python(data), Mage)
    True
"""

CHARACTER_ADAPTER: TypeAdapter[Character] = TypeAdapter(Character)


# =============================================================================
# Factory Functions
# =============================================================================


def create_warrior(
    name: str,
    level: int,
    strength: int,
    armor: int,
    weapon_type: str,
    *,
    health_points: int | None = None,
) -> Warrior:
    """Create a warrior with default health for its level.

    Example:
        >>> thorin = create_warrior("Thorin", 10, 50, 30, "Sword")
        >>> thorin.calculate_power()
        130
    """
    return Warrior(
        name=name,
        level=level,
        strength=strength,
        armor=armor,
        weapon_type=weapon_type,
        health_points=health_points,
    )


def create_mage(
    name: str,
    level: int,
    mana: int,
    intelligence: int,
    spell_school: str,
    *,
    health_points: int | None = None,
) -> Mage:
    """Create a mage with default health for its level."""
    return Mage(
        name=name,
        level=level,
        mana=mana,
        intelligence=intelligence,
        spell_school=spell_school,
        health_points=health_points,
    )


def create_rogue(
    name: str,
    level: int,
    agility: int,
    stealth: int,
    critical_chance: float,
    *,
    health_points: int | None = None,
) -> Rogue:
    """Create a rogue with default health for its level."""
    return Rogue(
        name=name,
        level=level,
        agility=agility,
        stealth=stealth,
        critical_chance=critical_chance,
        health_points=health_points,
    )


__all__ = [
    "GameEntity",
    "Warrior",
    "Mage",
    "Rogue",
    "Character",
    "CHARACTER_ADAPTER",
    "create_warrior",
    "create_mage",
    "create_rogue",
]
