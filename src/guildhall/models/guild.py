"""Guild and equipment models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from guildhall.core.constants import MIN_GUILD_LEVEL
from guildhall.core.exceptions import BusinessRuleViolationError
from guildhall.models.enums import EquipmentType, Rarity


class Guild(BaseModel):
    """A guild characters can join.

    ``member_count`` mirrors the number of characters whose ``guild_id``
    points at this guild. Only the membership operations of the guild
    service change it.

    Attributes:
        id: Storage-assigned identifier.
        guild_name: Unique (case-insensitive) guild name.
        level: Guild level, no upper bound.
        member_count: Number of member characters.
        created_date: When the guild was founded.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    id: int | None = Field(default=None, frozen=True, description="Storage-assigned identifier")
    guild_name: str = Field(description="Guild name")
    level: int = Field(default=MIN_GUILD_LEVEL, ge=MIN_GUILD_LEVEL, description="Guild level")
    member_count: int = Field(default=0, ge=0, description="Number of members")
    created_date: datetime = Field(
        default_factory=datetime.now,
        frozen=True,
        description="Creation timestamp",
    )

    def add_member(self) -> None:
        self.member_count += 1

    def remove_member(self) -> None:
        """Decrement the member count.

        Raises:
            BusinessRuleViolationError: If the guild has no members.
        """
        if self.member_count == 0:
            raise BusinessRuleViolationError(
                f"Guild '{self.guild_name}' has no members to remove",
                rule="member_count_non_negative",
            )
        self.member_count -= 1

    def level_up(self) -> None:
        self.level += 1

    def display_info(self) -> str:
        return (
            f"{self.guild_name} (id={self.id})\n"
            f"  Level {self.level} | Members {self.member_count}"
            f" | Founded {self.created_date:%Y-%m-%d}"
        )


class Equipment(BaseModel):
    """An item owned by exactly one character.

    Attributes:
        id: Storage-assigned identifier.
        name: Item name.
        equipment_type: Slot the item occupies.
        bonus_stats: Flat stat bonus granted by the item.
        rarity: Rarity tier.
        character_id: Owning character.
    """

    model_config = ConfigDict(extra="forbid")

    id: int | None = Field(default=None, description="Storage-assigned identifier")
    name: str = Field(min_length=1, max_length=100, description="Item name")
    equipment_type: EquipmentType = Field(description="Equipment slot")
    bonus_stats: int = Field(default=0, ge=0, description="Stat bonus")
    rarity: Rarity = Field(default=Rarity.COMMON, description="Rarity tier")
    character_id: int | None = Field(default=None, description="Owning character")


__all__ = [
    "Guild",
    "Equipment",
]
