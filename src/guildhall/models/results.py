"""Result and report models returned by the service and controller layers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from guildhall.core.exceptions import ErrorKind, GuildhallError
from guildhall.models.characters import Character
from guildhall.models.enums import CharacterType
from guildhall.models.guild import Guild


class ExperienceResult(BaseModel):
    """Outcome of awarding experience to a character."""

    character: Character
    previous_level: int
    leveled_up: bool


class MembershipChange(BaseModel):
    """Character and guild after a membership change.

    ``guild`` is ``None`` when a character that belonged to no guild was
    asked to leave one.
    """

    character: Character
    guild: Guild | None = None

    @property
    def changed(self) -> bool:
        return self.guild is not None


class CharacterStatistics(BaseModel):
    """Aggregate figures over all stored characters."""

    total: int = 0
    by_type: dict[CharacterType, int] = Field(default_factory=dict)
    average_level: float = 0.0
    total_experience: int = 0
    unaffiliated: int = 0
    strongest_name: str | None = None
    strongest_power: int | None = None


class GuildStatistics(BaseModel):
    """Aggregate figures over all stored guilds."""

    total_guilds: int = 0
    total_members: int = 0
    average_level: float = 0.0
    largest_guild_name: str | None = None
    largest_guild_members: int = 0


class OperationResult(BaseModel):
    """Success-or-error result handed to the presentation layer.

    Attributes:
        success: Whether the operation completed.
        message: Human-readable summary.
        error_kind: Category of the failure, ``None`` on success.
        data: Optional payload (entity, list, report...).
    """

    success: bool
    message: str
    error_kind: ErrorKind | None = None
    data: Any = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> OperationResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def from_error(cls, error: GuildhallError) -> OperationResult:
        """Build a failed result from a domain exception."""
        return cls(success=False, message=error.message, error_kind=error.kind)


__all__ = [
    "ExperienceResult",
    "MembershipChange",
    "CharacterStatistics",
    "GuildStatistics",
    "OperationResult",
]
