"""Business rules for guilds and guild membership.

Membership is a two-state machine per character: unaffiliated, or member
of exactly one guild. Joining and leaving each write the character row and
the guild row inside one transaction, so ``member_count`` always equals
the number of characters pointing at the guild.
"""

from __future__ import annotations

from guildhall.core.exceptions import (
    BusinessRuleViolationError,
    DuplicateResourceError,
    ResourceNotFoundError,
)
from guildhall.core.logging import get_logger
from guildhall.models.characters import Character
from guildhall.models.guild import Guild
from guildhall.models.results import GuildStatistics, MembershipChange
from guildhall.services.validation import validate_guild, validate_id
from guildhall.storage.character_repository import CharacterRepository
from guildhall.storage.database import Database
from guildhall.storage.guild_repository import GuildRepository

logger = get_logger(__name__)


class GuildService:
    """Guild operations for the presentation layer."""

    def __init__(
        self,
        db: Database,
        guilds: GuildRepository,
        characters: CharacterRepository,
    ) -> None:
        self._db = db
        self._guilds = guilds
        self._characters = characters

    # =========================================================================
    # CRUD
    # =========================================================================

    def create_guild(self, guild: Guild) -> int:
        """Validate and store a new guild with no members.

        Returns:
            The new guild id.

        Raises:
            InvalidInputError: If the name or level is invalid.
            DuplicateResourceError: If the name is taken (case-insensitive).
        """
        validate_guild(guild)
        self._ensure_name_available(guild.guild_name)

        created = self._guilds.create(guild.model_copy(update={"member_count": 0}))
        logger.info("Guild created", guild_id=created.id, guild_name=created.guild_name)
        return created.id

    def get_all_guilds(self) -> list[Guild]:
        return self._guilds.get_all()

    def get_guild_by_id(self, guild_id: int) -> Guild:
        """Get a guild.

        Raises:
            ResourceNotFoundError: If the id is not positive or not stored.
        """
        validate_id(guild_id, resource="guild")
        guild = self._guilds.get_by_id(guild_id)
        if guild is None:
            raise ResourceNotFoundError(
                f"Guild with ID {guild_id} not found",
                resource="guild",
                resource_id=guild_id,
            )
        return guild

    def update_guild(self, guild_id: int, guild: Guild) -> Guild:
        """Rename a guild or change its level.

        The member count is kept from storage.
        """
        validate_guild(guild)
        existing = self.get_guild_by_id(guild_id)
        self._ensure_name_available(guild.guild_name, exclude_id=guild_id)

        updated = existing.model_copy(update={"guild_name": guild.guild_name, "level": guild.level})
        self._guilds.update(guild_id, updated)
        logger.info(
            "Guild updated",
            guild_id=guild_id,
            guild_name=updated.guild_name,
            level=updated.level,
        )
        return updated

    def delete_guild(self, guild_id: int) -> Guild:
        """Delete an empty guild.

        Returns:
            The deleted guild.

        Raises:
            ResourceNotFoundError: If the id is unknown.
            BusinessRuleViolationError: If the guild still has members.
        """
        guild = self.get_guild_by_id(guild_id)
        if guild.member_count != 0:
            logger.info(
                "Guild deletion refused",
                guild_id=guild_id,
                member_count=guild.member_count,
            )
            raise BusinessRuleViolationError(
                f"Cannot delete guild '{guild.guild_name}': it still has "
                f"{guild.member_count} member(s)",
                rule="guild_not_empty",
                details={"guild_id": guild_id, "member_count": guild.member_count},
            )

        self._guilds.delete(guild_id)
        logger.info("Guild removed", guild_id=guild_id, guild_name=guild.guild_name)
        return guild

    # =========================================================================
    # Membership
    # =========================================================================

    def add_character_to_guild(self, character_id: int, guild_id: int) -> MembershipChange:
        """Make an unaffiliated character a member of a guild.

        Raises:
            ResourceNotFoundError: If either id is unknown.
            BusinessRuleViolationError: If the character already has a guild.
        """
        validate_id(character_id, resource="character")
        validate_id(guild_id, resource="guild")

        with self._db.transaction():
            character = self._require_character(character_id)
            guild = self.get_guild_by_id(guild_id)

            if character.guild_id is not None:
                raise BusinessRuleViolationError(
                    f"{character.name} already belongs to guild {character.guild_id}; "
                    "remove them from it first",
                    rule="single_guild_membership",
                    details={"character_id": character_id, "guild_id": character.guild_id},
                )

            self._characters.set_guild(character_id, guild_id)
            guild.add_member()
            self._guilds.update(guild_id, guild)

        character.guild_id = guild_id
        logger.info(
            "Character joined guild",
            character_id=character_id,
            guild_id=guild_id,
            member_count=guild.member_count,
        )
        return MembershipChange(character=character, guild=guild)

    def remove_character_from_guild(self, character_id: int) -> MembershipChange:
        """Make a character unaffiliated.

        A character with no guild is left as is and the returned change
        has ``guild=None``.

        Raises:
            ResourceNotFoundError: If the character id is unknown.
        """
        validate_id(character_id, resource="character")

        with self._db.transaction():
            character = self._require_character(character_id)
            if character.guild_id is None:
                logger.info("Character has no guild to leave", character_id=character_id)
                return MembershipChange(character=character)

            guild_id = character.guild_id
            guild = self.get_guild_by_id(guild_id)
            self._characters.set_guild(character_id, None)
            guild.remove_member()
            self._guilds.update(guild_id, guild)

        character.guild_id = None
        logger.info(
            "Character left guild",
            character_id=character_id,
            guild_id=guild_id,
            member_count=guild.member_count,
        )
        return MembershipChange(character=character, guild=guild)

    def get_guild_members(self, guild_id: int) -> list[Character]:
        self.get_guild_by_id(guild_id)
        return self._characters.get_by_guild(guild_id)

    # =========================================================================
    # Progression & Reports
    # =========================================================================

    def level_up_guild(self, guild_id: int) -> Guild:
        """Raise a guild's level by one. Guilds have no level ceiling."""
        guild = self.get_guild_by_id(guild_id)
        guild.level_up()
        self._guilds.update(guild_id, guild)
        logger.info("Guild leveled up", guild_id=guild_id, level=guild.level)
        return guild

    def get_statistics(self) -> GuildStatistics:
        guilds = self._guilds.get_all()
        if not guilds:
            return GuildStatistics()

        largest = max(guilds, key=lambda g: g.member_count)
        return GuildStatistics(
            total_guilds=len(guilds),
            total_members=sum(g.member_count for g in guilds),
            average_level=round(sum(g.level for g in guilds) / len(guilds), 2),
            largest_guild_name=largest.guild_name,
            largest_guild_members=largest.member_count,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _ensure_name_available(self, guild_name: str, *, exclude_id: int | None = None) -> None:
        clash = self._guilds.get_by_name(guild_name)
        if clash is not None and clash.id != exclude_id:
            logger.info("Duplicate guild name rejected", guild_name=guild_name)
            raise DuplicateResourceError(
                f"Guild with name '{guild_name}' already exists",
                resource="guild",
                name=guild_name,
            )

    def _require_character(self, character_id: int) -> Character:
        character = self._characters.get_by_id(character_id)
        if character is None:
            raise ResourceNotFoundError(
                f"Character with ID {character_id} not found",
                resource="character",
                resource_id=character_id,
            )
        return character


__all__ = [
    "GuildService",
]
