"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Guildhall test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from guildhall.console.controllers import Controllers, create_controllers
from guildhall.core.config import Settings, StorageSettings
from guildhall.models.characters import Mage, Rogue, Warrior, create_mage, create_rogue, create_warrior
from guildhall.models.guild import Guild
from guildhall.services.character_service import CharacterService
from guildhall.services.guild_service import GuildService
from guildhall.storage.character_repository import CharacterRepository
from guildhall.storage.database import Database
from guildhall.storage.guild_repository import EquipmentRepository, GuildRepository


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from guildhall.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Point configuration at a temporary database.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "GUILDHALL_DATABASE_PATH": str(tmp_path / "db" / "guildhall.db"),
        "GUILDHALL_LOG_LEVEL": "DEBUG",
        "GUILDHALL_GAME_COMBAT_MAX_ROUNDS": "5",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def db(tmp_path: Path) -> Generator[Database, None, None]:
    """Provide a connected database in a temporary directory."""
    database = Database(tmp_path / "guildhall.db")
    database.connect()
    yield database
    database.close()


@pytest.fixture
def character_repository(db: Database) -> CharacterRepository:
    return CharacterRepository(db)


@pytest.fixture
def guild_repository(db: Database) -> GuildRepository:
    return GuildRepository(db)


@pytest.fixture
def equipment_repository(db: Database) -> EquipmentRepository:
    return EquipmentRepository(db)


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def character_service(
    db: Database,
    character_repository: CharacterRepository,
    guild_repository: GuildRepository,
    equipment_repository: EquipmentRepository,
) -> CharacterService:
    return CharacterService(db, character_repository, guild_repository, equipment_repository)


@pytest.fixture
def guild_service(
    db: Database,
    guild_repository: GuildRepository,
    character_repository: CharacterRepository,
) -> GuildService:
    return GuildService(db, guild_repository, character_repository)


@pytest.fixture
def controllers(db: Database) -> Controllers:
    return create_controllers(db, Settings(storage=StorageSettings(database_path=db.db_path)))


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_warrior() -> Warrior:
    """A level 10 warrior with default health."""
    return create_warrior("Thorin", 10, 50, 30, "Sword")


@pytest.fixture
def sample_mage() -> Mage:
    return create_mage("Merlin", 5, 200, 40, "Arcane")


@pytest.fixture
def sample_rogue() -> Rogue:
    return create_rogue("Shadow", 3, 35, 20, 0.25)


@pytest.fixture
def sample_guild() -> Guild:
    return Guild(guild_name="Dragon Slayers", level=5)
