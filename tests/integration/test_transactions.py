"""Integration tests for connection ownership and transactions."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from guildhall.core.exceptions import DatabaseOperationError
from guildhall.models.characters import create_mage
from guildhall.models.guild import Guild
from guildhall.storage.character_repository import CharacterRepository
from guildhall.storage.database import Database
from guildhall.storage.guild_repository import GuildRepository


class TestDatabaseLifecycle:
    """Opening, reusing and closing the connection."""

    def test_context_manager(self, tmp_path: Path) -> None:
        with Database(tmp_path / "game.db") as db:
            assert db.is_connected
            assert db.ping()
        assert not db.is_connected

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "game.db"
        with Database(path):
            pass
        assert path.exists()

    def test_in_memory(self) -> None:
        with Database(":memory:") as db:
            tables = {
                row[0]
                for row in db.connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            }
        assert {"characters", "guilds", "warrior_attributes", "mage_attributes", "rogue_attributes"} <= tables

    def test_connection_before_connect(self, tmp_path: Path) -> None:
        with pytest.raises(DatabaseOperationError):
            Database(tmp_path / "game.db").connection

    def test_schema_survives_reopen(self, tmp_path: Path) -> None:
        path = tmp_path / "game.db"
        with Database(path) as db:
            GuildRepository(db).create(Guild(guild_name="Keepers"))
        with Database(path) as db:
            assert [g.guild_name for g in GuildRepository(db).get_all()] == ["Keepers"]

    def test_unopenable_path(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(DatabaseOperationError):
            Database(blocker / "game.db").connect()


class TestTransactions:
    """Commit, rollback and nesting."""

    def test_commit(self, db: Database, guild_repository: GuildRepository) -> None:
        with db.transaction():
            guild_repository.create(Guild(guild_name="Keepers"))
        assert len(guild_repository.get_all()) == 1

    def test_rollback_on_error(self, db: Database, guild_repository: GuildRepository) -> None:
        with pytest.raises(RuntimeError):
            with db.transaction():
                guild_repository.create(Guild(guild_name="Keepers"))
                raise RuntimeError("boom")

        assert guild_repository.get_all() == []
        assert not db.in_transaction

    def test_nested_blocks_join_outer(self, db: Database, guild_repository: GuildRepository) -> None:
        with pytest.raises(DatabaseOperationError):
            with db.transaction():
                guild_repository.create(Guild(guild_name="Keepers"))
                assert db.in_transaction
                # Fails inside a nested repository transaction.
                guild_repository.create(Guild(guild_name="KEEPERS"))

        assert guild_repository.get_all() == []

    def test_sqlite_errors_wrapped(self, db: Database) -> None:
        with pytest.raises(DatabaseOperationError) as exc_info:
            with db.transaction() as conn:
                conn.execute("SELECT * FROM no_such_table")
        assert exc_info.value.details["operation"] == "transaction"

    def test_interrupt_rolls_back(self, db: Database, guild_repository: GuildRepository) -> None:
        """Ctrl-C inside a block must not leave the transaction open."""
        with pytest.raises(KeyboardInterrupt):
            with db.transaction():
                guild_repository.create(Guild(guild_name="Keepers"))
                raise KeyboardInterrupt

        assert not db.in_transaction
        assert not db.connection.in_transaction
        assert guild_repository.get_all() == []

        guild_repository.create(Guild(guild_name="Wardens"))
        assert [g.guild_name for g in guild_repository.get_all()] == ["Wardens"]


class TestNameKeys:
    """Case-folded name keys, including databases created before they existed."""

    def test_keys_written_on_create_and_update(
        self,
        db: Database,
        guild_repository: GuildRepository,
    ) -> None:
        guild = guild_repository.create(Guild(guild_name="Ørder of Ash"))
        guild_repository.update(guild.id, guild.model_copy(update={"guild_name": "Straße Wardens"}))

        row = db.connection.execute("SELECT guild_name_key FROM guilds WHERE id = ?", (guild.id,)).fetchone()
        assert row[0] == "strasse wardens"

    def test_old_database_gets_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "old.db"
        conn = sqlite3.connect(path)
        conn.executescript(
            """
            CREATE TABLE guilds (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_name TEXT NOT NULL UNIQUE COLLATE NOCASE,
                level INTEGER NOT NULL DEFAULT 1,
                member_count INTEGER NOT NULL DEFAULT 0,
                created_date TEXT NOT NULL
            );
            CREATE TABLE characters (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE COLLATE NOCASE,
                character_type TEXT NOT NULL,
                level INTEGER NOT NULL DEFAULT 1,
                experience INTEGER NOT NULL DEFAULT 0,
                health_points INTEGER NOT NULL,
                guild_id INTEGER REFERENCES guilds(id),
                created_date TEXT NOT NULL
            );
            INSERT INTO guilds (guild_name, created_date) VALUES ('Ørder of Ash', '2024-01-01T00:00:00');
            """
        )
        conn.commit()
        conn.close()

        with Database(path) as db:
            guilds = GuildRepository(db)
            assert guilds.get_by_name("ØRDER OF ASH").guild_name == "Ørder of Ash"
            with pytest.raises(DatabaseOperationError):
                guilds.create(Guild(guild_name="ørder of ash"))

            characters = CharacterRepository(db)
            created = characters.create(create_mage("Élodie", 2, 90, 30, "Frost"))
            assert characters.get_by_name("élodie").id == created.id
            version = db.connection.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
            assert version == Database.SCHEMA_VERSION
