"""SQLite connection ownership, schema and transactions.

A ``Database`` owns exactly one connection for the life of the process. It
is created at startup, handed to every repository, and closed at exit:

    >>> with Database("data/guildhall.db") as db:
    ...     characters = CharacterRepository(db)

Every repository call runs inside ``Database.transaction()``. Nested calls
join the outermost transaction, so a service can wrap several repository
writes in one ``with db.transaction():`` block and have them commit or roll
back together.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Generator

from guildhall.core.constants import (
    GUILD_NAME_MAX_LENGTH,
    IN_MEMORY_DATABASE,
    MAX_CHARACTER_LEVEL,
    MIN_CHARACTER_LEVEL,
    MIN_GUILD_LEVEL,
)
from guildhall.core.exceptions import DatabaseOperationError
from guildhall.core.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Schema
# =============================================================================

SCHEMA_STATEMENTS = (
    f"""
    CREATE TABLE IF NOT EXISTS guilds (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        guild_name TEXT NOT NULL
            CHECK (length(guild_name) <= {GUILD_NAME_MAX_LENGTH}),
        guild_name_key TEXT NOT NULL UNIQUE,
        level INTEGER NOT NULL DEFAULT 1 CHECK (level >= {MIN_GUILD_LEVEL}),
        member_count INTEGER NOT NULL DEFAULT 0 CHECK (member_count >= 0),
        created_date TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS characters (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        name_key TEXT NOT NULL UNIQUE,
        character_type TEXT NOT NULL CHECK (character_type IN ('WARRIOR', 'MAGE', 'ROGUE')),
        level INTEGER NOT NULL DEFAULT 1
            CHECK (level BETWEEN {MIN_CHARACTER_LEVEL} AND {MAX_CHARACTER_LEVEL}),
        experience INTEGER NOT NULL DEFAULT 0 CHECK (experience >= 0),
        health_points INTEGER NOT NULL CHECK (health_points > 0),
        guild_id INTEGER REFERENCES guilds(id),
        created_date TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS warrior_attributes (
        character_id INTEGER PRIMARY KEY REFERENCES characters(id) ON DELETE CASCADE,
        strength INTEGER NOT NULL,
        armor INTEGER NOT NULL,
        weapon_type TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS mage_attributes (
        character_id INTEGER PRIMARY KEY REFERENCES characters(id) ON DELETE CASCADE,
        mana INTEGER NOT NULL,
        intelligence INTEGER NOT NULL,
        spell_school TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS rogue_attributes (
        character_id INTEGER PRIMARY KEY REFERENCES characters(id) ON DELETE CASCADE,
        agility INTEGER NOT NULL,
        stealth INTEGER NOT NULL,
        critical_chance REAL NOT NULL CHECK (critical_chance BETWEEN 0.0 AND 1.0)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS equipment (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        equipment_type TEXT NOT NULL,
        bonus_stats INTEGER NOT NULL DEFAULT 0,
        rarity TEXT NOT NULL,
        character_id INTEGER NOT NULL REFERENCES characters(id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_characters_type ON characters(character_type)",
    "CREATE INDEX IF NOT EXISTS idx_characters_guild ON characters(guild_id)",
    "CREATE INDEX IF NOT EXISTS idx_equipment_character ON equipment(character_id)",
)

# (table, name column, key column) for names unique regardless of case.
NAME_KEY_COLUMNS = (
    ("guilds", "guild_name", "guild_name_key"),
    ("characters", "name", "name_key"),
)


def name_key(name: str) -> str:
    """Case-folded form of a name, used for uniqueness and lookups.

    SQLite's NOCASE collation only folds ASCII letters, so "Élodie" and
    "élodie" would compare as different names. ``str.casefold`` covers
    the whole of Unicode ("Straße" and "STRASSE" share a key).
    """
    return name.casefold()


# =============================================================================
# Database Class
# =============================================================================


class Database:
    """Owner of the single SQLite connection.

    Attributes:
        db_path: Database file, or ``:memory:``.
        timeout: Busy timeout in seconds.
    """

    SCHEMA_VERSION = 2

    def __init__(self, db_path: str | Path, *, timeout: float = 5.0) -> None:
        self.db_path = db_path if str(db_path) == IN_MEMORY_DATABASE else Path(db_path)
        self.timeout = timeout
        self._connection: sqlite3.Connection | None = None
        self._depth = 0

    def __enter__(self) -> Database:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> sqlite3.Connection:
        """The open connection.

        Raises:
            DatabaseOperationError: If ``connect()`` has not been called.
        """
        if self._connection is None:
            raise DatabaseOperationError("Database is not connected", operation="connection")
        return self._connection

    def connect(self) -> None:
        """Open the connection and create the schema if needed.

        Raises:
            DatabaseOperationError: If the database cannot be opened.
        """
        if self._connection is not None:
            return
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # Autocommit mode: transactions are opened explicitly in transaction().
            conn = sqlite3.connect(str(self.db_path), timeout=self.timeout, isolation_level=None)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
        except (sqlite3.Error, OSError) as exc:
            raise DatabaseOperationError(
                f"Failed to open database at {self.db_path}: {exc}",
                operation="connect",
            ) from exc

        self._connection = conn
        self._init_schema()
        logger.info("Database connected", path=str(self.db_path))

    def close(self) -> None:
        """Close the connection. Errors while closing are logged."""
        if self._connection is None:
            return
        try:
            self._connection.close()
        except sqlite3.Error as exc:
            logger.warning("Error closing database", path=str(self.db_path), error=str(exc))
        finally:
            self._connection = None
            self._depth = 0
        logger.info("Database closed", path=str(self.db_path))

    def _init_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS schema_version (version INTEGER PRIMARY KEY)"
            )
            for statement in SCHEMA_STATEMENTS:
                conn.execute(statement)
            self._add_name_keys(conn)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    @staticmethod
    def _add_name_keys(conn: sqlite3.Connection) -> None:
        """Add and backfill the name key columns on version 1 databases."""
        for table, name_column, key_column in NAME_KEY_COLUMNS:
            columns = {row["name"] for row in conn.execute(f"PRAGMA table_info({table})")}
            if key_column in columns:
                continue
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {key_column} TEXT")
            rows = conn.execute(f"SELECT id, {name_column} FROM {table}").fetchall()
            conn.executemany(
                f"UPDATE {table} SET {key_column} = ? WHERE id = ?",
                [(name_key(row[name_column]), row["id"]) for row in rows],
            )
            conn.execute(
                f"CREATE UNIQUE INDEX IF NOT EXISTS idx_{table}_{key_column} ON {table}({key_column})"
            )
            logger.debug("Name keys added", table=table, rows=len(rows))

    # =========================================================================
    # Transactions
    # =========================================================================

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Run a block as one transaction.

        The outermost block issues BEGIN and COMMIT; any exception, including
        ``KeyboardInterrupt``, rolls everything back and is re-raised. sqlite
        errors are re-raised as ``DatabaseOperationError``. Inner blocks join the outer
        transaction.

        Yields:
            The open connection.
        """
        conn = self.connection

        if self._depth > 0:
            self._depth += 1
            try:
                yield conn
            finally:
                self._depth -= 1
            return

        try:
            conn.execute("BEGIN")
        except sqlite3.Error as exc:
            raise DatabaseOperationError(
                f"Failed to begin transaction: {exc}",
                operation="begin",
            ) from exc

        self._depth = 1
        try:
            yield conn
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            self._rollback(conn)
            raise DatabaseOperationError(
                f"Database operation failed: {exc}",
                operation="transaction",
            ) from exc
        except BaseException:
            # Includes KeyboardInterrupt and GeneratorExit.
            self._rollback(conn)
            raise
        finally:
            self._depth = 0

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error as exc:
            logger.warning("Rollback failed", error=str(exc))
        else:
            logger.debug("Transaction rolled back")

    def ping(self) -> str:
        """Return the SQLite library version, verifying the connection works."""
        with self.transaction() as conn:
            return conn.execute("SELECT sqlite_version()").fetchone()[0]


__all__ = [
    "Database",
    "NAME_KEY_COLUMNS",
    "SCHEMA_STATEMENTS",
    "name_key",
]
