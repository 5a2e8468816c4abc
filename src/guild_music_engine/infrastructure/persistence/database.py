"""SQLite database with per-operation connections and WAL mode."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiosqlite

from guild_music_engine.domain.shared.constants import DatabaseTables, DatabaseURLSchemes, SQLPragmas
from guild_music_engine.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import DatabaseSettings

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, url: str, settings: DatabaseSettings | None = None) -> None:
        if url.startswith("sqlite:///"):
            self._db_path = url[len("sqlite:///") :]
        else:
            self._db_path = url

        self._initialized = False
        self._keepalive_conn: aiosqlite.Connection | None = None
        self._busy_timeout = settings.busy_timeout_ms if settings else 5000
        self._connection_timeout = settings.connection_timeout_s if settings else 10

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_memory(self) -> bool:
        return self._db_path == DatabaseURLSchemes.MEMORY

    async def initialize(self) -> None:
        if self._initialized:
            return

        if not self.is_memory:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        # The shared in-memory DB is destroyed once its last connection closes.
        if self.is_memory and self._keepalive_conn is None:
            self._keepalive_conn = await self._connect()

        conn = self._keepalive_conn
        if conn is None:
            async with self.transaction() as conn2:
                await self._ensure_schema(conn2)
        else:
            await self._ensure_schema(conn)
            await conn.commit()

        self._initialized = True
        logger.info(LogTemplates.DATABASE_INITIALIZED, self._db_path)

    async def _ensure_schema(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {DatabaseTables.PLAYLISTS} (
                id TEXT PRIMARY KEY,
                owner_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                name_key TEXT NOT NULL,
                is_public INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                UNIQUE(owner_id, name_key)
            )
            """
        )
        await conn.execute(
            f"CREATE INDEX IF NOT EXISTS idx_playlists_owner_created "
            f"ON {DatabaseTables.PLAYLISTS}(owner_id, created_at)"
        )

        await conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {DatabaseTables.PLAYLIST_TRACKS} (
                playlist_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                track_id TEXT NOT NULL,
                title TEXT NOT NULL,
                url TEXT NOT NULL,
                author TEXT,
                duration_seconds INTEGER,
                thumbnail_url TEXT,
                requested_by_id INTEGER,
                requested_by_name TEXT,
                added_at TEXT,
                PRIMARY KEY (playlist_id, position),
                FOREIGN KEY(playlist_id) REFERENCES {DatabaseTables.PLAYLISTS}(id) ON DELETE CASCADE
            )
            """
        )

    async def _connect(self) -> aiosqlite.Connection:
        # ":memory:" is per-connection, so a shared-cache URI lets every
        # connection see the same in-memory database.
        if self.is_memory:
            db_path = DatabaseURLSchemes.MEMORY_SHARED_URI
            uri = True
        else:
            db_path = self._db_path
            uri = False

        conn = await aiosqlite.connect(
            db_path,
            # ISO 8601 timestamps use a 'T' separator that the built-in converter rejects.
            detect_types=0,
            uri=uri,
            timeout=self._connection_timeout,
        )
        conn.row_factory = aiosqlite.Row

        await conn.execute(SQLPragmas.JOURNAL_MODE_WAL)
        await conn.execute(SQLPragmas.FOREIGN_KEYS_ON)
        await conn.execute(SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout))

        return conn

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        conn = await self._connect()
        try:
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get a transaction context manager with auto-commit/rollback."""
        async with self.connection() as conn:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    async def execute(self, sql: str, parameters: tuple[Any, ...] | None = None) -> int:
        """Execute one statement in its own transaction and return the affected row count."""
        async with self.transaction() as conn:
            cursor = await conn.execute(sql, parameters or ())
            return cursor.rowcount

    async def fetch_one(
        self, sql: str, parameters: tuple[Any, ...] | None = None
    ) -> dict[str, Any] | None:
        """Fetch a single row."""
        async with self.connection() as conn:
            cursor = await conn.execute(sql, parameters or ())
            row = await cursor.fetchone()
            return dict(row) if row else None

    async def fetch_all(
        self, sql: str, parameters: tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Fetch all rows."""
        async with self.connection() as conn:
            cursor = await conn.execute(sql, parameters or ())
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def close(self) -> None:
        """Close the database manager.

        For file-based DBs this is mostly a no-op. For in-memory DBs we also
        close the keepalive connection.
        """
        if self._keepalive_conn is not None:
            try:
                await self._keepalive_conn.close()
            finally:
                self._keepalive_conn = None
        self._initialized = False
        logger.info(LogTemplates.DATABASE_CLOSED)
