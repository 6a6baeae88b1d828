"""SQLite-based profile store implementation."""

from pathlib import Path

import aiosqlite
from pydantic import ValidationError

from igprofile.cache.base import ProfileCache
from igprofile.exceptions import CacheReadError, CacheWriteError, ConfigError
from igprofile.models.profile import ProfileRecord

COLUMNS = (
    "id",
    "username",
    "full_name",
    "biography",
    "external_url",
    "profile_pic_url",
    "is_private",
    "is_verified",
    "is_business",
    "updated_at",
)


class SQLiteCache(ProfileCache):
    """SQLite-based local profile store using aiosqlite."""

    def __init__(self, db_path: str = ".igprofile_cache.db", table: str = "instagram_profiles"):
        """
        Initialize SQLite store.

        Args:
            db_path: Path to SQLite database file
            table: Table holding the profile rows
        """
        if not table.isidentifier():
            raise ConfigError(f"Invalid table name: {table!r}")
        self.db_path = Path(db_path)
        self.table = table
        self._db: aiosqlite.Connection | None = None

    async def _ensure_db(self) -> aiosqlite.Connection:
        """Ensure database connection and schema exist."""
        if self._db is None:
            self._db = await aiosqlite.connect(self.db_path)
            self._db.row_factory = aiosqlite.Row
            await self._db.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    id INTEGER PRIMARY KEY,
                    username TEXT NOT NULL UNIQUE,
                    full_name TEXT,
                    biography TEXT,
                    external_url TEXT,
                    profile_pic_url TEXT,
                    is_private INTEGER NOT NULL DEFAULT 0,
                    is_verified INTEGER NOT NULL DEFAULT 0,
                    is_business INTEGER NOT NULL DEFAULT 0,
                    updated_at TEXT NOT NULL
                )
            """)
            await self._db.commit()
        return self._db

    async def get(self, username: str) -> ProfileRecord | None:
        """Retrieve the stored record for a username, None on miss."""
        try:
            db = await self._ensure_db()
            async with db.execute(
                f"SELECT {', '.join(COLUMNS)} FROM {self.table} WHERE username = ?",
                (username.lower(),),
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise CacheReadError(f"SQLite read failed: {e}") from e

        if row is None:
            return None
        try:
            return ProfileRecord.model_validate(dict(row))
        except ValidationError as e:
            raise CacheReadError(f"Corrupt stored profile for {username}: {e}") from e

    async def upsert(self, record: ProfileRecord) -> None:
        """Insert or overwrite the row keyed on id."""
        data = record.model_dump(mode="json")
        placeholders = ", ".join("?" for _ in COLUMNS)
        updates = ", ".join(f"{col} = excluded.{col}" for col in COLUMNS if col != "id")

        try:
            db = await self._ensure_db()
            # The username may have moved to a new account; drop the stale owner
            await db.execute(
                f"DELETE FROM {self.table} WHERE username = ? AND id != ?",
                (record.username, record.id),
            )
            await db.execute(
                f"""
                INSERT INTO {self.table} ({', '.join(COLUMNS)})
                VALUES ({placeholders})
                ON CONFLICT(id) DO UPDATE SET {updates}
                """,
                tuple(data[col] for col in COLUMNS),
            )
            await db.commit()
        except aiosqlite.Error as e:
            raise CacheWriteError(f"SQLite upsert failed: {e}") from e

    async def count(self) -> int:
        """Number of stored profiles."""
        db = await self._ensure_db()
        async with db.execute(f"SELECT COUNT(*) FROM {self.table}") as cursor:
            (total,) = await cursor.fetchone()
        return total

    async def close(self) -> None:
        """Close database connection."""
        if self._db is not None:
            await self._db.close()
            self._db = None
