"""SQLite storage backend."""
import json
from logging import Logger
from pathlib import Path
from typing import Any, Optional

import aiosqlite
from scitrera_app_framework import Variables

from ...config import MNEMOFLOW_SQLITE_STORAGE_PATH, DEFAULT_MNEMOFLOW_SQLITE_STORAGE_PATH
from ...models.memory import MemoryKind, MemoryRecord
from ...utils import parse_datetime_utc, cosine_similarities, metadata_json
from .base import StorageBackend, StoragePluginBase

_SCHEMA = """
CREATE TABLE IF NOT EXISTS memories (
    id TEXT PRIMARY KEY,
    type TEXT NOT NULL,
    content TEXT NOT NULL,
    embedding TEXT,
    metadata TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT,
    source TEXT,
    relevance REAL
)
"""

_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_memories_created_at ON memories(created_at)",
    "CREATE INDEX IF NOT EXISTS idx_memories_type ON memories(type)",
)

_COLUMNS = "id, type, content, embedding, metadata, created_at, updated_at, source, relevance"


class SQLiteStorageBackend(StorageBackend):
    """SQLite storage backend.

    Embeddings and metadata are stored as JSON text, timestamps as ISO-8601 strings.
    Similarity search is computed in-process over rows that carry an embedding.
    """

    def __init__(self, db_path: str = DEFAULT_MNEMOFLOW_SQLITE_STORAGE_PATH, v: Variables = None):
        """
        Initialize SQLite backend.

        Args:
            db_path: Path to SQLite database file (``:memory:`` for a private in-process database)
            v: Variables for logging context
        """
        super().__init__(v)
        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Open the connection and create the schema."""
        if self._connection is not None:
            return
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.logger.info("Connecting to SQLite database at %s", self.db_path)

        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row

        await self._connection.execute("PRAGMA journal_mode=WAL")
        await self._connection.execute(_SCHEMA)
        for statement in _INDEXES:
            await self._connection.execute(statement)
        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close storage connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self.logger.info("Disconnected from SQLite database")

    async def health_check(self) -> bool:
        if self._connection is None:
            return False
        try:
            async with self._connection.execute("SELECT 1") as cursor:
                await cursor.fetchone()
            return True
        except aiosqlite.Error as e:
            self.logger.warning("SQLite health check failed: %s", e)
            return False

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise RuntimeError("SQLiteStorageBackend is not connected; call connect() first")
        return self._connection

    async def save(self, record: MemoryRecord) -> None:
        await self.connection.execute(
            f"INSERT OR REPLACE INTO memories ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, NULL)",
            (
                record.id,
                record.kind.value,
                record.content,
                json.dumps(record.embedding) if record.embedding is not None else None,
                metadata_json(record.metadata) if record.metadata is not None else None,
                record.created_at.isoformat(),
                record.updated_at.isoformat() if record.updated_at else None,
                record.source,
            ),
        )
        await self.connection.commit()
        self.logger.debug("Saved record %s", record.id)

    async def get(self, record_id: str) -> Optional[MemoryRecord]:
        async with self.connection.execute(
                f"SELECT {_COLUMNS} FROM memories WHERE id = ?", (record_id,)
        ) as cursor:
            row = await cursor.fetchone()
        return self._row_to_record(row) if row else None

    async def get_all(self) -> list[MemoryRecord]:
        async with self.connection.execute(
                f"SELECT {_COLUMNS} FROM memories ORDER BY created_at DESC"
        ) as cursor:
            rows = await cursor.fetchall()
        return [self._row_to_record(row) for row in rows]

    async def delete(self, record_id: str) -> bool:
        cursor = await self.connection.execute("DELETE FROM memories WHERE id = ?", (record_id,))
        await self.connection.commit()
        return cursor.rowcount > 0

    async def clear(self) -> None:
        await self.connection.execute("DELETE FROM memories")
        await self.connection.commit()

    @property
    def supports_similarity_search(self) -> bool:
        return True

    async def search_similar(
            self,
            query_embedding: list[float],
            limit: int = 10,
    ) -> list[tuple[MemoryRecord, float]]:
        async with self.connection.execute(
                f"SELECT {_COLUMNS} FROM memories WHERE embedding IS NOT NULL"
        ) as cursor:
            rows = await cursor.fetchall()
        records = [self._row_to_record(row) for row in rows]
        scores = cosine_similarities(query_embedding, [r.embedding for r in records])
        ranked = sorted(zip(records, scores), key=lambda pair: pair[1], reverse=True)
        return ranked[:limit]

    @staticmethod
    def _row_to_record(row: Any) -> MemoryRecord:
        return MemoryRecord(
            id=row["id"],
            kind=MemoryKind(row["type"]),
            content=row["content"],
            embedding=json.loads(row["embedding"]) if row["embedding"] else None,
            metadata=json.loads(row["metadata"]) if row["metadata"] else None,
            created_at=parse_datetime_utc(row["created_at"]),
            updated_at=parse_datetime_utc(row["updated_at"]),
            source=row["source"],
        )


class SQLiteStoragePlugin(StoragePluginBase):
    PROVIDER_NAME = 'sqlite'

    def initialize(self, v: Variables, logger: Logger) -> SQLiteStorageBackend:
        return SQLiteStorageBackend(
            db_path=v.environ(MNEMOFLOW_SQLITE_STORAGE_PATH, default=DEFAULT_MNEMOFLOW_SQLITE_STORAGE_PATH),
            v=v,
        )
