"""
Encrypted embedded key/record store.

A SQLite file accessed through SQLAlchemy's async engine. Each namespace
(``affirmations``, ``settings``, ``app_state``) is its own table, created
on first access. Records are JSON values; every write serializes,
encrypts with the ``RecordCipher`` and upserts in its own transaction, so
a crash never leaves a half-written record behind.
"""

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import Column, LargeBinary, MetaData, String, Table, delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from ..domain.errors import DecryptionError, StorageClosedError, StorageError
from .encryption import RecordCipher

logger = logging.getLogger(__name__)

NAMESPACE_AFFIRMATIONS = "affirmations"
NAMESPACE_SETTINGS = "settings"
NAMESPACE_APP_STATE = "app_state"

_NAMESPACE_RE = re.compile(r"^[a-z][a-z0-9_]{0,62}$")


class EmbeddedStore:
    """Durable, encrypted, namespaced record storage.

    Lifecycle is owned by the caller: ``open`` once, ``close`` on shutdown.
    Any operation outside that window raises ``StorageClosedError``.
    """

    def __init__(self, database_path: Union[str, Path]) -> None:
        self._database_path = Path(database_path)
        self._engine: Optional[AsyncEngine] = None
        self._cipher: Optional[RecordCipher] = None
        self._metadata = MetaData()
        self._tables: Dict[str, Table] = {}
        self._namespace_lock = asyncio.Lock()

    @property
    def database_path(self) -> Path:
        return self._database_path

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def open(self, cipher: RecordCipher) -> None:
        """Create the engine. Namespace tables are materialized lazily."""
        if self._engine is not None:
            logger.debug("Store already open, skipping")
            return

        self._database_path.parent.mkdir(parents=True, exist_ok=True)
        database_url = f"sqlite+aiosqlite:///{self._database_path}"
        logger.info(f"Opening embedded store: {self._database_path}")

        self._engine = create_async_engine(database_url, echo=False, poolclass=NullPool)
        self._cipher = cipher
        self._tables.clear()
        self._metadata = MetaData()

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._cipher = None
        self._tables.clear()
        logger.info("Embedded store closed")

    # ------------------------------------------------------------------
    # Record operations
    # ------------------------------------------------------------------

    async def get(self, namespace: str, key: str) -> Optional[Any]:
        """Return the decoded record, or None if the key is absent."""
        engine, table = await self._ready(namespace, "read")
        try:
            async with engine.connect() as conn:
                result = await conn.execute(select(table.c.payload).where(table.c.key == key))
                payload = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {namespace}/{key}: {e}") from e
        if payload is None:
            return None
        return self._decode(payload, namespace, key)

    async def put(self, namespace: str, key: str, record: Any) -> None:
        """Insert or replace one record atomically."""
        engine, table = await self._ready(namespace, "write")
        payload = self._encode(record, namespace, key)
        stmt = sqlite_insert(table).values(key=key, payload=payload)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.key], set_={"payload": stmt.excluded.payload}
        )
        try:
            async with engine.begin() as conn:
                await conn.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {namespace}/{key}: {e}") from e

    async def delete(self, namespace: str, key: str) -> bool:
        """Remove one record. Returns False when it did not exist."""
        engine, table = await self._ready(namespace, "delete")
        try:
            async with engine.begin() as conn:
                result = await conn.execute(delete(table).where(table.c.key == key))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete {namespace}/{key}: {e}") from e
        return (result.rowcount or 0) > 0

    async def values(self, namespace: str) -> List[Any]:
        """All decoded records of a namespace, in no particular order."""
        engine, table = await self._ready(namespace, "read")
        try:
            async with engine.connect() as conn:
                result = await conn.execute(select(table.c.key, table.c.payload))
                rows = result.all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {namespace}: {e}") from e
        return [self._decode(payload, namespace, key) for key, payload in rows]

    async def keys(self, namespace: str) -> List[str]:
        engine, table = await self._ready(namespace, "read")
        try:
            async with engine.connect() as conn:
                result = await conn.execute(select(table.c.key))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list keys of {namespace}: {e}") from e

    async def count(self, namespace: str) -> int:
        engine, table = await self._ready(namespace, "read")
        try:
            async with engine.connect() as conn:
                result = await conn.execute(select(func.count()).select_from(table))
                return result.scalar() or 0
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count {namespace}: {e}") from e

    async def clear(self, namespace: str) -> None:
        engine, table = await self._ready(namespace, "clear")
        try:
            async with engine.begin() as conn:
                await conn.execute(delete(table))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to clear {namespace}: {e}") from e
        logger.info(f"Cleared namespace '{namespace}'")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _ready(self, namespace: str, operation: str):
        if self._engine is None:
            raise StorageClosedError(operation)
        table = await self._namespace(namespace)
        return self._engine, table

    async def _namespace(self, namespace: str) -> Table:
        """Return the namespace table, creating it on first access."""
        table = self._tables.get(namespace)
        if table is not None:
            return table

        if not _NAMESPACE_RE.match(namespace):
            raise ValueError(f"Invalid namespace name: {namespace!r}")

        async with self._namespace_lock:
            table = self._tables.get(namespace)
            if table is not None:
                return table
            table = Table(
                f"ns_{namespace}",
                self._metadata,
                Column("key", String, primary_key=True),
                Column("payload", LargeBinary, nullable=False),
            )
            try:
                async with self._engine.begin() as conn:
                    await conn.run_sync(table.create, checkfirst=True)
            except SQLAlchemyError as e:
                self._metadata.remove(table)
                raise StorageError(f"Failed to open namespace {namespace}: {e}") from e
            self._tables[namespace] = table
            logger.debug(f"Opened namespace '{namespace}' (lazy)")
            return table

    def _encode(self, record: Any, namespace: str, key: str) -> bytes:
        try:
            plaintext = json.dumps(record, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise StorageError(f"Record {namespace}/{key} is not serializable: {e}") from e
        return self._cipher.encrypt(plaintext.encode("utf-8"))

    def _decode(self, payload: bytes, namespace: str, key: str) -> Any:
        plaintext = self._cipher.decrypt(payload)
        try:
            return json.loads(plaintext.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecryptionError(f"Record {namespace}/{key} is corrupted: {e}") from e
