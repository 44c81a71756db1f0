"""EmbeddedStore implementation of AffirmationRepository."""

import asyncio
import logging
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError as ModelValidationError

from ...core.store import NAMESPACE_AFFIRMATIONS, NAMESPACE_APP_STATE, EmbeddedStore
from ...domain.errors import StorageError
from ...models.affirmation import Affirmation, utcnow

logger = logging.getLogger(__name__)

# Highest sort_order ever handed out; survives deletes so slots are never reused.
SORT_ORDER_HIGH_WATER_KEY = "sort_order_high_water"


def _new_id() -> str:
    return str(uuid.uuid4())


class StoreAffirmationRepository:
    """Concrete AffirmationRepository backed by the encrypted embedded store.

    Every write goes through a single lock: ``create``, ``modify``,
    ``reorder`` and ``increment_display_count`` read before they write, and
    ``update`` must not interleave with them.
    """

    def __init__(
        self,
        store: EmbeddedStore,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store = store
        self._id_factory = id_factory
        self._write_lock = asyncio.Lock()

    async def get_all(self) -> List[Affirmation]:
        """Get every record, ordered by sort_order."""
        records = await self._load_all()
        return sorted(records, key=lambda a: a.sort_order)

    async def get_active(self) -> List[Affirmation]:
        """Get active records, ordered by sort_order."""
        return [a for a in await self.get_all() if a.is_active]

    async def get_by_id(self, affirmation_id: str) -> Optional[Affirmation]:
        if not affirmation_id:
            return None
        record = await self._store.get(NAMESPACE_AFFIRMATIONS, affirmation_id)
        if record is None:
            return None
        return self._parse(record, affirmation_id)

    async def create(self, affirmation: Affirmation) -> Affirmation:
        """Persist a new record with a fresh id (if empty) and the next sort order.

        The next sort order is one past both the surviving maximum and the
        high-water mark, so deleting the last record never frees its slot.
        """
        async with self._write_lock:
            existing = await self._load_all()
            highest = max((a.sort_order for a in existing), default=-1)
            high_water = await self._store.get(NAMESPACE_APP_STATE, SORT_ORDER_HIGH_WATER_KEY)
            if isinstance(high_water, int):
                highest = max(highest, high_water)
            now = utcnow()
            created = affirmation.model_copy(
                update={
                    "id": affirmation.id or self._id_factory(),
                    "created_at": now,
                    "updated_at": now,
                    "display_count": 0,
                    "sort_order": highest + 1,
                }
            )
            await self._store.put(NAMESPACE_AFFIRMATIONS, created.id, created.to_record())
            await self._store.put(NAMESPACE_APP_STATE, SORT_ORDER_HIGH_WATER_KEY, created.sort_order)
        logger.debug(f"Created affirmation {created.id} (sort_order={created.sort_order})")
        return created

    async def update(self, affirmation: Affirmation) -> Affirmation:
        """Stamp updated_at and persist. Last write wins."""
        async with self._write_lock:
            return await self._put_updated(affirmation)

    async def modify(
        self, affirmation_id: str, changes: Mapping[str, Any]
    ) -> Optional[Affirmation]:
        """Apply field changes to the stored record in one locked step.

        Returns:
            The updated Affirmation, or None if not found.
        """
        async with self._write_lock:
            current = await self.get_by_id(affirmation_id)
            if current is None:
                return None
            return await self._put_updated(current.model_copy(update=dict(changes)))

    async def delete(self, affirmation_id: str) -> bool:
        if not affirmation_id:
            return False
        async with self._write_lock:
            deleted = await self._store.delete(NAMESPACE_AFFIRMATIONS, affirmation_id)
        if deleted:
            logger.debug(f"Deleted affirmation {affirmation_id}")
        return deleted

    async def delete_all(self) -> None:
        """Remove every record; numbering starts again from 0."""
        async with self._write_lock:
            await self._store.clear(NAMESPACE_AFFIRMATIONS)
            await self._store.delete(NAMESPACE_APP_STATE, SORT_ORDER_HIGH_WATER_KEY)

    async def reorder(self, ordered_ids: Sequence[str]) -> None:
        """Assign sort_order = index in ordered_ids.

        Unknown ids are ignored; a repeated id keeps its first index;
        records not listed keep their sort_order.
        """
        async with self._write_lock:
            positions: Dict[str, int] = {}
            for index, affirmation_id in enumerate(ordered_ids):
                positions.setdefault(affirmation_id, index)

            for affirmation_id, position in positions.items():
                current = await self.get_by_id(affirmation_id)
                if current is None:
                    logger.debug(f"Reorder skipped unknown id {affirmation_id}")
                    continue
                if current.sort_order != position:
                    moved = current.model_copy(update={"sort_order": position})
                    await self._store.put(NAMESPACE_AFFIRMATIONS, moved.id, moved.to_record())

    async def count(self) -> int:
        return await self._store.count(NAMESPACE_AFFIRMATIONS)

    async def increment_display_count(self, affirmation_id: str) -> Optional[Affirmation]:
        """Bump display_count without touching updated_at."""
        async with self._write_lock:
            current = await self.get_by_id(affirmation_id)
            if current is None:
                return None
            shown = current.model_copy(update={"display_count": current.display_count + 1})
            await self._store.put(NAMESPACE_AFFIRMATIONS, shown.id, shown.to_record())
            return shown

    async def _put_updated(self, affirmation: Affirmation) -> Affirmation:
        # Caller holds _write_lock.
        updated = affirmation.model_copy(
            update={"updated_at": max(utcnow(), affirmation.created_at)}
        )
        await self._store.put(NAMESPACE_AFFIRMATIONS, updated.id, updated.to_record())
        return updated

    async def _load_all(self) -> List[Affirmation]:
        records = await self._store.values(NAMESPACE_AFFIRMATIONS)
        return [self._parse(record, record.get("id", "?")) for record in records]

    @staticmethod
    def _parse(record: dict, affirmation_id: str) -> Affirmation:
        try:
            return Affirmation.from_record(record)
        except ModelValidationError as e:
            raise StorageError(f"Stored affirmation {affirmation_id} is invalid: {e}") from e
