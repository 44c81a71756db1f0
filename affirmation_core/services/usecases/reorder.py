"""Persist a new presentation order."""

import logging
from typing import Optional, Sequence, Tuple

from ...domain.errors import InvalidInputError, StorageError
from ...domain.events import AffirmationsReordered, EventBus
from ...domain.repositories import AffirmationRepository
from ...domain.results import Failure, Result, Success
from .base import UseCase

logger = logging.getLogger(__name__)


class ReorderAffirmations(UseCase):
    def __init__(self, affirmations: AffirmationRepository, bus: Optional[EventBus] = None):
        super().__init__(bus)
        self._affirmations = affirmations

    async def execute(self, ordered_ids: Sequence[str]) -> Result[Tuple[str, ...]]:
        if not ordered_ids:
            return Failure(InvalidInputError("Ordered id list cannot be empty"))

        ids = tuple(ordered_ids)
        try:
            await self._affirmations.reorder(ids)
        except StorageError as e:
            logger.error(f"Failed to reorder affirmations: {e}")
            return Failure(e)

        await self._publish(AffirmationsReordered(ordered_ids=ids))
        return Success(ids)
