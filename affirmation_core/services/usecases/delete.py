"""Delete an affirmation."""

import logging
from typing import Optional

from ...domain.errors import InvalidInputError, NotFoundError, StorageError
from ...domain.events import AffirmationDeleted, EventBus
from ...domain.repositories import AffirmationRepository, AppStateRepository
from ...domain.results import Failure, Result, Success
from .base import UseCase

logger = logging.getLogger(__name__)


class DeleteAffirmation(UseCase):
    """Remove an affirmation by id.

    Deleting an id that does not exist returns ``Failure(NotFoundError)``
    every time and never raises, so a double tap in the UI is harmless.
    """

    def __init__(
        self,
        affirmations: AffirmationRepository,
        app_state: AppStateRepository,
        bus: Optional[EventBus] = None,
    ):
        super().__init__(bus)
        self._affirmations = affirmations
        self._app_state = app_state

    async def execute(self, affirmation_id: str) -> Result[str]:
        if not affirmation_id:
            return Failure(InvalidInputError("Affirmation id cannot be empty"))

        try:
            deleted = await self._affirmations.delete(affirmation_id)
            if not deleted:
                return Failure(NotFoundError(affirmation_id))

            was_current = await self._app_state.get_current_affirmation_id() == affirmation_id
            if was_current:
                await self._app_state.clear_current_affirmation_id()
        except StorageError as e:
            logger.error(f"Failed to delete affirmation {affirmation_id}: {e}")
            return Failure(e)

        await self._publish(AffirmationDeleted(affirmation_id=affirmation_id, was_current=was_current))
        return Success(affirmation_id)
