"""Pick the next affirmation to show."""

import logging
from typing import Optional

from ...domain.errors import StorageError
from ...domain.events import CurrentAffirmationChanged, EventBus
from ...domain.repositories import AffirmationRepository, AppStateRepository
from ...domain.results import Failure, Result, Success
from ...models.affirmation import Affirmation
from ..selection import RandomSelector
from .base import UseCase

logger = logging.getLogger(__name__)


class ShowNextAffirmation(UseCase):
    """Select a random active affirmation, avoiding the one shown last.

    The pick becomes the current affirmation (persisted in app state) and
    its display count is incremented. ``Success(None)`` means there is
    nothing active to show.
    """

    def __init__(
        self,
        affirmations: AffirmationRepository,
        app_state: AppStateRepository,
        selector: Optional[RandomSelector] = None,
        bus: Optional[EventBus] = None,
    ):
        super().__init__(bus)
        self._affirmations = affirmations
        self._app_state = app_state
        self._selector = selector or RandomSelector()

    async def execute(self, exclude_id: Optional[str] = None) -> Result[Optional[Affirmation]]:
        try:
            active = await self._affirmations.get_active()
            current_id = await self._app_state.get_current_affirmation_id()
            pick = self._selector.select(
                active, exclude_id=exclude_id if exclude_id is not None else current_id
            )

            if pick is None:
                if current_id is None:
                    return Success(None)
                await self._app_state.clear_current_affirmation_id()
                shown = None
            else:
                await self._app_state.set_current_affirmation_id(pick.id)
                shown = await self._affirmations.increment_display_count(pick.id) or pick
        except StorageError as e:
            logger.error(f"Failed to select next affirmation: {e}")
            return Failure(e)

        await self._publish(CurrentAffirmationChanged(affirmation_id=shown.id if shown else None))
        return Success(shown)
