"""Create a new affirmation."""

import logging
from typing import Optional

from ...domain.errors import StorageError
from ...domain.events import AffirmationCreated, EventBus
from ...domain.repositories import AffirmationRepository
from ...domain.results import Failure, Result, Success
from ...models.affirmation import Affirmation, validate_text
from .base import UseCase

logger = logging.getLogger(__name__)


class CreateAffirmation(UseCase):
    """Validate, trim and persist a new affirmation."""

    def __init__(self, affirmations: AffirmationRepository, bus: Optional[EventBus] = None):
        super().__init__(bus)
        self._affirmations = affirmations

    async def execute(self, text: str, is_active: bool = True) -> Result[Affirmation]:
        error = validate_text(text)
        if error is not None:
            return Failure(error)

        try:
            created = await self._affirmations.create(Affirmation.new(text.strip(), is_active))
        except StorageError as e:
            logger.error(f"Failed to create affirmation: {e}")
            return Failure(e)

        await self._publish(AffirmationCreated(affirmation_id=created.id))
        return Success(created)
