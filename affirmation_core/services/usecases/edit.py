"""Edit an existing affirmation."""

import logging
from typing import Any, Dict, Optional

from ...domain.errors import InvalidInputError, NotFoundError, StorageError
from ...domain.events import AffirmationUpdated, EventBus
from ...domain.repositories import AffirmationRepository
from ...domain.results import Failure, Result, Success
from ...models.affirmation import Affirmation, validate_text
from .base import UseCase

logger = logging.getLogger(__name__)


class EditAffirmation(UseCase):
    """Change the text and/or active flag of a stored affirmation.

    ``id``, ``created_at`` and ``display_count`` are preserved; the
    repository stamps ``updated_at``.
    """

    def __init__(self, affirmations: AffirmationRepository, bus: Optional[EventBus] = None):
        super().__init__(bus)
        self._affirmations = affirmations

    async def execute(
        self,
        affirmation_id: str,
        text: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Result[Affirmation]:
        if not affirmation_id:
            return Failure(InvalidInputError("Affirmation id cannot be empty"))

        changes: Dict[str, Any] = {}
        if text is not None:
            error = validate_text(text)
            if error is not None:
                return Failure(error)
            changes["text"] = text.strip()
        if is_active is not None:
            changes["is_active"] = is_active

        try:
            updated = await self._affirmations.modify(affirmation_id, changes)
        except StorageError as e:
            logger.error(f"Failed to edit affirmation {affirmation_id}: {e}")
            return Failure(e)

        if updated is None:
            return Failure(NotFoundError(affirmation_id))

        await self._publish(AffirmationUpdated(affirmation_id=updated.id))
        return Success(updated)
