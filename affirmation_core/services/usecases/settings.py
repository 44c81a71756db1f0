"""Change user preferences."""

import logging
from typing import Any, Optional

from pydantic import ValidationError as ModelValidationError

from ...domain.errors import InvalidInputError, StorageError
from ...domain.events import EventBus, SettingsChanged
from ...domain.repositories import SettingsRepository
from ...domain.results import Failure, Result, Success
from ...models.settings import Settings
from .base import UseCase

logger = logging.getLogger(__name__)


class UpdateSettings(UseCase):
    """Validate and write one or more settings fields.

    Example:
        await update_settings.execute(theme_mode="dark", font_size_multiplier=1.2)
    """

    def __init__(self, settings: SettingsRepository, bus: Optional[EventBus] = None):
        super().__init__(bus)
        self._settings = settings

    async def execute(self, **changes: Any) -> Result[Settings]:
        if not changes:
            return Failure(InvalidInputError("No settings to update"))

        unknown = sorted(set(changes) - set(Settings.model_fields))
        if unknown:
            return Failure(InvalidInputError(f"Unknown settings field(s): {', '.join(unknown)}"))

        try:
            validated = Settings.model_validate(changes)
        except ModelValidationError as e:
            return Failure(InvalidInputError(f"Invalid settings value: {e}"))

        try:
            for name in changes:
                setter = getattr(self._settings, f"set_{name}")
                await setter(getattr(validated, name))
            updated = await self._settings.get_settings()
        except StorageError as e:
            logger.error(f"Failed to update settings: {e}")
            return Failure(e)

        await self._publish(SettingsChanged(fields=tuple(changes)))
        return Success(updated)

    async def reset(self) -> Result[Settings]:
        """Restore every field to its default."""
        try:
            await self._settings.reset_to_defaults()
            defaults = await self._settings.get_settings()
        except StorageError as e:
            logger.error(f"Failed to reset settings: {e}")
            return Failure(e)

        await self._publish(SettingsChanged(fields=tuple(Settings.model_fields)))
        return Success(defaults)
