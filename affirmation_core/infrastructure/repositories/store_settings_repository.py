"""EmbeddedStore implementation of SettingsRepository."""

import logging
from enum import Enum
from typing import Any

from pydantic import ValidationError as ModelValidationError

from ...core.store import NAMESPACE_SETTINGS, EmbeddedStore
from ...domain.errors import InvalidInputError
from ...models.settings import SETTINGS_KEYS, RefreshMode, Settings, ThemeMode

logger = logging.getLogger(__name__)

_DEFAULTS = Settings.default()


class StoreSettingsRepository:
    """Concrete SettingsRepository backed by the encrypted embedded store.

    One store key per field. Missing keys read as the default; a stored
    value that no longer validates also reads as the default, with a
    warning.
    """

    def __init__(self, store: EmbeddedStore) -> None:
        self._store = store

    async def get_settings(self) -> Settings:
        values = {name: await self._read(name) for name in SETTINGS_KEYS}
        return Settings(**values)

    async def save_settings(self, settings: Settings) -> None:
        for name in SETTINGS_KEYS:
            await self._write(name, getattr(settings, name))

    async def reset_to_defaults(self) -> None:
        await self.save_settings(_DEFAULTS)
        logger.info("Settings reset to defaults")

    async def get_theme_mode(self) -> ThemeMode:
        return await self._read("theme_mode")

    async def set_theme_mode(self, theme_mode: ThemeMode) -> None:
        await self._write("theme_mode", theme_mode)

    async def get_refresh_mode(self) -> RefreshMode:
        return await self._read("refresh_mode")

    async def set_refresh_mode(self, refresh_mode: RefreshMode) -> None:
        await self._write("refresh_mode", refresh_mode)

    async def get_language(self) -> str:
        return await self._read("language")

    async def set_language(self, language: str) -> None:
        await self._write("language", language)

    async def get_font_size_multiplier(self) -> float:
        return await self._read("font_size_multiplier")

    async def set_font_size_multiplier(self, multiplier: float) -> None:
        await self._write("font_size_multiplier", multiplier)

    async def get_widget_rotation_enabled(self) -> bool:
        return await self._read("widget_rotation_enabled")

    async def set_widget_rotation_enabled(self, enabled: bool) -> None:
        await self._write("widget_rotation_enabled", enabled)

    async def get_breathing_animation_enabled(self) -> bool:
        return await self._read("breathing_animation_enabled")

    async def set_breathing_animation_enabled(self, enabled: bool) -> None:
        await self._write("breathing_animation_enabled", enabled)

    async def get_has_completed_onboarding(self) -> bool:
        return await self._read("has_completed_onboarding")

    async def set_has_completed_onboarding(self, completed: bool) -> None:
        await self._write("has_completed_onboarding", completed)

    async def _read(self, field_name: str) -> Any:
        default = getattr(_DEFAULTS, field_name)
        stored = await self._store.get(NAMESPACE_SETTINGS, SETTINGS_KEYS[field_name])
        if stored is None:
            return default
        try:
            return _validate_field(field_name, stored)
        except ModelValidationError:
            logger.warning(
                f"Stored setting '{SETTINGS_KEYS[field_name]}' is invalid, using default"
            )
            return default

    async def _write(self, field_name: str, value: Any) -> None:
        try:
            value = _validate_field(field_name, value)
        except ModelValidationError as e:
            raise InvalidInputError(f"Invalid value for setting '{field_name}': {value!r}") from e
        if isinstance(value, Enum):
            value = value.value
        await self._store.put(NAMESPACE_SETTINGS, SETTINGS_KEYS[field_name], value)


def _validate_field(field_name: str, value: Any) -> Any:
    """Validate one value against the Settings field definition."""
    return getattr(Settings.model_validate({field_name: value}), field_name)
