"""SettingsRepository protocol — field-level access to user preferences."""

from typing import Protocol, runtime_checkable

from ...models.settings import RefreshMode, Settings, ThemeMode


@runtime_checkable
class SettingsRepository(Protocol):
    """Every getter falls back to the ``Settings.default()`` value when unset."""

    async def get_settings(self) -> Settings: ...

    async def save_settings(self, settings: Settings) -> None: ...

    async def get_theme_mode(self) -> ThemeMode: ...

    async def set_theme_mode(self, theme_mode: ThemeMode) -> None: ...

    async def get_refresh_mode(self) -> RefreshMode: ...

    async def set_refresh_mode(self, refresh_mode: RefreshMode) -> None: ...

    async def get_language(self) -> str: ...

    async def set_language(self, language: str) -> None: ...

    async def get_font_size_multiplier(self) -> float: ...

    async def set_font_size_multiplier(self, multiplier: float) -> None: ...

    async def get_widget_rotation_enabled(self) -> bool: ...

    async def set_widget_rotation_enabled(self, enabled: bool) -> None: ...

    async def get_breathing_animation_enabled(self) -> bool: ...

    async def set_breathing_animation_enabled(self, enabled: bool) -> None: ...

    async def get_has_completed_onboarding(self) -> bool: ...

    async def set_has_completed_onboarding(self, completed: bool) -> None: ...

    async def reset_to_defaults(self) -> None: ...
