"""User preferences.

Stored as one key per field in the ``settings`` namespace so a single
preference can be written without touching the others.
"""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class RefreshMode(str, Enum):
    """Advisory refresh cadence consumed by the companion renderer."""

    ON_UNLOCK = "onUnlock"
    HOURLY = "hourly"
    DAILY = "daily"


class Settings(BaseModel):
    """Singleton preferences record."""

    model_config = ConfigDict(frozen=True)

    theme_mode: ThemeMode = ThemeMode.SYSTEM
    refresh_mode: RefreshMode = RefreshMode.ON_UNLOCK
    language: str = Field(default="fr", min_length=1)
    font_size_multiplier: float = Field(default=1.0, gt=0)
    widget_rotation_enabled: bool = True
    breathing_animation_enabled: bool = True
    has_completed_onboarding: bool = False

    @classmethod
    def default(cls) -> "Settings":
        return cls()


# Field name -> storage key in the settings namespace.
SETTINGS_KEYS: Dict[str, str] = {
    "theme_mode": "themeMode",
    "refresh_mode": "refreshMode",
    "language": "language",
    "font_size_multiplier": "fontSizeMultiplier",
    "widget_rotation_enabled": "widgetRotationEnabled",
    "breathing_animation_enabled": "breathingAnimationEnabled",
    "has_completed_onboarding": "hasCompletedOnboarding",
}
