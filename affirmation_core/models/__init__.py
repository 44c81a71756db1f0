from .affirmation import MAX_TEXT_LENGTH, Affirmation, validate_text
from .settings import SETTINGS_KEYS, RefreshMode, Settings, ThemeMode
from .widget_snapshot import WidgetAffirmation, WidgetKeys, WidgetSnapshot

__all__ = [
    "MAX_TEXT_LENGTH",
    "Affirmation",
    "validate_text",
    "SETTINGS_KEYS",
    "RefreshMode",
    "Settings",
    "ThemeMode",
    "WidgetAffirmation",
    "WidgetKeys",
    "WidgetSnapshot",
]
