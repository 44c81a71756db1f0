"""
Denormalized widget snapshot.

This is the only view of the core that the companion renderer ever sees.
``to_shared_values`` flattens it into the fixed key schema of the
cross-process area; ``from_shared_values`` is the renderer-side inverse.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .affirmation import Affirmation
from .settings import RefreshMode, Settings, ThemeMode

logger = logging.getLogger(__name__)


class WidgetKeys:
    """Keys of the cross-process area (must match the renderer)."""

    CURRENT_AFFIRMATION_TEXT = "current_affirmation_text"
    CURRENT_AFFIRMATION_ID = "current_affirmation_id"
    AFFIRMATIONS_LIST = "affirmations_list"
    AFFIRMATIONS_COUNT = "affirmations_count"
    HAS_AFFIRMATIONS = "has_affirmations"
    THEME_MODE = "theme_mode"
    WIDGET_ROTATION_ENABLED = "widget_rotation_enabled"
    FONT_SIZE_MULTIPLIER = "font_size_multiplier"
    REFRESH_MODE = "refresh_mode"
    LANGUAGE = "language"
    LAST_UPDATE = "last_update"


class WidgetAffirmation(BaseModel):
    """List entry as mirrored: no timestamps, no counters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    text: str
    is_active: bool = Field(default=True, alias="isActive")


class WidgetSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_affirmation_id: Optional[str] = None
    current_affirmation_text: Optional[str] = None
    affirmations: List[WidgetAffirmation] = Field(default_factory=list)
    theme_mode: ThemeMode = ThemeMode.SYSTEM
    widget_rotation_enabled: bool = True
    font_size_multiplier: float = 1.0
    refresh_mode: RefreshMode = RefreshMode.ON_UNLOCK
    language: str = "fr"
    last_update: Optional[datetime] = None

    @property
    def has_affirmations(self) -> bool:
        return len(self.affirmations) > 0

    @classmethod
    def build(
        cls,
        active: List[Affirmation],
        current: Optional[Affirmation],
        settings: Settings,
        last_update: Optional[datetime] = None,
    ) -> "WidgetSnapshot":
        """Derive a snapshot from store state.

        ``current`` is dropped unless it is one of ``active``.
        """
        active_ids = {a.id for a in active}
        if current is not None and current.id not in active_ids:
            current = None
        return cls(
            current_affirmation_id=current.id if current else None,
            current_affirmation_text=current.text if current else None,
            affirmations=[
                WidgetAffirmation(id=a.id, text=a.text, is_active=a.is_active)
                for a in active
            ],
            theme_mode=settings.theme_mode,
            widget_rotation_enabled=settings.widget_rotation_enabled,
            font_size_multiplier=settings.font_size_multiplier,
            refresh_mode=settings.refresh_mode,
            language=settings.language,
            last_update=last_update,
        )

    def to_shared_values(self) -> Dict[str, Any]:
        """Flatten into the cross-process key schema. Absent slots are omitted."""
        values: Dict[str, Any] = {
            WidgetKeys.AFFIRMATIONS_LIST: json.dumps(
                [a.model_dump(by_alias=True) for a in self.affirmations],
                ensure_ascii=False,
            ),
            WidgetKeys.AFFIRMATIONS_COUNT: len(self.affirmations),
            WidgetKeys.HAS_AFFIRMATIONS: self.has_affirmations,
            WidgetKeys.THEME_MODE: self.theme_mode.value,
            WidgetKeys.WIDGET_ROTATION_ENABLED: self.widget_rotation_enabled,
            WidgetKeys.FONT_SIZE_MULTIPLIER: float(self.font_size_multiplier),
            WidgetKeys.REFRESH_MODE: self.refresh_mode.value,
            WidgetKeys.LANGUAGE: self.language,
        }
        if self.current_affirmation_id is not None:
            values[WidgetKeys.CURRENT_AFFIRMATION_ID] = self.current_affirmation_id
            values[WidgetKeys.CURRENT_AFFIRMATION_TEXT] = self.current_affirmation_text
        if self.last_update is not None:
            values[WidgetKeys.LAST_UPDATE] = self.last_update.isoformat()
        return values

    @classmethod
    def from_shared_values(cls, values: Dict[str, Any]) -> "WidgetSnapshot":
        """Rebuild a snapshot from the cross-process area.

        Unknown or malformed values fall back to defaults; a renderer must
        always be able to draw something.
        """
        affirmations: List[WidgetAffirmation] = []
        raw_list = values.get(WidgetKeys.AFFIRMATIONS_LIST)
        if raw_list:
            try:
                affirmations = [
                    WidgetAffirmation.model_validate(item) for item in json.loads(raw_list)
                ]
            except (ValueError, TypeError) as e:
                logger.warning(f"Ignoring malformed affirmations list in widget data: {e}")

        data: Dict[str, Any] = {
            "current_affirmation_id": values.get(WidgetKeys.CURRENT_AFFIRMATION_ID),
            "current_affirmation_text": values.get(WidgetKeys.CURRENT_AFFIRMATION_TEXT),
            "affirmations": affirmations,
        }
        optional = {
            "theme_mode": WidgetKeys.THEME_MODE,
            "widget_rotation_enabled": WidgetKeys.WIDGET_ROTATION_ENABLED,
            "font_size_multiplier": WidgetKeys.FONT_SIZE_MULTIPLIER,
            "refresh_mode": WidgetKeys.REFRESH_MODE,
            "language": WidgetKeys.LANGUAGE,
            "last_update": WidgetKeys.LAST_UPDATE,
        }
        for field_name, key in optional.items():
            if values.get(key) is not None:
                data[field_name] = values[key]

        try:
            return cls.model_validate(data)
        except ValueError as e:
            logger.warning(f"Widget data failed validation, using defaults: {e}")
            return cls(affirmations=affirmations)
