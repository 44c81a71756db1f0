"""Domain events for affirmation and settings workflows.

Defines post-commit event types and a lightweight async EventBus. Use cases
publish an event only after their write has been persisted; subscribers
(the widget sync bridge) react without being able to fail the operation.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Coroutine, Dict, List, Optional, Tuple, Type

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------


@dataclass
class StateChanged:
    """Base for every event that changes user-visible state."""

    timestamp: datetime = field(default_factory=_utcnow, kw_only=True)


@dataclass
class AffirmationCreated(StateChanged):
    affirmation_id: str


@dataclass
class AffirmationUpdated(StateChanged):
    affirmation_id: str


@dataclass
class AffirmationDeleted(StateChanged):
    """Emitted after a record is removed.

    ``was_current`` is True when the record was the current pick.
    """

    affirmation_id: str
    was_current: bool = False


@dataclass
class AffirmationsReordered(StateChanged):
    ordered_ids: Tuple[str, ...]


@dataclass
class AffirmationsImported(StateChanged):
    imported_count: int
    mode: str


@dataclass
class CurrentAffirmationChanged(StateChanged):
    affirmation_id: Optional[str]


@dataclass
class SettingsChanged(StateChanged):
    fields: Tuple[str, ...]


STATE_EVENTS: Tuple[Type[StateChanged], ...] = (
    AffirmationCreated,
    AffirmationUpdated,
    AffirmationDeleted,
    AffirmationsReordered,
    AffirmationsImported,
    CurrentAffirmationChanged,
    SettingsChanged,
)


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------

# Type alias for an async event handler
EventHandler = Callable[[Any], Coroutine[Any, Any, None]]


class EventBus:
    """Simple in-process async event bus.

    Subscribers register for a specific event type. When that event is
    published, all registered handlers are invoked. A failing handler
    logs the error but does not prevent remaining handlers from running,
    and never propagates to the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[Type, List[EventHandler]] = {}

    def subscribe(self, event_type: Type, handler: EventHandler) -> None:
        """Register *handler* for *event_type*."""
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: Type, handler: EventHandler) -> None:
        """Remove *handler*; unknown handlers are ignored."""
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    async def publish(self, event: Any) -> None:
        """Dispatch *event* to all registered handlers for its type."""
        handlers = list(self._subscribers.get(type(event), []))
        for handler in handlers:
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Event handler %s failed for %s",
                    getattr(handler, "__name__", handler),
                    type(event).__name__,
                )
