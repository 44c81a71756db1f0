"""Shared plumbing for use cases."""

import logging
from typing import Any, Optional

from ...domain.events import EventBus

logger = logging.getLogger(__name__)


class UseCase:
    """Base class: holds the event bus and publishes post-commit events.

    Subclasses implement ``execute`` and return ``Success`` or ``Failure``.
    Storage errors raised by repositories are caught in ``execute`` and
    returned as ``Failure``.
    """

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self._bus = bus

    async def _publish(self, event: Any) -> None:
        if self._bus is None:
            return
        await self._bus.publish(event)
