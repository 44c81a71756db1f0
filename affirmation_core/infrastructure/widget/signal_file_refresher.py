"""Renderer refresh request via a signal file the renderer watches."""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Union

from ...domain.errors import SyncBridgeError
from ...models.affirmation import utcnow

logger = logging.getLogger(__name__)


class SignalFileRefresher:
    """Concrete WidgetRefresher.

    Rewrites the signal file with a fresh timestamp and nonce; the content
    changes on every request even when two land in the same clock tick.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def request_refresh(self) -> None:
        token = f"{utcnow().isoformat()} {uuid.uuid4().hex}\n"
        try:
            await asyncio.to_thread(self._write, token)
        except OSError as e:
            raise SyncBridgeError(f"Could not signal widget refresh at {self._path}: {e}") from e
        logger.debug("Widget refresh requested")

    def _write(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(token, encoding="utf-8")
