"""
Cross-process area as a JSON document in a directory shared with the renderer.

Every write replaces the whole document through a temp file in the same
directory followed by ``os.replace``, so a renderer reading concurrently
sees either the previous snapshot or the new one, never a partial file.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from ...domain.errors import SyncBridgeError

logger = logging.getLogger(__name__)


def read_shared_document(path: Path) -> Dict[str, Any]:
    """Load the shared document; a missing file reads as empty."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Widget data in {path} is not a JSON object")
    return data


class SharedFileWidgetStorage:
    """Concrete WidgetStorage writing ``widget_data.json``."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def replace(self, values: Mapping[str, Any]) -> None:
        try:
            await asyncio.to_thread(self._write_atomic, dict(values))
        except (OSError, TypeError, ValueError) as e:
            raise SyncBridgeError(f"Could not write widget data to {self._path}: {e}") from e

    async def read(self) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(read_shared_document, self._path)
        except (OSError, ValueError) as e:
            raise SyncBridgeError(f"Could not read widget data from {self._path}: {e}") from e

    async def clear(self) -> None:
        await self.replace({})

    def _write_atomic(self, values: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(values, ensure_ascii=False, indent=2)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote widget data ({len(values)} keys) to {self._path}")
