"""Renderer-side, read-only access to the mirrored snapshot."""

import logging
from pathlib import Path
from typing import Union

from ...models.widget_snapshot import WidgetSnapshot
from .shared_file_storage import read_shared_document

logger = logging.getLogger(__name__)


class WidgetSnapshotReader:
    """Reads the shared document only; never touches the encrypted store."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    def read(self) -> WidgetSnapshot:
        """Current snapshot. Missing or corrupt data yields an empty snapshot."""
        try:
            values = read_shared_document(self._path)
        except (OSError, ValueError) as e:
            logger.warning(f"Widget data unreadable, showing empty state: {e}")
            return WidgetSnapshot()
        return WidgetSnapshot.from_shared_values(values)
