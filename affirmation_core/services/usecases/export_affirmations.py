"""Export affirmations to the plain-text format."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ...domain.errors import NothingToExportError, StorageError
from ...domain.repositories import AffirmationRepository
from ...domain.results import Failure, Result, Success
from ...models.affirmation import utcnow
from ..export_format import format_export
from .base import UseCase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportReport:
    path: Path
    affirmation_count: int


class ExportAffirmations(UseCase):
    """Render every stored affirmation (active or not) as text.

    Read-only, so nothing is published.
    """

    def __init__(self, affirmations: AffirmationRepository):
        super().__init__(None)
        self._affirmations = affirmations

    async def execute(self) -> Result[str]:
        try:
            affirmations = await self._affirmations.get_all()
        except StorageError as e:
            logger.error(f"Failed to read affirmations for export: {e}")
            return Failure(e)
        if not affirmations:
            return Failure(NothingToExportError())
        return Success(format_export(affirmations, exported_at=utcnow()))

    async def execute_to_file(
        self,
        directory: Union[str, Path],
        file_name: Optional[str] = None,
    ) -> Result[ExportReport]:
        """Write ``<directory>/<file_name>.txt``.

        ``file_name`` defaults to ``affirmations_YYYYMMDD_HHMMSS``.
        """
        try:
            affirmations = await self._affirmations.get_all()
        except StorageError as e:
            logger.error(f"Failed to read affirmations for export: {e}")
            return Failure(e)
        if not affirmations:
            return Failure(NothingToExportError())

        now = utcnow()
        name = file_name or f"affirmations_{now.astimezone():%Y%m%d_%H%M%S}"
        path = Path(directory) / f"{name}.txt"
        content = format_export(affirmations, exported_at=now)
        try:
            await asyncio.to_thread(_write_text, path, content)
        except OSError as e:
            logger.error(f"Failed to write export file {path}: {e}")
            return Failure(StorageError(f"Failed to write export file {path}: {e}"))

        logger.info(f"Exported {len(affirmations)} affirmations to {path}")
        return Success(ExportReport(path=path, affirmation_count=len(affirmations)))


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
