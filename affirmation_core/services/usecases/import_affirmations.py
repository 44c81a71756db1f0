"""
Import affirmations from a plain-text payload.

See ``services.import_parser`` for the accepted shapes. Entries are
committed one by one; cancelling stops at the next entry boundary and
keeps what was already committed.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set, Union

from ...domain.errors import ImportSourceError, InvalidInputError, StorageError
from ...domain.events import AffirmationsImported, EventBus
from ...domain.repositories import AffirmationRepository, AppStateRepository
from ...domain.results import Failure, Result, Success
from ...models.affirmation import Affirmation
from ..import_parser import parse_affirmations, preview
from .base import UseCase

logger = logging.getLogger(__name__)


class ImportMode(str, Enum):
    APPEND = "append"
    REPLACE = "replace"
    SKIP_DUPLICATES = "skip_duplicates"


@dataclass
class ImportReport:
    imported_count: int = 0
    invalid_count: int = 0
    duplicate_count: int = 0
    skipped_reasons: List[str] = field(default_factory=list)
    interrupted: bool = False

    @property
    def skipped_count(self) -> int:
        return self.invalid_count + self.duplicate_count


def _normalize(text: str) -> str:
    return text.strip().lower()


class ImportAffirmations(UseCase):
    """Parse, validate and persist an import payload."""

    def __init__(
        self,
        affirmations: AffirmationRepository,
        app_state: Optional[AppStateRepository] = None,
        bus: Optional[EventBus] = None,
    ):
        super().__init__(bus)
        self._affirmations = affirmations
        self._app_state = app_state

    async def execute_file(
        self,
        path: Union[str, Path],
        mode: Union[ImportMode, str] = ImportMode.APPEND,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[ImportReport]:
        """Read ``path`` as UTF-8 and import its content."""
        path = Path(path)
        try:
            content = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return Failure(ImportSourceError(f"File not found: {path}"))
        except (OSError, UnicodeDecodeError) as e:
            return Failure(ImportSourceError(f"Could not read {path}: {e}"))
        return await self.execute(content, mode, cancel_event)

    async def execute(
        self,
        content: str,
        mode: Union[ImportMode, str] = ImportMode.APPEND,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Result[ImportReport]:
        try:
            mode = ImportMode(mode)
        except ValueError:
            return Failure(InvalidInputError(f"Unknown import mode: {mode!r}"))

        if not content or not content.strip():
            return Failure(ImportSourceError("Import source is empty"))

        parsed = parse_affirmations(content)
        if not parsed.texts:
            return Failure(ImportSourceError("No valid affirmations found in import source"))

        report = ImportReport(
            invalid_count=parsed.invalid_count,
            skipped_reasons=list(parsed.skipped_reasons),
        )

        if cancel_event is not None and cancel_event.is_set():
            report.interrupted = True
            return Success(report)

        changed = False
        try:
            existing_texts: Set[str] = set()
            if mode is ImportMode.REPLACE:
                await self._affirmations.delete_all()
                if self._app_state is not None:
                    await self._app_state.clear_current_affirmation_id()
                changed = True
            elif mode is ImportMode.SKIP_DUPLICATES:
                existing_texts = {_normalize(a.text) for a in await self._affirmations.get_all()}

            for text in parsed.texts:
                if cancel_event is not None and cancel_event.is_set():
                    report.interrupted = True
                    logger.info(f"Import interrupted after {report.imported_count} entries")
                    break

                if mode is ImportMode.SKIP_DUPLICATES:
                    key = _normalize(text)
                    if key in existing_texts:
                        report.duplicate_count += 1
                        report.skipped_reasons.append(f'Duplicate: "{preview(text)}"')
                        continue

                await self._affirmations.create(Affirmation.new(text))
                report.imported_count += 1
                changed = True
                # Let a cancel request land between entries.
                await asyncio.sleep(0)
        except StorageError as e:
            logger.error(
                f"Import failed after {report.imported_count} entries ({mode.value}): {e}"
            )
            if changed:
                await self._publish(
                    AffirmationsImported(imported_count=report.imported_count, mode=mode.value)
                )
            return Failure(ImportSourceError(f"Failed to import affirmations: {e}"))

        logger.info(
            f"Imported {report.imported_count} affirmations "
            f"({report.invalid_count} invalid, {report.duplicate_count} duplicate, mode={mode.value})"
        )
        if changed:
            await self._publish(
                AffirmationsImported(imported_count=report.imported_count, mode=mode.value)
            )
        return Success(report)
