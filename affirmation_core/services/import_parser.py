"""
Plain-text import format.

Accepted shapes, which may be mixed in one payload:

* one affirmation per non-empty line
* numbered entries (``"3. text"``); following lines continue the entry
  until a blank line or the next number
* the export format, whose ``#`` comment lines are ignored
"""

import re
from dataclasses import dataclass, field
from typing import List

from ..models.affirmation import validate_text

_NUMBERED_RE = re.compile(r"^\d+\.\s*(.+)$")

REASON_PREVIEW_LENGTH = 30


def preview(text: str, max_length: int = REASON_PREVIEW_LENGTH) -> str:
    """Shorten text for skip reasons."""
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."


@dataclass
class ParseResult:
    texts: List[str] = field(default_factory=list)
    skipped_reasons: List[str] = field(default_factory=list)

    @property
    def invalid_count(self) -> int:
        return len(self.skipped_reasons)

    def add(self, text: str) -> None:
        text = text.strip()
        error = validate_text(text)
        if error is not None:
            self.skipped_reasons.append(f'Invalid: "{preview(text)}" - {error}')
        else:
            self.texts.append(text)


def parse_affirmations(content: str) -> ParseResult:
    """Split an import payload into candidate texts.

    Every candidate is checked with ``validate_text``; rejected ones are
    reported in ``skipped_reasons`` instead of ``texts``.
    """
    result = ParseResult()
    current: List[str] = []
    in_numbered = False

    def flush() -> None:
        nonlocal in_numbered
        if current:
            result.add("\n".join(current))
            current.clear()
        in_numbered = False

    for line in content.splitlines():
        stripped = line.strip()

        if not stripped:
            flush()
            continue

        # Comments never end an entry; export metadata sits between entries.
        if stripped.startswith("#"):
            continue

        match = _NUMBERED_RE.match(stripped)
        if match:
            flush()
            current.append(match.group(1))
            in_numbered = True
            continue

        if in_numbered:
            current.append(stripped)
            continue

        result.add(stripped)

    flush()
    return result
