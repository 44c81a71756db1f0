"""Human-readable export format, readable back by ``import_parser``."""

from datetime import datetime
from typing import Iterable, List

from ..models.affirmation import Affirmation

DATE_FORMAT = "%Y-%m-%d %H:%M"
CONTINUATION_INDENT = "   "


def _local(dt: datetime) -> str:
    return dt.astimezone().strftime(DATE_FORMAT)


def format_export(affirmations: Iterable[Affirmation], exported_at: datetime) -> str:
    """Render affirmations ordered by sort_order, then created_at."""
    ordered = sorted(affirmations, key=lambda a: (a.sort_order, a.created_at))

    lines: List[str] = [
        "# My Affirmations",
        f"# Exported on {_local(exported_at)}",
        f"# Total: {len(ordered)} affirmation(s)",
        "",
    ]
    for number, affirmation in enumerate(ordered, start=1):
        first, *rest = affirmation.text.split("\n")
        lines.append(f"{number}. {first}")
        lines.extend(f"{CONTINUATION_INDENT}{part}" for part in rest)
        lines.append(f"   # Created: {_local(affirmation.created_at)}")
        if affirmation.updated_at != affirmation.created_at:
            lines.append(f"   # Updated: {_local(affirmation.updated_at)}")
        lines.append(f"   # Active: {'Yes' if affirmation.is_active else 'No'}")
        lines.append("")

    return "\n".join(lines) + "\n"
