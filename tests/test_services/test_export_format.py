"""Tests for the export text format."""

from datetime import datetime, timedelta, timezone

from affirmation_core.models.affirmation import Affirmation
from affirmation_core.services.export_format import format_export
from affirmation_core.services.import_parser import parse_affirmations

T0 = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def make(text, order, active=True, created=T0, updated=None):
    return Affirmation(
        id=f"id-{order}",
        text=text,
        sort_order=order,
        is_active=active,
        created_at=created,
        updated_at=updated or created,
    )


class TestFormatExport:
    def test_header(self):
        content = format_export([make("A", 0)], exported_at=T0)
        lines = content.splitlines()
        assert lines[0] == "# My Affirmations"
        assert lines[1].startswith("# Exported on ")
        assert lines[2] == "# Total: 1 affirmation(s)"
        assert lines[3] == ""

    def test_entries_ordered_and_annotated(self):
        content = format_export(
            [
                make("Second", 1, active=False),
                make("First", 0, updated=T0 + timedelta(days=1)),
            ],
            exported_at=T0,
        )
        body = content.splitlines()[4:]
        assert body[0] == "1. First"
        assert body[1].startswith("   # Created: ")
        assert body[2].startswith("   # Updated: ")
        assert body[3] == "   # Active: Yes"
        assert body[4] == ""
        assert body[5] == "2. Second"
        assert not any(line.startswith("   # Updated:") for line in body[6:8])
        assert body[7] == "   # Active: No"

    def test_ties_broken_by_created_at(self):
        later = make("Later", 0, created=T0 + timedelta(hours=1))
        earlier = make("Earlier", 0)
        content = format_export([later, earlier], exported_at=T0)
        assert content.index("1. Earlier") < content.index("2. Later")

    def test_multiline_text_indented(self):
        content = format_export([make("Line one\nLine two", 0)], exported_at=T0)
        assert "1. Line one\n   Line two\n" in content

    def test_parser_reads_export_back(self):
        originals = [make("I am capable", 0), make("Je suis\ncalme", 1), make("Hidden", 2, active=False)]
        texts = parse_affirmations(format_export(originals, exported_at=T0)).texts
        assert texts == ["I am capable", "Je suis\ncalme", "Hidden"]
