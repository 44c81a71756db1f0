"""Tests for the import and export use cases."""

import asyncio

import pytest

from affirmation_core.domain.errors import (
    ImportSourceError,
    InvalidInputError,
    NothingToExportError,
)
from affirmation_core.domain.events import AffirmationsImported
from affirmation_core.models.affirmation import Affirmation
from affirmation_core.services.usecases import (
    ExportAffirmations,
    ImportAffirmations,
    ImportMode,
)


@pytest.fixture
def importer(affirmation_repo, app_state_repo, bus):
    return ImportAffirmations(affirmation_repo, app_state_repo, bus)


@pytest.fixture
def imported_events(bus):
    events = []

    async def record(event):
        events.append(event)

    bus.subscribe(AffirmationsImported, record)
    return events


async def seed(repo, *texts):
    return [await repo.create(Affirmation.new(t)) for t in texts]


class TestImportAffirmations:
    @pytest.mark.asyncio
    async def test_numbered_append_into_empty_store(self, importer, affirmation_repo, imported_events):
        result = await importer.execute("1. First\n2. Second\n", ImportMode.APPEND)

        assert result.ok
        assert result.value.imported_count == 2
        assert result.value.skipped_count == 0
        assert [a.text for a in await affirmation_repo.get_all()] == ["First", "Second"]
        assert imported_events[0].imported_count == 2
        assert imported_events[0].mode == "append"

    @pytest.mark.asyncio
    async def test_append_keeps_existing(self, importer, affirmation_repo):
        await seed(affirmation_repo, "Existing")
        await importer.execute("New one", "append")
        assert [a.text for a in await affirmation_repo.get_all()] == ["Existing", "New one"]

    @pytest.mark.asyncio
    async def test_replace_clears_first(self, importer, affirmation_repo, app_state_repo):
        (old,) = await seed(affirmation_repo, "Old")
        await app_state_repo.set_current_affirmation_id(old.id)

        result = await importer.execute("Fresh\nStart", ImportMode.REPLACE)

        assert result.value.imported_count == 2
        records = await affirmation_repo.get_all()
        assert [a.text for a in records] == ["Fresh", "Start"]
        assert [a.sort_order for a in records] == [0, 1]
        assert await app_state_repo.get_current_affirmation_id() is None

    @pytest.mark.asyncio
    async def test_skip_duplicates(self, importer, affirmation_repo):
        await seed(affirmation_repo, "I am calm")

        result = await importer.execute(
            "i am CALM\nI am new\n  I am new  \n", ImportMode.SKIP_DUPLICATES
        )

        report = result.value
        assert report.imported_count == 2
        assert report.duplicate_count == 1
        assert report.invalid_count == 0
        assert report.skipped_count == 1
        assert report.skipped_reasons == ['Duplicate: "i am CALM"']
        assert sorted(a.text for a in await affirmation_repo.get_all()) == [
            "I am calm",
            "I am new",
            "I am new",
        ]

    @pytest.mark.asyncio
    async def test_skip_duplicates_keeps_repeats_within_payload(self, importer, affirmation_repo):
        result = await importer.execute("Same\nSame\n", ImportMode.SKIP_DUPLICATES)

        assert result.value.imported_count == 2
        assert result.value.duplicate_count == 0
        assert [a.text for a in await affirmation_repo.get_all()] == ["Same", "Same"]

    @pytest.mark.asyncio
    async def test_invalid_entries_counted(self, importer, affirmation_repo):
        result = await importer.execute("Fine\n" + "y" * 281)
        assert result.value.imported_count == 1
        assert result.value.invalid_count == 1
        assert result.value.skipped_reasons[0].startswith("Invalid:")

    @pytest.mark.parametrize("content", ["", "   \n\t\n"])
    @pytest.mark.asyncio
    async def test_empty_source(self, importer, content):
        result = await importer.execute(content)
        assert isinstance(result.reason, ImportSourceError)

    @pytest.mark.asyncio
    async def test_no_parseable_entries(self, importer, affirmation_repo):
        result = await importer.execute("# only\n# comments\n" + "z" * 300)
        assert isinstance(result.reason, ImportSourceError)
        assert await affirmation_repo.count() == 0

    @pytest.mark.asyncio
    async def test_replace_with_nothing_parseable_keeps_data(self, importer, affirmation_repo):
        await seed(affirmation_repo, "Keep me")
        result = await importer.execute("# nothing", ImportMode.REPLACE)
        assert not result.ok
        assert await affirmation_repo.count() == 1

    @pytest.mark.asyncio
    async def test_unknown_mode(self, importer):
        result = await importer.execute("x", "merge")
        assert isinstance(result.reason, InvalidInputError)

    @pytest.mark.asyncio
    async def test_cancelled_before_start(self, importer, affirmation_repo, imported_events):
        cancel = asyncio.Event()
        cancel.set()
        result = await importer.execute("a\nb\nc", ImportMode.REPLACE, cancel_event=cancel)

        assert result.value.interrupted is True
        assert result.value.imported_count == 0
        assert imported_events == []

    @pytest.mark.asyncio
    async def test_cancel_mid_import_keeps_committed(self, affirmation_repo, app_state_repo, bus):
        cancel = asyncio.Event()

        async def create_then_cancel(affirmation):
            created = await original_create(affirmation)
            if await affirmation_repo.count() == 2:
                cancel.set()
            return created

        original_create = affirmation_repo.create
        affirmation_repo.create = create_then_cancel

        importer = ImportAffirmations(affirmation_repo, app_state_repo, bus)
        result = await importer.execute("a\nb\nc\nd", cancel_event=cancel)

        assert result.value.interrupted is True
        assert result.value.imported_count == 2
        assert await affirmation_repo.count() == 2

    @pytest.mark.asyncio
    async def test_storage_failure(self, importer, store):
        await store.close()
        result = await importer.execute("a\nb")
        assert isinstance(result.reason, ImportSourceError)

    @pytest.mark.asyncio
    async def test_execute_file(self, importer, tmp_path, affirmation_repo):
        path = tmp_path / "mine.txt"
        path.write_text("1. Première\n2. Deuxième\n", encoding="utf-8")

        result = await importer.execute_file(path)
        assert result.value.imported_count == 2
        assert [a.text for a in await affirmation_repo.get_all()] == ["Première", "Deuxième"]

    @pytest.mark.asyncio
    async def test_execute_file_missing(self, importer, tmp_path):
        result = await importer.execute_file(tmp_path / "nope.txt")
        assert isinstance(result.reason, ImportSourceError)
        assert "not found" in result.message

    @pytest.mark.asyncio
    async def test_execute_file_not_utf8(self, importer, tmp_path):
        path = tmp_path / "latin.txt"
        path.write_bytes(b"\xff\xfe\xfa bad bytes")
        result = await importer.execute_file(path)
        assert isinstance(result.reason, ImportSourceError)


class TestExportAffirmations:
    @pytest.mark.asyncio
    async def test_nothing_to_export(self, affirmation_repo, tmp_path):
        export = ExportAffirmations(affirmation_repo)
        assert isinstance((await export.execute()).reason, NothingToExportError)
        assert isinstance((await export.execute_to_file(tmp_path)).reason, NothingToExportError)

    @pytest.mark.asyncio
    async def test_execute_returns_text(self, affirmation_repo):
        await seed(affirmation_repo, "One", "Two")
        content = (await ExportAffirmations(affirmation_repo).execute()).value
        assert "# Total: 2 affirmation(s)" in content
        assert "1. One" in content and "2. Two" in content

    @pytest.mark.asyncio
    async def test_execute_to_file_default_name(self, affirmation_repo, tmp_path):
        await seed(affirmation_repo, "One")
        report = (await ExportAffirmations(affirmation_repo).execute_to_file(tmp_path / "out")).value

        assert report.affirmation_count == 1
        assert report.path.parent == tmp_path / "out"
        assert report.path.name.startswith("affirmations_")
        assert report.path.suffix == ".txt"
        assert "1. One" in report.path.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_execute_to_file_custom_name(self, affirmation_repo, tmp_path):
        await seed(affirmation_repo, "One")
        report = (await ExportAffirmations(affirmation_repo).execute_to_file(tmp_path, "backup")).value
        assert report.path == tmp_path / "backup.txt"

    @pytest.mark.asyncio
    async def test_round_trip(self, affirmation_repo, importer, tmp_path):
        await seed(affirmation_repo, "I am capable", "Je suis\ncalme", "Third")
        report = (await ExportAffirmations(affirmation_repo).execute_to_file(tmp_path)).value

        result = await importer.execute_file(report.path, ImportMode.REPLACE)

        assert result.value.imported_count == 3
        assert [a.text for a in await affirmation_repo.get_all()] == [
            "I am capable",
            "Je suis\ncalme",
            "Third",
        ]
