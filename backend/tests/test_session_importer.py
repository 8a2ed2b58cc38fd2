"""Tests for the CSV session import pipeline."""

from datetime import timezone

import pytest

from agamotto.models.session import SessionState
from agamotto.services.csv_validator import ValidationReport
from agamotto.services.errors import StoreWriteError
from agamotto.services.session_importer import SessionImporter, extract_tag_names
from agamotto.services.tag_palette import COLOR_PALETTE, MAX_TAGS
from tests.helpers import HEADER, FakeRecordStore, csv_text, make_session, make_tag

UTC = timezone.utc

WORKOUT_ROW = "27/01/2026,09:00:00,Morning workout,3600,4,Great cardio,fitness,completed"
WORKOUT_TS = 1769504400000


async def run_import(store, content):
    return await SessionImporter(store, tz=UTC).import_csv(content)


@pytest.mark.asyncio
async def test_morning_workout_creates_fourth_palette_tag(seeded_store):
    outcome = await run_import(seeded_store, csv_text(WORKOUT_ROW))

    assert outcome.success_count == 1
    assert outcome.created_tags == ["fitness"]
    assert outcome.tags_created == 1
    assert seeded_store.tags["fitness"].color == COLOR_PALETTE[3]

    (session,) = seeded_store.sessions.values()
    assert session.duration == 3_600_000
    assert session.tag.name == "fitness"
    assert session.tag.color == COLOR_PALETTE[3]
    assert session.title == "Morning workout"
    assert session.comment == "Great cardio"
    assert session.rating == 4
    assert session.timestamp == WORKOUT_TS
    assert session.state == SessionState.COMPLETED
    assert outcome.tone == "success"


@pytest.mark.asyncio
async def test_invalid_file_touches_no_storage():
    class ExplodingStore(FakeRecordStore):
        async def get_all_sessions(self):
            raise AssertionError("storage must not be read")

    content = "Date,Time,Title,Duration,Rating,Comment,Tag,State\n" + WORKOUT_ROW
    outcome = await run_import(ExplodingStore(), content)

    assert not outcome.is_valid
    assert outcome.blocked
    assert outcome.success_count == 0
    assert outcome.session_count == 0
    assert outcome.tone == "error"


@pytest.mark.asyncio
async def test_reimport_is_idempotent(seeded_store):
    content = csv_text(
        WORKOUT_ROW,
        "28/01/2026,18:30:00,Evening read,1800,3,,reading,completed",
        "29/01/2026,07:00:00,Skipped run,0,0,,,aborted",
    )
    first = await run_import(seeded_store, content)
    assert first.success_count == 3
    before = (dict(seeded_store.sessions), dict(seeded_store.tags))

    second = await run_import(seeded_store, content)
    assert second.success_count == 0
    assert second.duplicates_skipped == first.success_count
    assert second.created_tags == []
    assert (seeded_store.sessions, seeded_store.tags) == before
    assert second.tone == "warning"


@pytest.mark.asyncio
async def test_existing_session_wins_over_duplicate_row(fake_store):
    fake_store.sessions["keep"] = make_session("keep", WORKOUT_TS, title="A")
    content = csv_text("27/01/2026,09:00:00,  B  ,60,3,,,completed")

    outcome = await run_import(fake_store, content)

    assert outcome.success_count == 0
    assert outcome.duplicates_skipped == 1
    duplicate = outcome.duplicate_rows[0]
    assert (duplicate.row_number, duplicate.timestamp, duplicate.title) == (2, WORKOUT_TS, "B")
    assert fake_store.sessions["keep"].title == "A"
    assert len(fake_store.sessions) == 1


@pytest.mark.asyncio
async def test_repeated_timestamp_within_file_is_a_duplicate(fake_store):
    content = csv_text(
        "27/01/2026,09:00:00,First,60,3,,,completed",
        "27/01/2026,09:00:00,Second,60,3,,,completed",
    )
    outcome = await run_import(fake_store, content)

    assert outcome.success_count == 1
    assert [d.title for d in outcome.duplicate_rows] == ["Second"]
    assert outcome.duplicate_rows[0].row_number == 3


@pytest.mark.asyncio
async def test_tag_limit_blocks_whole_import(fake_store):
    for index in range(MAX_TAGS - 1):
        fake_store.tags[f"t{index}"] = make_tag(f"t{index}", COLOR_PALETTE[index])

    content = csv_text(
        "27/01/2026,09:00:00,One,60,3,,new-a,completed",
        "27/01/2026,10:00:00,Two,60,3,,new-b,completed",
        "27/01/2026,11:00:00,Three,60,3,,,completed",
    )
    outcome = await run_import(fake_store, content)

    assert outcome.blocked
    assert outcome.success_count == 0
    assert fake_store.sessions == {}
    assert fake_store.tag_writes == 0
    assert len(fake_store.tags) == MAX_TAGS - 1
    assert 'Cannot create tag "new-b"' in outcome.errors[0]
    assert outcome.tone == "error"


@pytest.mark.asyncio
async def test_write_failure_is_isolated_to_its_row(fake_store):
    fake_store.failing_titles.add("Broken")
    content = csv_text(
        "27/01/2026,09:00:00,Fine,60,3,,,completed",
        "27/01/2026,10:00:00,Broken,60,3,,,completed",
        "27/01/2026,11:00:00,Also fine,60,3,,,completed",
    )
    outcome = await run_import(fake_store, content)

    assert outcome.success_count == 2
    assert outcome.failed_count == 1
    assert outcome.failed_rows[0].row_number == 3
    assert "Write rejected" in outcome.failed_rows[0].error
    assert outcome.tone == "warning"


@pytest.mark.asyncio
async def test_live_state_rows_are_rejected_even_if_validation_is_bypassed(fake_store):
    class PermissiveValidator:
        def validate(self, content, tz=None):
            return ValidationReport(is_valid=True, session_count=2)

    content = csv_text(
        "27/01/2026,09:00:00,Live,60,3,,,active",
        "27/01/2026,10:00:00,Done,60,3,,,completed",
    )
    importer = SessionImporter(fake_store, validator=PermissiveValidator(), tz=UTC)
    outcome = await importer.import_csv(content)

    assert outcome.success_count == 1
    assert outcome.failed_rows[0].row_number == 2
    assert 'Cannot import "active" sessions' in outcome.failed_rows[0].error
    assert all(not s.is_live for s in fake_store.sessions.values())


@pytest.mark.asyncio
async def test_unparseable_timestamp_after_bypassed_validation_fails_row(fake_store):
    class PermissiveValidator:
        def validate(self, content, tz=None):
            return ValidationReport(is_valid=True, session_count=1)

    importer = SessionImporter(fake_store, validator=PermissiveValidator(), tz=UTC)
    outcome = await importer.import_csv(csv_text("31/02/2026,09:00:00,Bad,60,3,,,completed"))

    assert outcome.success_count == 0
    assert outcome.duplicates_skipped == 0
    assert "Cannot create valid date" in outcome.failed_rows[0].error


@pytest.mark.asyncio
async def test_created_tags_resolve_without_rereading_the_store(seeded_store):
    class StaleReadStore(FakeRecordStore):
        """get_tag never sees tags written after construction."""

        def __init__(self, source):
            super().__init__()
            self.tags = source.tags
            self.visible = set(source.tags)

        async def get_tag(self, name):
            if name not in self.visible:
                return None
            return await super().get_tag(name)

    store = StaleReadStore(seeded_store)
    content = csv_text(
        WORKOUT_ROW,
        "28/01/2026,09:00:00,Another workout,1200,5,,fitness,completed",
    )
    outcome = await run_import(store, content)

    assert outcome.success_count == 2
    assert outcome.warnings == []
    assert all(s.tag.name == "fitness" for s in store.sessions.values())


@pytest.mark.asyncio
async def test_tag_names_are_trimmed_and_case_sensitive(seeded_store):
    content = csv_text(
        "27/01/2026,09:00:00,One,60,3,,  work  ,completed",
        "27/01/2026,10:00:00,Two,60,3,,Work,completed",
    )
    outcome = await run_import(seeded_store, content)

    assert outcome.created_tags == ["Work"]
    tags = sorted(s.tag.name for s in seeded_store.sessions.values())
    assert tags == ["Work", "work"]


@pytest.mark.asyncio
async def test_untagged_rows_import_without_tag(fake_store):
    outcome = await run_import(fake_store, csv_text("27/01/2026,09:00:00,Plain,90.5,2.5,,,not_started"))

    (session,) = fake_store.sessions.values()
    assert session.tag is None
    assert session.duration == 90_500
    assert session.rating == 2.5
    assert session.state == SessionState.NOT_STARTED
    assert outcome.created_tags == []


@pytest.mark.asyncio
async def test_imported_sessions_get_fresh_ids(fake_store):
    content = csv_text(
        "27/01/2026,09:00:00,One,60,3,,,completed",
        "27/01/2026,10:00:00,Two,60,3,,,completed",
    )
    await run_import(fake_store, content)
    assert len(set(fake_store.sessions)) == 2


@pytest.mark.asyncio
async def test_import_does_not_touch_tag_counters(seeded_store):
    await run_import(seeded_store, csv_text("27/01/2026,09:00:00,One,60,3,,work,completed"))
    assert seeded_store.tags["work"].total_instances == 0
    assert seeded_store.tags["work"].date_last_used == 0


def test_extract_tag_names_keeps_first_appearance_order():
    rows = [
        ["d", "t", "x", "1", "1", "", " b ", "completed"],
        ["d", "t", "x", "1", "1", "", "", "completed"],
        ["d", "t", "x", "1", "1", "", "a", "completed"],
        ["d", "t", "x", "1", "1", "", "b", "completed"],
    ]
    assert extract_tag_names(rows) == ["b", "a"]


def test_header_constant_matches_wire_format():
    assert HEADER == "Date,Time,Title,Duration (seconds),Rating,Comment,Tag,State"


@pytest.mark.asyncio
async def test_oversized_duration_after_bypassed_validation_fails_row(fake_store):
    class PermissiveValidator:
        def validate(self, content, tz=None):
            return ValidationReport(is_valid=True, session_count=3)

    content = csv_text(
        "27/01/2026,09:00:00,Ok row,60,4,,,completed",
        "27/01/2026,10:00:00,Huge,1e308,4,,,completed",
        "27/01/2026,11:00:00,After,60,4,,,completed",
    )
    importer = SessionImporter(fake_store, validator=PermissiveValidator(), tz=UTC)
    outcome = await importer.import_csv(content)

    assert outcome.success_count == 2
    assert [r.row_number for r in outcome.failed_rows] == [3]
    assert "Invalid row values" in outcome.failed_rows[0].error
    assert sorted(s.title for s in fake_store.sessions.values()) == ["After", "Ok row"]
    assert outcome.tone == "warning"


class FailingTagStore(FakeRecordStore):
    """Rejects writes for the tag names listed in failing_tags"""

    def __init__(self, failing_tags):
        super().__init__()
        self.failing_tags = set(failing_tags)

    async def put_tag(self, tag):
        if tag.name in self.failing_tags:
            raise StoreWriteError("disk full")
        await super().put_tag(tag)


@pytest.mark.asyncio
async def test_tag_write_failure_returns_blocked_outcome():
    store = FailingTagStore({"fitness"})
    outcome = await run_import(store, csv_text(WORKOUT_ROW))

    assert outcome.blocked
    assert outcome.success_count == 0
    assert outcome.created_tags == []
    assert 'Failed to create tag "fitness": disk full' in outcome.errors[0]
    assert outcome.tone == "error"
    assert store.sessions == {}


@pytest.mark.asyncio
async def test_tag_write_failure_reports_tags_already_created():
    store = FailingTagStore({"reading"})
    content = csv_text(
        "27/01/2026,09:00:00,One,60,3,,fitness,completed",
        "27/01/2026,10:00:00,Two,60,3,,reading,completed",
    )
    outcome = await run_import(store, content)

    assert outcome.blocked
    assert outcome.created_tags == ["fitness"]
    assert set(store.tags) == {"fitness"}
    assert store.sessions == {}
