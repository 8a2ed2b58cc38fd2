"""Tests for the SQLAlchemy-backed record store."""

from datetime import timezone

import pytest

from agamotto.models.session import SessionState
from agamotto.services.csv_validator import ValidationReport
from agamotto.services.errors import ActiveSessionConflictError, StoreWriteError
from agamotto.services.record_store import SQLRecordStore
from agamotto.services.session_importer import SessionImporter
from agamotto.services.tag_palette import DEFAULT_TAG_TIMESTAMP, DEFAULT_TAGS
from tests.helpers import csv_text, make_session, make_tag

BASE = 1769504400000


@pytest.mark.asyncio
async def test_session_round_trip_keeps_tag_snapshot(sql_store):
    tag = make_tag("fitness", "#DC2626", used=5)
    await sql_store.put_session(make_session("s1", BASE, tag=tag, title="Workout"))

    stored = await sql_store.get_session("s1")
    assert stored.title == "Workout"
    assert stored.state == SessionState.COMPLETED
    assert stored.tag == tag


@pytest.mark.asyncio
async def test_put_session_replaces_by_id(sql_store):
    await sql_store.put_session(make_session("s1", BASE, title="First"))
    await sql_store.put_session(make_session("s1", BASE, title="Second"))

    sessions = await sql_store.get_all_sessions()
    assert [s.title for s in sessions] == ["Second"]


@pytest.mark.asyncio
async def test_sessions_are_ordered_by_timestamp(sql_store):
    await sql_store.put_session(make_session("late", BASE + 1000))
    await sql_store.put_session(make_session("early", BASE))

    assert [s.id for s in await sql_store.get_all_sessions()] == ["early", "late"]


@pytest.mark.asyncio
async def test_second_live_session_is_rejected(sql_store):
    await sql_store.put_session(make_session("a", BASE, state=SessionState.ACTIVE))

    with pytest.raises(ActiveSessionConflictError):
        await sql_store.put_session(make_session("b", BASE + 1, state=SessionState.PAUSED))

    # The live session itself may still be updated
    await sql_store.put_session(make_session("a", BASE, state=SessionState.PAUSED))
    active = await sql_store.get_active_session()
    assert active.id == "a"
    assert active.state == SessionState.PAUSED


@pytest.mark.asyncio
async def test_no_active_session(sql_store):
    await sql_store.put_session(make_session("a", BASE))
    assert await sql_store.get_active_session() is None


@pytest.mark.asyncio
async def test_tag_colors_are_unique(sql_store):
    await sql_store.put_tag(make_tag("work", "#EF4444"))

    with pytest.raises(StoreWriteError):
        await sql_store.put_tag(make_tag("other", "#EF4444"))

    # The store is still usable after the rollback
    await sql_store.put_tag(make_tag("other", "#3B82F6"))
    assert {t.name for t in await sql_store.get_all_tags()} == {"work", "other"}


@pytest.mark.asyncio
async def test_tags_are_listed_most_recently_used_first(sql_store):
    await sql_store.put_tag(make_tag("old", "#EF4444", used=100))
    await sql_store.put_tag(make_tag("new", "#3B82F6", used=300))
    await sql_store.put_tag(make_tag("mid", "#10B981", used=200))

    assert [t.name for t in await sql_store.get_all_tags()] == ["new", "mid", "old"]


@pytest.mark.asyncio
async def test_delete_tag(sql_store):
    await sql_store.put_tag(make_tag("work", "#EF4444"))

    assert await sql_store.delete_tag("work") is True
    assert await sql_store.delete_tag("work") is False
    assert await sql_store.get_tag("work") is None


@pytest.mark.asyncio
async def test_default_tags_are_seeded_once(sql_store):
    assert await sql_store.initialize_default_tags() == len(DEFAULT_TAGS)
    assert await sql_store.initialize_default_tags() == 0

    tags = {t.name: t for t in await sql_store.get_all_tags()}
    assert set(tags) == {name for name, _ in DEFAULT_TAGS}
    for name, color in DEFAULT_TAGS:
        assert tags[name].color == color
        assert tags[name].date_created == DEFAULT_TAG_TIMESTAMP
        assert tags[name].total_instances == 0


@pytest.mark.asyncio
async def test_default_tags_skipped_when_user_has_tags(sql_store):
    await sql_store.put_tag(make_tag("mine", "#EF4444"))

    assert await sql_store.initialize_default_tags() == 0
    assert [t.name for t in await sql_store.get_all_tags()] == ["mine"]


@pytest.mark.asyncio
async def test_config_entries(sql_store):
    assert await sql_store.get_config("sessionSort") is None

    await sql_store.put_config("sessionSort", {"field": "timestamp", "desc": True})
    await sql_store.put_config("lastTag", "work")
    await sql_store.put_config("lastTag", "sleep")

    assert await sql_store.get_config("sessionSort") == {"field": "timestamp", "desc": True}
    assert await sql_store.get_all_config() == {
        "sessionSort": {"field": "timestamp", "desc": True},
        "lastTag": "sleep",
    }


@pytest.mark.asyncio
async def test_writes_are_visible_to_a_new_handle(db_session_factory, sql_store):
    await sql_store.put_tag(make_tag("work", "#EF4444"))

    other = SQLRecordStore(db_session_factory())
    try:
        assert (await other.get_tag("work")).color == "#EF4444"
    finally:
        other.close()


@pytest.mark.asyncio
async def test_out_of_range_integer_is_a_store_write_error(sql_store):
    with pytest.raises(StoreWriteError):
        await sql_store.put_session(make_session("huge", BASE, duration=10 ** 30))

    # Rolled back: the store keeps working
    await sql_store.put_session(make_session("fine", BASE))
    assert [s.id for s in await sql_store.get_all_sessions()] == ["fine"]


@pytest.mark.asyncio
async def test_importing_into_sql_store_never_raises(sql_store):
    class PermissiveValidator:
        def validate(self, content, tz=None):
            return ValidationReport(is_valid=True, session_count=2)

    content = csv_text(
        "27/01/2026,09:00:00,Ok row,60,4,,,completed",
        "27/01/2026,10:00:00,Huge,1e300,4,,,completed",
    )
    importer = SessionImporter(sql_store, validator=PermissiveValidator(), tz=timezone.utc)
    outcome = await importer.import_csv(content)

    assert outcome.success_count == 1
    assert [r.row_number for r in outcome.failed_rows] == [3]
    assert [s.title for s in await sql_store.get_all_sessions()] == ["Ok row"]
