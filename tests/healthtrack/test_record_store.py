"""Tests for the SQLAlchemy record store on SQLite."""

from __future__ import annotations

import pytest

from healthtrack.errors import NotFoundError, PersistenceError
from healthtrack.models.attachment import EventScope
from healthtrack.models.enums import AttachmentState, EventType
from healthtrack.records import SQLAlchemyRecordStore


async def test_find_event_distinguishes_missing_track_and_event(
    record_store: SQLAlchemyRecordStore,
) -> None:
    # Given: One track with one event
    track = await record_store.create_track("u1", "sleep", "Sleep")
    event = await record_store.create_event(track.id, title="Night", type=EventType.NOTE)

    # When: Looking up by scope
    found = await record_store.find_event(EventScope("u1", "sleep", event.id))
    no_event = await record_store.find_event(EventScope("u1", "sleep", "nope"))
    no_track = await record_store.find_event(EventScope("u2", "sleep", event.id))

    # Then: Each case is reported distinctly
    assert found.track_exists and found.event is not None
    assert found.event.id == event.id
    assert found.event.attachment_state == AttachmentState.NONE
    assert no_event.track_exists and no_event.event is None
    assert not no_track.track_exists and no_track.event is None


async def test_require_event_raises_not_found(record_store: SQLAlchemyRecordStore) -> None:
    # Given: A track without events
    await record_store.create_track("u1", "sleep", "Sleep")

    # When / Then
    with pytest.raises(NotFoundError, match="Event not found"):
        await record_store.require_event(EventScope("u1", "sleep", "missing"))
    with pytest.raises(NotFoundError, match="Track not found"):
        await record_store.require_event(EventScope("u1", "diet", "missing"))


async def test_set_event_file_url_round_trips(record_store: SQLAlchemyRecordStore) -> None:
    # Given: An event with no attachment
    track = await record_store.create_track("u1", "sleep", "Sleep")
    event = await record_store.create_event(track.id, title="Scan", type=EventType.RESULT)

    # When: Setting and then clearing the reference
    attached = await record_store.set_event_file_url(event.id, "https://b/events/x/a.pdf")
    cleared = await record_store.set_event_file_url(event.id, None)

    # Then
    assert attached.file_url == "https://b/events/x/a.pdf"
    assert attached.attachment_state == AttachmentState.CONFIRMED
    assert cleared.file_url is None


async def test_set_event_file_url_unknown_event(record_store: SQLAlchemyRecordStore) -> None:
    # When / Then
    with pytest.raises(NotFoundError):
        await record_store.set_event_file_url("missing", "https://b/a.pdf")


async def test_list_events_newest_first_with_limit(record_store: SQLAlchemyRecordStore) -> None:
    # Given: Three events created in order
    track = await record_store.create_track("u1", "sleep", "Sleep")
    ids = [
        (await record_store.create_event(track.id, title=f"e{i}", type=EventType.NOTE)).id
        for i in range(3)
    ]

    # When
    events = await record_store.list_events("u1", "sleep", limit=2)

    # Then: Newest first, capped
    assert [event.id for event in events] == [ids[2], ids[1]]


async def test_list_track_file_urls_only_attached(record_store: SQLAlchemyRecordStore) -> None:
    # Given: One attached and one bare event
    track = await record_store.create_track("u1", "sleep", "Sleep")
    await record_store.create_event(
        track.id, title="a", type=EventType.NOTE, file_url="https://b/events/1/a.pdf"
    )
    await record_store.create_event(track.id, title="b", type=EventType.NOTE)

    # When
    urls = await record_store.list_track_file_urls("u1", "sleep")

    # Then
    assert urls == ["https://b/events/1/a.pdf"]


async def test_delete_track_cascades_to_events(record_store: SQLAlchemyRecordStore) -> None:
    # Given: A track with events
    track = await record_store.create_track("u1", "sleep", "Sleep")
    event = await record_store.create_event(track.id, title="a", type=EventType.FEELING, severity=3)

    # When
    deleted = await record_store.delete_track(track.id)

    # Then: The events went with it
    assert deleted is True
    assert await record_store.get_track("u1", "sleep") is None
    assert await record_store.delete_event(event.id) is False


async def test_duplicate_slug_for_same_user_is_persistence_error(
    record_store: SQLAlchemyRecordStore,
) -> None:
    # Given: An existing track
    await record_store.create_track("u1", "sleep", "Sleep")

    # When / Then: The unique constraint surfaces as PersistenceError
    with pytest.raises(PersistenceError):
        await record_store.create_track("u1", "sleep", "Again")

    # Then: Another user may reuse the slug
    other = await record_store.create_track("u2", "sleep", "Sleep")
    assert other.user_id == "u2"


async def test_ping_and_shutdown() -> None:
    # Given: An initialized store
    store = SQLAlchemyRecordStore("sqlite+aiosqlite:///:memory:")
    await store.initialize(create_schema=True)

    # When / Then
    assert await store.ping() is True
    await store.shutdown()
    assert await store.ping() is False
    with pytest.raises(RuntimeError):
        _ = store.engine
