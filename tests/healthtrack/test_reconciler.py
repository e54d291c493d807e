"""Tests for upload confirmation."""

from __future__ import annotations

from dataclasses import replace

import pytest

from healthtrack.attachments import ConfirmationReconciler
from healthtrack.errors import (
    FILE_NOT_UPLOADED_MESSAGE,
    NotFoundError,
    NotFoundResource,
    PersistenceError,
    ValidationError,
)
from tests.healthtrack.mocks import BUCKET_BASE_URL, MockObjectStore, MockRecordStore, SeededEvent


def _key_for(seeded: SeededEvent, name: str = "report.pdf") -> tuple[str, str]:
    key = f"events/{seeded.event.id}/{name}"
    return f"{BUCKET_BASE_URL}/{key}", key


async def test_confirm_records_reference_when_object_exists(
    object_store: MockObjectStore, records: MockRecordStore, seeded: SeededEvent
) -> None:
    # Given: The object was uploaded
    file_url, key = _key_for(seeded)
    object_store.put(key)
    reconciler = ConfirmationReconciler(object_store, records)

    # When: Confirming
    updated = await reconciler.confirm(seeded.scope, file_url, key)

    # Then: The event now references the object
    assert updated.file_url == file_url
    assert records.events[seeded.event.id].file_url == file_url
    assert object_store.head_calls == [key]


async def test_confirm_trims_key_before_lookup(
    object_store: MockObjectStore, records: MockRecordStore, seeded: SeededEvent
) -> None:
    # Given: The object was uploaded and the client pads the key
    file_url, key = _key_for(seeded)
    object_store.put(key)
    reconciler = ConfirmationReconciler(object_store, records)

    # When
    updated = await reconciler.confirm(seeded.scope, file_url, f"  {key} ")

    # Then: Storage is asked for the trimmed key
    assert object_store.head_calls == [key]
    assert updated.file_url == file_url


async def test_confirm_without_upload_leaves_event_unchanged(
    object_store: MockObjectStore, records: MockRecordStore, seeded: SeededEvent
) -> None:
    # Given: Nothing was uploaded
    file_url, key = _key_for(seeded)
    reconciler = ConfirmationReconciler(object_store, records)

    # When: Confirming
    with pytest.raises(NotFoundError) as exc_info:
        await reconciler.confirm(seeded.scope, file_url, key)

    # Then: The client is told to upload first and nothing is written
    assert exc_info.value.message == FILE_NOT_UPLOADED_MESSAGE
    assert exc_info.value.resource == NotFoundResource.OBJECT
    assert records.set_file_url_calls == []
    assert records.events[seeded.event.id].file_url is None


async def test_confirm_treats_head_failure_as_not_uploaded(
    records: MockRecordStore, seeded: SeededEvent
) -> None:
    # Given: A store whose existence check errors out
    store = MockObjectStore(fail_head=True)
    file_url, key = _key_for(seeded)
    store.put(key)
    reconciler = ConfirmationReconciler(store, records)

    # When: Confirming
    with pytest.raises(NotFoundError) as exc_info:
        await reconciler.confirm(seeded.scope, file_url, key)

    # Then: It is reported the same way as a missing object
    assert exc_info.value.message == FILE_NOT_UPLOADED_MESSAGE
    assert isinstance(exc_info.value.cause, ConnectionError)
    assert records.set_file_url_calls == []


@pytest.mark.parametrize(
    ("file_url", "key", "field"),
    [
        (None, "events/e/a.pdf", "fileUrl"),
        ("", "events/e/a.pdf", "fileUrl"),
        (42, "events/e/a.pdf", "fileUrl"),
        ("https://x/a.pdf", None, "key"),
        ("https://x/a.pdf", "  ", "key"),
        (None, None, "fileUrl"),
    ],
)
async def test_confirm_validates_body_before_lookups(
    object_store: MockObjectStore,
    records: MockRecordStore,
    seeded: SeededEvent,
    file_url: object,
    key: object,
    field: str,
) -> None:
    # Given: A malformed confirmation body
    reconciler = ConfirmationReconciler(object_store, records)

    # When: Confirming
    with pytest.raises(ValidationError) as exc_info:
        await reconciler.confirm(seeded.scope, file_url, key)

    # Then: The offending field is named and storage is never consulted
    assert exc_info.value.field == field
    assert exc_info.value.message == f"{field} is required and must be a non-empty string"
    assert object_store.head_calls == []


async def test_confirm_unknown_track(
    object_store: MockObjectStore, records: MockRecordStore, seeded: SeededEvent
) -> None:
    # Given: A scope naming a track the user does not own
    scope = replace(seeded.scope, track_slug="nope")
    file_url, key = _key_for(seeded)
    object_store.put(key)
    reconciler = ConfirmationReconciler(object_store, records)

    # When / Then: Track not found, before touching storage
    with pytest.raises(NotFoundError, match="Track not found"):
        await reconciler.confirm(scope, file_url, key)
    assert object_store.head_calls == []


async def test_confirm_event_on_other_track(
    object_store: MockObjectStore, records: MockRecordStore, seeded: SeededEvent
) -> None:
    # Given: A second track owned by the same user, and the event id from the first
    other = await records.create_track(seeded.track.user_id, "diet", "Diet")
    scope = replace(seeded.scope, track_slug=other.slug)
    file_url, key = _key_for(seeded)
    object_store.put(key)
    reconciler = ConfirmationReconciler(object_store, records)

    # When / Then: The event is not found under that track
    with pytest.raises(NotFoundError, match="Event not found"):
        await reconciler.confirm(scope, file_url, key)


async def test_confirm_overwrites_previous_reference_without_deleting(
    object_store: MockObjectStore, records: MockRecordStore, seeded: SeededEvent
) -> None:
    # Given: An event already pointing at a first upload
    first_url, first_key = _key_for(seeded, "first.pdf")
    second_url, second_key = _key_for(seeded, "second.pdf")
    object_store.put(first_key)
    object_store.put(second_key)
    reconciler = ConfirmationReconciler(object_store, records)
    await reconciler.confirm(seeded.scope, first_url, first_key)

    # When: Confirming a second upload
    updated = await reconciler.confirm(seeded.scope, second_url, second_key)

    # Then: The newer reference wins and the old object is left in place
    assert updated.file_url == second_url
    assert first_key in object_store.objects
    assert object_store.delete_calls == []


async def test_confirm_propagates_persistence_failure(
    object_store: MockObjectStore, seeded: SeededEvent, records: MockRecordStore
) -> None:
    # Given: A record store that fails writes
    records.fail_writes = True
    file_url, key = _key_for(seeded)
    object_store.put(key)
    reconciler = ConfirmationReconciler(object_store, records)

    # When / Then: The database error surfaces
    with pytest.raises(PersistenceError):
        await reconciler.confirm(seeded.scope, file_url, key)
