"""
Tests for PendingMeetingStore - In-memory transactional table.

Coverage:
- put/get/delete happy paths
- Uniqueness on event_id and edit_hash, without partial index updates
- Delete of a record that is no longer present
- Transaction commit/abort semantics
- Concurrent writers from multiple threads
"""

import threading

import pytest

from database.models import EDIT_HASH_INDEX, ID_INDEX, PendingMeeting
from database.pending_store import (
    DuplicateKeyError,
    NotFoundError,
    PendingMeetingStore,
)


def make_meeting(event_id="evt1", page_slug="slugA", edit_hash="hashA"):
    return PendingMeeting(event_id=event_id, page_slug=page_slug, edit_hash=edit_hash)


class TestPutAndGet:
    """Test inserting and looking up records."""

    def test_get_returns_stored_record(self, store):
        meeting = make_meeting()
        store.put(meeting)

        assert store.get("evt1") == meeting
        assert len(store) == 1

    def test_get_missing_returns_none(self, store):
        assert store.get("never-recorded") is None

    def test_duplicate_event_id_rejected(self, store):
        """Second record with same event_id must not overwrite the first."""
        first = make_meeting()
        store.put(first)

        with pytest.raises(DuplicateKeyError) as exc_info:
            store.put(make_meeting(page_slug="otherSlug", edit_hash="otherHash"))

        assert exc_info.value.index == ID_INDEX
        assert exc_info.value.value == "evt1"
        assert store.get("evt1") == first
        assert len(store) == 1

    def test_duplicate_edit_hash_rejected(self, store):
        store.put(make_meeting())

        with pytest.raises(DuplicateKeyError) as exc_info:
            store.put(make_meeting(event_id="evt2", page_slug="slugB"))

        assert exc_info.value.index == EDIT_HASH_INDEX
        # The rejected record must not be reachable through its primary key
        assert store.get("evt2") is None
        assert len(store) == 1

    def test_edit_hash_reusable_after_delete(self, store):
        meeting = make_meeting()
        store.put(meeting)
        store.delete(meeting)

        store.put(make_meeting(event_id="evt2"))

        assert store.get("evt2").edit_hash == "hashA"


class TestDelete:
    """Test removing records."""

    def test_delete_removes_record(self, store):
        meeting = make_meeting()
        store.put(meeting)

        store.delete(meeting)

        assert store.get("evt1") is None
        assert len(store) == 0

    def test_delete_twice_raises_not_found(self, store):
        meeting = make_meeting()
        store.put(meeting)
        store.delete(meeting)

        with pytest.raises(NotFoundError) as exc_info:
            store.delete(meeting)

        assert exc_info.value.event_id == "evt1"

    def test_delete_stale_record_raises_not_found(self, store):
        """A record with the same event_id but different fields is not the stored one."""
        store.put(make_meeting())

        with pytest.raises(NotFoundError):
            store.delete(make_meeting(edit_hash="otherHash"))

        assert store.get("evt1") is not None


class TestTransactions:
    """Test commit and abort behavior."""

    def test_write_transaction_aborts_on_exception(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction(write=True) as txn:
                txn.insert(make_meeting())
                raise RuntimeError("boom")

        assert store.get("evt1") is None
        assert len(store) == 0

    def test_multiple_writes_commit_together(self, store):
        with store.transaction(write=True) as txn:
            txn.insert(make_meeting())
            txn.insert(make_meeting(event_id="evt2", edit_hash="hashB"))

        assert store.get("evt1") is not None
        assert store.get("evt2") is not None

    def test_failed_insert_aborts_whole_transaction(self, store):
        with pytest.raises(DuplicateKeyError):
            with store.transaction(write=True) as txn:
                txn.insert(make_meeting())
                txn.insert(make_meeting(event_id="evt2"))  # same edit_hash

        assert len(store) == 0

    def test_reader_does_not_see_uncommitted_write(self, store):
        with store.transaction(write=True) as txn:
            txn.insert(make_meeting())
            assert store.get("evt1") is None

        assert store.get("evt1") is not None

    def test_read_transaction_rejects_writes(self, store):
        with store.transaction() as txn:
            with pytest.raises(RuntimeError):
                txn.insert(make_meeting())

    def test_lookup_by_edit_hash(self, store):
        meeting = make_meeting()
        store.put(meeting)

        with store.transaction() as txn:
            assert txn.first(EDIT_HASH_INDEX, "hashA") == meeting

    def test_unknown_index_raises(self, store):
        with store.transaction() as txn:
            with pytest.raises(ValueError):
                txn.first("page_slug", "slugA")


class TestConcurrency:
    """Test concurrent access from multiple threads."""

    def test_concurrent_inserts_same_key_only_one_wins(self):
        store = PendingMeetingStore()
        errors: list[Exception] = []
        barrier = threading.Barrier(8)

        def worker(i: int) -> None:
            barrier.wait()
            try:
                store.put(make_meeting(page_slug=f"slug{i}", edit_hash=f"hash{i}"))
            except DuplicateKeyError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 1
        assert len(errors) == 7

    def test_concurrent_inserts_different_keys_all_succeed(self):
        store = PendingMeetingStore()

        threads = [
            threading.Thread(
                target=store.put,
                args=(make_meeting(event_id=f"evt{i}", edit_hash=f"hash{i}"),),
            )
            for i in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 20
