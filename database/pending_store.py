"""
In-memory transactional store for pending meetings.

The store keeps one table with two unique indexes (event_id and edit_hash).
Every operation runs inside a transaction:

- Read transactions work on the committed snapshot and never observe a
  partially applied write.
- Write transactions are serialized by a lock and work on a private copy of
  the indexes. The copy replaces the committed snapshot only when the block
  exits normally; an exception discards it (abort).

Nothing is persisted. A process restart loses every pending record.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from database.models import EDIT_HASH_INDEX, ID_INDEX, PendingMeeting

logger = logging.getLogger(__name__)

INDEXES = (ID_INDEX, EDIT_HASH_INDEX)


class PendingMeetingStoreError(Exception):
    """Base class for store errors."""

    pass


class DuplicateKeyError(PendingMeetingStoreError):
    """Raised when an insert collides on a unique index."""

    def __init__(self, index: str, value: str):
        self.index = index
        self.value = value
        super().__init__(f"Duplicate value {value!r} for unique index {index!r}")


class NotFoundError(PendingMeetingStoreError):
    """Raised when deleting a record that is no longer present."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Pending meeting not found: {event_id}")


class StoreTransaction:
    """
    View of the table inside a single transaction.

    Obtained from PendingMeetingStore.transaction(); do not construct directly.
    """

    def __init__(self, indexes: dict[str, dict[str, PendingMeeting]], write: bool):
        self._indexes = indexes
        self.write = write

    def first(self, index: str, value: str) -> PendingMeeting | None:
        """Return the record stored under value in the given index, if any."""
        if index not in self._indexes:
            raise ValueError(f"Unknown index: {index}")
        return self._indexes[index].get(value)

    def insert(self, record: PendingMeeting) -> None:
        """
        Stage an insert.

        All unique indexes are checked before any of them is touched, so a
        collision leaves the transaction unchanged.

        Raises:
            DuplicateKeyError: If event_id or edit_hash is already present
        """
        self._require_write()

        for index in INDEXES:
            value = record.index_value(index)
            if value in self._indexes[index]:
                raise DuplicateKeyError(index, value)

        for index in INDEXES:
            self._indexes[index][record.index_value(index)] = record

    def delete(self, record: PendingMeeting) -> None:
        """
        Stage a delete.

        Raises:
            NotFoundError: If the record is not present in the table
        """
        self._require_write()

        if self._indexes[ID_INDEX].get(record.event_id) != record:
            raise NotFoundError(record.event_id)

        for index in INDEXES:
            del self._indexes[index][record.index_value(index)]

    def _require_write(self) -> None:
        if not self.write:
            raise RuntimeError("Cannot modify the table in a read-only transaction")


class PendingMeetingStore:
    """
    Keyed table of pending meetings, unique on event_id and edit_hash.

    Safe to share between concurrent request handlers.
    """

    def __init__(self) -> None:
        self._indexes: dict[str, dict[str, PendingMeeting]] = {
            index: {} for index in INDEXES
        }
        self._write_lock = threading.Lock()

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator[StoreTransaction]:
        """
        Open a transaction on the table.

        Args:
            write: If True, changes made in the block are committed when the
                block exits normally and discarded if it raises

        Yields:
            StoreTransaction bound to a snapshot (read) or a private copy (write)
        """
        if not write:
            # Snapshot dicts are never mutated after commit
            yield StoreTransaction(self._indexes, write=False)
            return

        with self._write_lock:
            staged = {index: dict(entries) for index, entries in self._indexes.items()}
            txn = StoreTransaction(staged, write=True)
            yield txn
            self._indexes = staged

    def put(self, record: PendingMeeting) -> None:
        """
        Insert a new pending meeting.

        Raises:
            DuplicateKeyError: If event_id or edit_hash already exists
        """
        with self.transaction(write=True) as txn:
            txn.insert(record)

        logger.debug(f"Stored pending meeting {record.event_id}")

    def get(self, event_id: str) -> PendingMeeting | None:
        """Look up a pending meeting by event_id. Returns None when absent."""
        with self.transaction() as txn:
            return txn.first(ID_INDEX, event_id)

    def delete(self, record: PendingMeeting) -> None:
        """
        Remove a pending meeting.

        Raises:
            NotFoundError: If the record was already removed
        """
        with self.transaction(write=True) as txn:
            txn.delete(record)

        logger.debug(f"Removed pending meeting {record.event_id}")

    def __len__(self) -> int:
        return len(self._indexes[ID_INDEX])
