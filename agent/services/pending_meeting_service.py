"""
Pending meeting service - Settles scheduler bookings against payment outcomes.

Lifecycle of a pending meeting:
- Scheduler redirect: record_pending_meeting() stores the booking as pending
- Payment succeeded: accept_pending_meeting() confirms the booking remotely,
  then forgets the local record
- Payment cancelled: reject_pending_meeting() forgets the local record, then
  cancels the booking remotely (best effort)

Architecture:
- Store and BookingClient are injected, one service instance per application
- Transitions on the same event_id are serialized, so when accept and reject
  race only the first one finds the record; the other is a no-op
- Unknown event_ids are never an error: duplicate or late redirects are
  logged and ignored
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from database.models import PendingMeeting
from database.pending_store import DuplicateKeyError, NotFoundError, PendingMeetingStore
from shared.booking_client import BookingClient, BookingClientError

logger = logging.getLogger(__name__)


class AcceptOutcome(str, Enum):
    CONFIRMED = "confirmed"
    NOT_FOUND = "not_found"
    CONFIRM_FAILED = "confirm_failed"


class RejectOutcome(str, Enum):
    CANCELLED = "cancelled"
    NOT_FOUND = "not_found"
    CANCEL_FAILED = "cancel_failed"


@dataclass
class AcceptResult:
    """
    Result of settling a paid meeting.

    Attributes:
        outcome: What happened to the pending meeting
        event_id: Event the payment was for
        error: Confirmation failure when outcome is CONFIRM_FAILED. The record
            is kept in that case so the accept can be retried.
    """
    outcome: AcceptOutcome
    event_id: str
    error: Optional[BookingClientError] = None

    @property
    def success(self) -> bool:
        return self.outcome != AcceptOutcome.CONFIRM_FAILED


@dataclass
class RejectResult:
    """
    Result of settling a cancelled payment.

    The local record is gone for every outcome. CANCEL_FAILED means the remote
    booking may still exist.
    """
    outcome: RejectOutcome
    event_id: str
    error: Optional[BookingClientError] = None


class PendingMeetingService:
    """Coordinates the pending meeting store with the booking client."""

    def __init__(self, store: PendingMeetingStore, booking_client: BookingClient):
        self.store = store
        self.booking_client = booking_client
        self._event_locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @asynccontextmanager
    async def _event_lock(self, event_id: str) -> AsyncIterator[None]:
        lock = self._event_locks.setdefault(event_id, asyncio.Lock())
        self._lock_users[event_id] = self._lock_users.get(event_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[event_id] -= 1
            if self._lock_users[event_id] == 0:
                del self._lock_users[event_id]
                del self._event_locks[event_id]

    def record_pending_meeting(
        self, event_id: str, page_slug: str, edit_hash: str
    ) -> PendingMeeting:
        """
        Store a freshly booked meeting as pending payment.

        Raises:
            DuplicateKeyError: If the event_id or edit_hash is already pending.
                Duplicate scheduler redirects are not expected; callers treat
                this as an internal fault.
        """
        meeting = PendingMeeting(event_id=event_id, page_slug=page_slug, edit_hash=edit_hash)

        try:
            self.store.put(meeting)
        except DuplicateKeyError as e:
            logger.critical(
                f"Refusing duplicate pending meeting for event {event_id}: {e}",
                extra={"event_id": event_id},
            )
            raise

        logger.info(
            f"Inserted pending meeting with eventId: {event_id}",
            extra={"event_id": event_id},
        )
        return meeting

    async def accept_pending_meeting(self, event_id: str) -> AcceptResult:
        """
        Confirm the booking after a successful payment.

        The record is deleted only after the remote confirmation succeeds. A
        retried accept after a crash between the two steps re-confirms, which
        assumes confirmation is idempotent on the scheduler side.
        """
        async with self._event_lock(event_id):
            meeting = self.store.get(event_id)
            if meeting is None:
                logger.info(
                    f"Meeting {event_id} not found, unable to accept",
                    extra={"event_id": event_id},
                )
                return AcceptResult(outcome=AcceptOutcome.NOT_FOUND, event_id=event_id)

            try:
                await self.booking_client.confirm(meeting)
            except BookingClientError as e:
                logger.error(
                    f"Failed to confirm meeting {event_id}, keeping it pending: {e}",
                    extra={"event_id": event_id},
                )
                return AcceptResult(
                    outcome=AcceptOutcome.CONFIRM_FAILED, event_id=event_id, error=e
                )

            try:
                self.store.delete(meeting)
            except NotFoundError:
                logger.warning(
                    f"Meeting {event_id} was already removed after confirmation",
                    extra={"event_id": event_id},
                )

            logger.info(f"Meeting {event_id} confirmed", extra={"event_id": event_id})
            return AcceptResult(outcome=AcceptOutcome.CONFIRMED, event_id=event_id)

    async def reject_pending_meeting(self, event_id: str) -> RejectResult:
        """
        Forget the booking after a cancelled payment and cancel it remotely.

        Local state is cleared first. A remote failure is only logged, so the
        booking provider may keep a booking this service no longer tracks.
        """
        async with self._event_lock(event_id):
            meeting = self.store.get(event_id)
            if meeting is None:
                logger.info(
                    f"Meeting {event_id} not found, unable to delete",
                    extra={"event_id": event_id},
                )
                return RejectResult(outcome=RejectOutcome.NOT_FOUND, event_id=event_id)

            try:
                self.store.delete(meeting)
            except NotFoundError:
                logger.info(
                    f"Meeting {event_id} already settled, skipping cancellation",
                    extra={"event_id": event_id},
                )
                return RejectResult(outcome=RejectOutcome.NOT_FOUND, event_id=event_id)

            try:
                await self.booking_client.cancel(meeting)
            except BookingClientError as e:
                logger.error(
                    f"Failed to cancel booking for meeting {event_id}: {e}",
                    extra={"event_id": event_id},
                )
                return RejectResult(
                    outcome=RejectOutcome.CANCEL_FAILED, event_id=event_id, error=e
                )

            logger.info(f"Meeting {event_id} cancelled", extra={"event_id": event_id})
            return RejectResult(outcome=RejectOutcome.CANCELLED, event_id=event_id)
