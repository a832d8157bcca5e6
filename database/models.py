"""
Data model for the pending-meetings table.

A pending meeting is a booking made on a scheduler page that has not been
paid for yet. Its presence in the store is its only state: the record is
deleted once the booking is either confirmed or cancelled.
"""

from dataclasses import dataclass

# Index names used by the store. Both are unique.
ID_INDEX = "id"
EDIT_HASH_INDEX = "edit_hash"


@dataclass(frozen=True)
class PendingMeeting:
    """
    A booked-but-unpaid meeting awaiting settlement.

    Attributes:
        event_id: Primary key; correlates the record with the Nylas event
            and with the Stripe success/cancel redirects
        page_slug: Slug of the scheduler page the booking was made on
        edit_hash: Capability token used to build the confirmation URL
    """

    event_id: str
    page_slug: str
    edit_hash: str

    def index_value(self, index: str) -> str:
        """Return the value this record contributes to the given unique index."""
        if index == ID_INDEX:
            return self.event_id
        if index == EDIT_HASH_INDEX:
            return self.edit_hash
        raise ValueError(f"Unknown index: {index}")
