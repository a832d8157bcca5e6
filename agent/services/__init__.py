"""
Agent services module.

Provides business logic services for the agent layer.

Services:
- pending_meeting_service: Settles scheduler bookings against payment outcomes
"""

from agent.services.pending_meeting_service import (
    AcceptOutcome,
    AcceptResult,
    PendingMeetingService,
    RejectOutcome,
    RejectResult,
)

__all__ = [
    "AcceptOutcome",
    "AcceptResult",
    "PendingMeetingService",
    "RejectOutcome",
    "RejectResult",
]
