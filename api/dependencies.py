"""FastAPI dependencies shared by the route modules."""

from typing import Annotated

from fastapi import Depends, Request

from agent.services.pending_meeting_service import PendingMeetingService


def get_pending_meeting_service(request: Request) -> PendingMeetingService:
    """Return the service instance attached to the application at creation."""
    return request.app.state.pending_meeting_service


PendingMeetingServiceDep = Annotated[
    PendingMeetingService, Depends(get_pending_meeting_service)
]
