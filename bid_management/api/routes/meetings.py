"""Meeting endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...models import Meeting, MeetingCreate, MeetingUpdate, User
from ..container import Services
from ..deps import current_user, get_services

router = APIRouter(prefix="/api/meetings", tags=["meetings"])


@router.get("", response_model=List[Meeting])
def list_meetings(
    tender_id: Optional[str] = Query(None, alias="tenderId"),
    upcoming: bool = False,
    user: User = Depends(current_user),
    services: Services = Depends(get_services),
):
    return services.meetings.list_meetings(tender_id=tender_id, upcoming=upcoming)


@router.post("", response_model=Meeting, status_code=201)
def schedule_meeting(body: MeetingCreate, user: User = Depends(current_user),
                     services: Services = Depends(get_services)):
    return services.meetings.schedule(body, user)


@router.get("/{meeting_id}", response_model=Meeting)
def get_meeting(meeting_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.meetings.get_meeting(meeting_id)


@router.put("/{meeting_id}", response_model=Meeting)
def update_meeting(meeting_id: str, body: MeetingUpdate, user: User = Depends(current_user),
                   services: Services = Depends(get_services)):
    return services.meetings.update_meeting(meeting_id, body)
