import asyncio
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query
from fastapi.responses import StreamingResponse

from api.gateway import GatewayError, gateway
from core.config import settings
from core.security import current_user
from schemas.event import EventInfo
from schemas.registration import ParticipantRecord, ParticipantStatusUpdate
from schemas.user import CurrentUser
from utils.analytics import calculate_analytics
from utils.export import EXPORT_PURPOSES, count_rows, export_filename, iter_csv, participant_rows


log = structlog.get_logger()
router = APIRouter(prefix="/api/events")


async def _participants(event_id: str, user: CurrentUser):
    raw = await asyncio.to_thread(gateway.get_participants, event_id, user.token)
    return [ParticipantRecord.model_validate(p) for p in raw]


@router.get("/{event_id}/participants")
async def list_participants(
    event_id: str = Path(..., title="Event id"),
    user: CurrentUser = Depends(current_user),
):
    participants = await _participants(event_id, user)
    return {
        "participants": [p.model_dump(mode="json", by_alias=False) for p in participants],
        "total": len(participants),
    }


@router.patch("/{event_id}/participants/{participant_id}/status")
async def update_participant_status(
    body: ParticipantStatusUpdate,
    event_id: str = Path(..., title="Event id"),
    participant_id: str = Path(..., title="Participant id"),
    user: CurrentUser = Depends(current_user),
):
    await asyncio.to_thread(
        gateway.update_participant_status, event_id, participant_id,
        body.status.value, user.token
    )
    log.info("participant.status_updated", event_id=event_id,
             participant_id=participant_id, status=body.status.value)
    return {"message": f"Participant status updated to {body.status.value}"}


@router.get("/{event_id}/participants/export", response_class=StreamingResponse)
async def export_participants(
    event_id: str = Path(..., title="Event id"),
    purpose: str = Query("participants-with-teams"),
    user: CurrentUser = Depends(current_user),
):
    if purpose not in EXPORT_PURPOSES:
        raise HTTPException(400, f"purpose must be one of: {', '.join(EXPORT_PURPOSES)}")

    event, participants = await asyncio.gather(
        asyncio.to_thread(gateway.get_event, event_id, user.token),
        _participants(event_id, user),
    )
    filename = export_filename(event.get("title") or event_id, purpose)
    rows = participant_rows(participants, settings.EXPORT_DATE_FORMAT)

    ascii_name = filename.encode("ascii", "replace").decode().replace('"', "'")
    headers = {
        "Content-Disposition": (
            f'attachment; filename="{ascii_name}"; filename*=UTF-8\'\'{quote(filename)}'
        ),
        "Content-Type": "text/csv; charset=utf-8",
    }
    log.info("participants.exported", event_id=event_id, purpose=purpose,
             rows=count_rows(participants))
    return StreamingResponse(iter_csv(rows), headers=headers)


@router.get("/{event_id}/analytics")
async def event_analytics(
    event_id: str = Path(..., title="Event id"),
    user: CurrentUser = Depends(current_user),
):
    try:
        analytics = await asyncio.to_thread(gateway.get_event_analytics, event_id, user.token)
    except GatewayError as e:
        log.info("analytics.computed_locally", event_id=event_id, reason=e.message)
        analytics = None
    if analytics:
        return {"analytics": analytics, "source": "api"}

    event, participants = await asyncio.gather(
        asyncio.to_thread(gateway.get_event, event_id, user.token),
        _participants(event_id, user),
    )
    info = EventInfo.from_api(event)
    return {
        "analytics": calculate_analytics(participants, info.feeAmount),
        "source": "computed",
    }
