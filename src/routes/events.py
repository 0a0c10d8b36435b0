import asyncio
from typing import Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.gateway import gateway
from core.config import settings
from core.security import current_user
from core import sessions
from schemas.event import DRAFT_GROUPS, EventDraft, WizardStep
from schemas.user import CurrentUser
from utils.validation import validate_draft, validate_step


log = structlog.get_logger()
router = APIRouter(prefix="/api/events")

DRAFT = "draft"


def _draft_view(sid: str, state: dict) -> dict:
    return {
        "id": sid,
        "step": state["step"],
        "editing": state["editing"],
        "eventId": state.get("eventId"),
        "draft": state["draft"],
    }


def _new_state(draft: EventDraft, event_id: str = None) -> dict:
    return {
        "draft": draft.model_dump(mode="json"),
        "step": WizardStep.BASIC_INFO.value,
        "editing": event_id is not None,
        "eventId": event_id,
    }


def validation_failed(errors: list) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": errors})


@router.get("")
async def list_events(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    user: CurrentUser = Depends(current_user),
):
    filters = {k: v for k, v in {"search": search, "category": category, "city": city}.items() if v}
    events = await asyncio.to_thread(gateway.list_events, filters, user.token)
    return {"events": events}


@router.get("/mine")
async def my_events(user: CurrentUser = Depends(current_user)):
    hosted, registered = await asyncio.gather(
        asyncio.to_thread(gateway.get_hosted_events, user.token),
        asyncio.to_thread(gateway.get_registered_events, user.token),
    )
    return {"hosted": hosted, "registered": registered}


@router.post("/drafts", status_code=status.HTTP_201_CREATED)
async def create_draft(user: CurrentUser = Depends(current_user)):
    draft = EventDraft(timezone=settings.DEFAULT_TIMEZONE, contactEmail=user.email)
    state = _new_state(draft)
    sid = await sessions.open_session(DRAFT, user.id, state)
    return _draft_view(sid, state)


@router.post("/{event_id}/drafts", status_code=status.HTTP_201_CREATED)
async def edit_draft(
    event_id: str = Path(..., description="Event being edited"),
    user: CurrentUser = Depends(current_user),
):
    event = await asyncio.to_thread(gateway.get_event, event_id, user.token)
    draft = EventDraft.from_event(event)
    if not draft.contactEmail:
        draft.contactEmail = user.email
    state = _new_state(draft, event_id)
    sid = await sessions.open_session(DRAFT, user.id, state)
    return _draft_view(sid, state)


@router.get("/drafts/{sid}")
async def get_draft(sid: str, user: CurrentUser = Depends(current_user)):
    state = await sessions.load_session(DRAFT, sid, user.id)
    return _draft_view(sid, state)


@router.patch("/drafts/{sid}/{group}")
async def update_draft(
    sid: str,
    group: str,
    changes: dict = Body(...),
    user: CurrentUser = Depends(current_user),
):
    update_model = DRAFT_GROUPS.get(group)
    if update_model is None:
        raise HTTPException(404, f"Unknown field group: {group}")

    state = await sessions.load_session(DRAFT, sid, user.id)
    try:
        update = update_model.model_validate(changes)
        draft = update.apply(EventDraft.model_validate(state["draft"]))
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))

    state["draft"] = draft.model_dump(mode="json")
    await sessions.save_session(DRAFT, sid, user.id, state)
    return _draft_view(sid, state)


@router.post("/drafts/{sid}/next")
async def next_step(sid: str, user: CurrentUser = Depends(current_user)):
    state = await sessions.load_session(DRAFT, sid, user.id)
    draft = EventDraft.model_validate(state["draft"])
    step = WizardStep(state["step"])

    errors = validate_step(draft, step)
    if errors:
        log.info("draft.step_rejected", sid=sid, step=step.value, errors=errors)
        return validation_failed(errors)

    if step < WizardStep.EXTRAS:
        state["step"] = step.value + 1
        await sessions.save_session(DRAFT, sid, user.id, state)
    return _draft_view(sid, state)


@router.post("/drafts/{sid}/back")
async def previous_step(sid: str, user: CurrentUser = Depends(current_user)):
    state = await sessions.load_session(DRAFT, sid, user.id)
    if state["step"] > WizardStep.BASIC_INFO:
        state["step"] -= 1
        await sessions.save_session(DRAFT, sid, user.id, state)
    return _draft_view(sid, state)


@router.post("/drafts/{sid}/submit")
async def submit_draft(sid: str, user: CurrentUser = Depends(current_user)):
    state = await sessions.load_session(DRAFT, sid, user.id)
    draft = EventDraft.model_validate(state["draft"])

    errors = validate_draft(draft, editing=state["editing"])
    if errors:
        log.info("draft.submit_rejected", sid=sid, errors=errors)
        return validation_failed(errors)

    payload = draft.to_payload(country=settings.DEFAULT_COUNTRY, currency=settings.CURRENCY)
    if state["editing"]:
        event = await asyncio.to_thread(
            gateway.update_event, state["eventId"], payload, user.token
        )
        message = "Event updated successfully!"
    else:
        event = await asyncio.to_thread(gateway.create_event, payload, user.token)
        message = "Event created successfully!"

    await sessions.close_session(DRAFT, sid)
    log.info("draft.submitted", sid=sid, editing=state["editing"], event_id=state.get("eventId"))
    return {"message": message, "event": event}


@router.delete("/drafts/{sid}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_draft(sid: str, user: CurrentUser = Depends(current_user)):
    await sessions.load_session(DRAFT, sid, user.id)
    await sessions.close_session(DRAFT, sid)


@router.get("/{event_id}")
async def get_event(event_id: str, user: CurrentUser = Depends(current_user)):
    return {"event": await asyncio.to_thread(gateway.get_event, event_id, user.token)}


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, user: CurrentUser = Depends(current_user)):
    await asyncio.to_thread(gateway.delete_event, event_id, user.token)
    log.info("event.deleted", event_id=event_id, user=user.id)
