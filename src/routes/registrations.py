import asyncio

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from api.gateway import gateway
from core import sessions
from core.security import current_user
from schemas.event import EventInfo
from schemas.payment import OrderDescriptor
from schemas.registration import (
    RegistrationFieldsUpdate,
    RegistrationForm,
    TeamMemberUpdate,
    TeamSizeRequest,
)
from schemas.user import CurrentUser
from routes.events import validation_failed
from utils.payment import attach_qr_code, checkout_options
from utils.team import LeaderNotEditable, RegistrationComposer


log = structlog.get_logger()
router = APIRouter()

REGISTRATION = "registration"


def _composer(state: dict, user: CurrentUser) -> RegistrationComposer:
    event = EventInfo.model_validate(state["event"])
    form = RegistrationForm.model_validate(state["form"])
    return RegistrationComposer(event.teamSize, user, form)


def _view(sid: str, state: dict) -> dict:
    event = state["event"]
    return {
        "id": sid,
        "event": event,
        "isTeamEvent": event["teamSize"]["max"] > 1,
        "form": state["form"],
        "pendingOrderId": state.get("pendingOrderId"),
    }


async def _store(sid: str, user: CurrentUser, state: dict, composer: RegistrationComposer):
    state["form"] = composer.form.model_dump(mode="json")
    await sessions.save_session(REGISTRATION, sid, user.id, state)


@router.post("/api/events/{event_id}/registrations", status_code=status.HTTP_201_CREATED)
async def open_registration(event_id: str, user: CurrentUser = Depends(current_user)):
    raw_event = await asyncio.to_thread(gateway.get_event, event_id, user.token)
    event = EventInfo.from_api(raw_event)
    composer = RegistrationComposer(event.teamSize, user)

    state = {
        "event": event.model_dump(mode="json"),
        "form": composer.form.model_dump(mode="json"),
    }
    sid = await sessions.open_session(REGISTRATION, user.id, state)
    return _view(sid, state)


@router.get("/api/registrations/{sid}")
async def get_registration(sid: str, user: CurrentUser = Depends(current_user)):
    state = await sessions.load_session(REGISTRATION, sid, user.id)
    return _view(sid, state)


@router.patch("/api/registrations/{sid}")
async def update_registration(
    sid: str,
    changes: RegistrationFieldsUpdate,
    user: CurrentUser = Depends(current_user),
):
    state = await sessions.load_session(REGISTRATION, sid, user.id)
    composer = _composer(state, user)
    try:
        composer.update_fields(**changes.model_dump(exclude_unset=True))
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))
    await _store(sid, user, state, composer)
    return _view(sid, state)


@router.put("/api/registrations/{sid}/team-size")
async def change_team_size(
    sid: str,
    body: TeamSizeRequest,
    user: CurrentUser = Depends(current_user),
):
    state = await sessions.load_session(REGISTRATION, sid, user.id)
    composer = _composer(state, user)
    size = composer.set_team_size(body.teamSize)
    await _store(sid, user, state, composer)
    log.info("registration.team_size", sid=sid, requested=body.teamSize, size=size)
    return _view(sid, state)


@router.patch("/api/registrations/{sid}/members/{index}")
async def update_member(
    sid: str,
    index: int,
    changes: TeamMemberUpdate,
    user: CurrentUser = Depends(current_user),
):
    state = await sessions.load_session(REGISTRATION, sid, user.id)
    composer = _composer(state, user)
    try:
        composer.update_member(index, **changes.model_dump(exclude_unset=True))
    except LeaderNotEditable as e:
        raise HTTPException(400, str(e))
    except IndexError as e:
        raise HTTPException(404, str(e))
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))
    await _store(sid, user, state, composer)
    return _view(sid, state)


@router.post("/api/registrations/{sid}/submit")
async def submit_registration(sid: str, user: CurrentUser = Depends(current_user)):
    state = await sessions.load_session(REGISTRATION, sid, user.id)
    composer = _composer(state, user)
    event = EventInfo.model_validate(state["event"])

    errors = composer.validate()
    if errors:
        log.info("registration.rejected", sid=sid, errors=errors)
        return validation_failed(errors)

    payload = composer.to_payload()

    if event.requires_payment:
        data = await asyncio.to_thread(
            gateway.create_payment_order, event.id, payload, user.token
        )
        order = attach_qr_code(OrderDescriptor.model_validate(data), event)
        state["pendingOrderId"] = order.orderId
        await _store(sid, user, state, composer)
        log.info("registration.payment_required", sid=sid, order_id=order.orderId,
                 amount=order.amount)
        return {
            "status": "PAYMENT_REQUIRED",
            "order": order.model_dump(),
            "checkout": checkout_options(event, order, payload),
        }

    result = await asyncio.to_thread(gateway.register_for_event, event.id, payload, user.token)
    await sessions.close_session(REGISTRATION, sid)
    log.info("registration.submitted", sid=sid, event_id=event.id,
             team_size=composer.form.teamSize)
    return {
        "status": "REGISTERED",
        "message": "Successfully registered for the event!",
        "registration": result,
    }


@router.delete("/api/registrations/{sid}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_registration(sid: str, user: CurrentUser = Depends(current_user)):
    await sessions.load_session(REGISTRATION, sid, user.id)
    await sessions.close_session(REGISTRATION, sid)


@router.delete("/api/events/{event_id}/registration", status_code=status.HTTP_204_NO_CONTENT)
async def unregister(event_id: str, user: CurrentUser = Depends(current_user)):
    await asyncio.to_thread(gateway.unregister_from_event, event_id, user.token)
    log.info("registration.cancelled", event_id=event_id, user=user.id)
