import structlog
from fastapi import APIRouter, Depends

from core import sessions
from core.navigation import NavigationIntent, NavigationState, Navigator
from core.security import current_user
from schemas.user import CurrentUser


log = structlog.get_logger()
router = APIRouter(prefix="/api/navigation")


def _key(user: CurrentUser) -> str:
    return f"nav:{user.id}"


async def _navigator(user: CurrentUser) -> Navigator:
    stored = await sessions.get_value(_key(user))
    state = NavigationState.model_validate(stored) if stored else None
    return Navigator(user, state)


@router.get("", response_model=NavigationState)
async def current_page(user: CurrentUser = Depends(current_user)):
    return (await _navigator(user)).state


@router.post("", response_model=NavigationState)
async def navigate(intent: NavigationIntent, user: CurrentUser = Depends(current_user)):
    navigator = await _navigator(user)
    state = navigator.navigate(intent)
    await sessions.set_value(_key(user), state.model_dump(mode="json"))
    return state


@router.post("/back", response_model=NavigationState)
async def go_back(user: CurrentUser = Depends(current_user)):
    navigator = await _navigator(user)
    state = navigator.back()
    await sessions.set_value(_key(user), state.model_dump(mode="json"))
    return state
