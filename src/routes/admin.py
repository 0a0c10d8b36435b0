import asyncio
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Path, Query

from api.gateway import gateway
from core.security import admin_required
from schemas.user import AdminRegisterRequest, CurrentUser, Role, UserStatusUpdate


log = structlog.get_logger()
router = APIRouter(prefix="/api/admin")


@router.get("/stats")
async def dashboard_stats(admin: CurrentUser = Depends(admin_required)):
    return await asyncio.to_thread(gateway.get_dashboard_stats, admin.token)


@router.get("/users")
async def list_users(
    role: Optional[Role] = Query(None),
    search: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    admin: CurrentUser = Depends(admin_required),
):
    filters: dict = {"limit": limit}
    if search:
        filters["search"] = search
    users = await asyncio.to_thread(gateway.list_users, filters, admin.token)
    if role is not None:
        users = [u for u in users if u.get("role") == role.value]
    return {"users": users, "total": len(users)}


@router.patch("/users/{user_id}/status")
async def update_user_status(
    body: UserStatusUpdate,
    user_id: str = Path(..., title="User id"),
    admin: CurrentUser = Depends(admin_required),
):
    await asyncio.to_thread(gateway.update_user_status, user_id, body.isActive, admin.token)
    log.info("admin.user_status_updated", user_id=user_id, is_active=body.isActive,
             admin=admin.id)
    state = "activated" if body.isActive else "deactivated"
    return {"message": f"User {state} successfully"}


@router.post("/events/{event_id}/register")
async def register_user(
    body: AdminRegisterRequest,
    event_id: str = Path(..., title="Event id"),
    admin: CurrentUser = Depends(admin_required),
):
    await asyncio.to_thread(gateway.admin_register, event_id, body.userId, admin.token)
    log.info("admin.user_registered", event_id=event_id, user_id=body.userId, admin=admin.id)
    return {"message": "User registered for event successfully"}
