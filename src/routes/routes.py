from fastapi import APIRouter

from routes.admin import router as admin_router
from routes.events import router as events_router
from routes.navigation import router as navigation_router
from routes.notes import router as notes_router
from routes.participants import router as participants_router
from routes.payments import router as payments_router
from routes.registrations import router as registrations_router


router = APIRouter()


@router.get("/alive")
async def alive():
    return "Alive"


router.include_router(events_router)
router.include_router(participants_router)
router.include_router(registrations_router)
router.include_router(payments_router)
router.include_router(notes_router)
router.include_router(admin_router)
router.include_router(navigation_router)
