import jwt
import structlog
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from core.config import settings
from schemas.user import CurrentUser, Role


log = structlog.get_logger()
bearer = HTTPBearer(auto_error=False)


def decode_session(token: str) -> CurrentUser:
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    return CurrentUser(
        id=str(payload.get("id") or payload["sub"]),
        name=payload.get("name") or "",
        email=payload.get("email") or "",
        role=payload.get("role") or Role.STUDENT,
        institution=payload.get("institution") or "",
        token=token,
    )


async def current_user(
    credentials: HTTPAuthorizationCredentials = Security(bearer)
) -> CurrentUser:
    if not credentials or not credentials.credentials:
        raise HTTPException(401, "Missing credentials")
    try:
        return decode_session(credentials.credentials)
    except (jwt.PyJWTError, KeyError, ValueError) as e:
        log.info("auth.invalid_token", error=str(e))
        raise HTTPException(401, "Invalid token")


async def admin_required(user: CurrentUser = Depends(current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(403, "Admin access required")
    return user
