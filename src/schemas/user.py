from enum import Enum

from pydantic import BaseModel, EmailStr, Field


class Role(str, Enum):
    STUDENT = "student"
    HOST = "host"
    ADMIN = "admin"


class CurrentUser(BaseModel):
    """Authenticated user, decoded from the bearer token of the request."""
    id: str
    name: str
    email: EmailStr
    role: Role = Role.STUDENT
    institution: str = ""
    token: str = Field("", exclude=True)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class UserStatusUpdate(BaseModel):
    isActive: bool


class AdminRegisterRequest(BaseModel):
    userId: str = Field(..., min_length=1)
