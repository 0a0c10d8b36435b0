from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from typing import List, Optional

TEAM_LEADER_ROLE = "Team Leader"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class ParticipantStatus(str, Enum):
    REGISTERED = "registered"
    CONFIRMED = "confirmed"
    ATTENDED = "attended"
    CANCELLED = "cancelled"


class TeamMember(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    role: str = ""
    institution: str = ""


class RegistrationForm(BaseModel):
    phone: str = ""
    alternateEmail: str = ""
    teamName: str = ""
    teamSize: int = Field(1, ge=1)
    teamMembers: List[TeamMember] = Field(default_factory=list)
    institution: str = ""
    experience: Optional[ExperienceLevel] = None
    motivation: str = ""
    specialRequirements: str = ""


class RegistrationFieldsUpdate(BaseModel):
    phone: Optional[str] = None
    alternateEmail: Optional[str] = None
    teamName: Optional[str] = None
    institution: Optional[str] = None
    experience: Optional[ExperienceLevel] = None
    motivation: Optional[str] = None
    specialRequirements: Optional[str] = None


class TeamSizeRequest(BaseModel):
    teamSize: int


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    institution: Optional[str] = None


class ParticipantUser(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class ParticipantRecord(BaseModel):
    """Participant as returned by the API; owned by the server."""
    id: Optional[str] = Field(None, alias="_id")
    user: Optional[ParticipantUser] = None
    phone: Optional[str] = None
    institution: Optional[str] = None
    teamName: Optional[str] = None
    teamSize: Optional[int] = None
    teamMembers: List[TeamMember] = Field(default_factory=list)
    status: Optional[ParticipantStatus] = None
    registeredAt: Optional[datetime] = None

    model_config = {"populate_by_name": True}


class ParticipantStatusUpdate(BaseModel):
    status: ParticipantStatus
