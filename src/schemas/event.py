from datetime import date, datetime, time, timezone
from enum import Enum
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator


DEFAULT_TIMEZONE = "Asia/Kolkata"


class Category(str, Enum):
    HACKATHON = "hackathon"
    WORKSHOP = "workshop"
    QUIZ = "quiz"
    SEMINAR = "seminar"
    TECH_FEST = "tech-fest"
    COMPETITION = "competition"
    CONFERENCE = "conference"


class EventMode(str, Enum):
    ONLINE = "Online"
    OFFLINE = "Offline"
    HYBRID = "Hybrid"

    @property
    def requires_location(self) -> bool:
        return self in (EventMode.OFFLINE, EventMode.HYBRID)


class WizardStep(int, Enum):
    BASIC_INFO = 1
    SCHEDULE = 2
    REGISTRATION = 3
    PRIZES = 4
    EXTRAS = 5


class Prize(BaseModel):
    position: str = "Winner"
    amount: float = Field(0, ge=0)
    description: str = ""


class Faq(BaseModel):
    question: str = ""
    answer: str = ""


class SocialLinks(BaseModel):
    discord: str = ""
    telegram: str = ""
    whatsapp: str = ""


class TeamSizeRange(BaseModel):
    min: int = Field(1, ge=1)
    max: int = Field(1, ge=1)

    @model_validator(mode="after")
    def _max_not_below_min(self):
        # events persisted with an inverted range fall back to the minimum
        if self.max < self.min:
            self.max = self.min
        return self


def parse_instant(value) -> Optional[datetime]:
    """Parses an ISO-8601 instant coming from the API ("Z" suffix allowed)."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_utc_iso(instant: datetime) -> str:
    return instant.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def fee_parts(fee) -> tuple:
    """Normalizes a fee stored either as {amount, isFree} or as a flat number."""
    if isinstance(fee, dict):
        amount = fee.get("amount") or 0
        is_free = fee.get("isFree")
        if is_free is None:
            is_free = not amount
        return amount, bool(is_free)
    amount = fee or 0
    return amount, not amount


def _enum_or(enum_cls, value, default):
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return default


def _split_instant(value, tz: ZoneInfo):
    instant = parse_instant(value)
    if instant is None:
        return None, None
    local = instant.astimezone(tz)
    return local.date(), local.time().replace(second=0, microsecond=0)


class EventDraft(BaseModel):
    """
    Event being built by the create/edit wizard.

    Dates and times are kept separately, the way the wizard collects them,
    and combined into instants in the draft's timezone on demand.
    """
    title: str = ""
    description: str = ""
    category: Category = Category.HACKATHON
    mode: EventMode = EventMode.ONLINE

    startDate: Optional[date] = None
    startTime: Optional[time] = None
    endDate: Optional[date] = None
    endTime: Optional[time] = None
    timezone: str = DEFAULT_TIMEZONE

    venue: str = ""
    city: str = ""
    state: str = ""

    registrationDeadline: Optional[date] = None
    registrationDeadlineTime: Optional[time] = None
    registrationFee: float = Field(0, ge=0)
    isFree: bool = True
    teamSizeMin: int = Field(1, ge=1)
    teamSizeMax: int = Field(1, ge=1)
    requirements: List[str] = Field(default_factory=list)

    prizes: List[Prize] = Field(default_factory=list)

    tags: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    faqs: List[Faq] = Field(default_factory=list)

    contactEmail: str = ""
    contactPhone: str = ""
    website: str = ""
    organizerLinkedin: str = ""
    organizerTwitter: str = ""
    organizerInstagram: str = ""
    socialLinks: SocialLinks = Field(default_factory=SocialLinks)

    @field_validator(
        "startDate", "startTime", "endDate", "endTime",
        "registrationDeadline", "registrationDeadlineTime",
        mode="before",
    )
    @classmethod
    def _blank_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v):
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    def _combine(self, day: Optional[date], at: Optional[time]) -> Optional[datetime]:
        if day is None or at is None:
            return None
        return datetime.combine(day, at, tzinfo=ZoneInfo(self.timezone))

    @property
    def start_at(self) -> Optional[datetime]:
        return self._combine(self.startDate, self.startTime)

    @property
    def end_at(self) -> Optional[datetime]:
        return self._combine(self.endDate, self.endTime)

    @property
    def deadline_at(self) -> Optional[datetime]:
        return self._combine(self.registrationDeadline, self.registrationDeadlineTime)

    def to_payload(self, country: str = "India", currency: str = "INR") -> dict:
        """Builds the event body expected by the API's create/update endpoints."""
        payload = {
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "mode": self.mode.value,
            "location": {
                "venue": self.venue,
                "city": self.city,
                "state": self.state,
                "country": country,
            },
            "dateTime": {
                "start": to_utc_iso(self.start_at) if self.start_at else None,
                "end": to_utc_iso(self.end_at) if self.end_at else None,
                "timezone": self.timezone,
            },
            "registration": {
                "deadline": to_utc_iso(self.deadline_at) if self.deadline_at else None,
                "fee": {
                    "amount": 0 if self.isFree else self.registrationFee,
                    "currency": currency,
                    "isFree": self.isFree,
                },
                "requirements": [r for r in self.requirements if r.strip()],
                "teamSize": {"min": self.teamSizeMin, "max": self.teamSizeMax},
            },
            "prizes": [
                p.model_dump() for p in self.prizes
                if p.position and (p.amount > 0 or p.description)
            ],
            "tags": [t for t in self.tags if t.strip()],
            "skills": [s for s in self.skills if s.strip()],
            "faqs": [f.model_dump() for f in self.faqs if f.question and f.answer],
            "socialLinks": {"website": self.website, **self.socialLinks.model_dump()},
            "contactEmail": self.contactEmail,
            "contactPhone": self.contactPhone,
            "organizerLinkedin": self.organizerLinkedin,
            "organizerTwitter": self.organizerTwitter,
            "organizerInstagram": self.organizerInstagram,
            "status": "published",
            "visibility": "public",
        }
        return payload

    @classmethod
    def from_event(cls, event: dict) -> "EventDraft":
        """Pre-fills a draft from an event as returned by the API (edit flow)."""
        date_time = event.get("dateTime") or {}
        registration = event.get("registration") or {}
        location = event.get("location") or {}
        contact = (event.get("organizer") or {}).get("contact") or {}
        social_media = contact.get("socialMedia") or {}
        tz_name = date_time.get("timezone") or DEFAULT_TIMEZONE
        try:
            tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError, TypeError):
            tz_name = DEFAULT_TIMEZONE
            tz = ZoneInfo(tz_name)

        start_date, start_time = _split_instant(date_time.get("start"), tz)
        end_date, end_time = _split_instant(date_time.get("end"), tz)
        deadline_date, deadline_time = _split_instant(registration.get("deadline"), tz)

        fee_amount, is_free = fee_parts(registration.get("fee"))
        team_size = registration.get("teamSize") or {}

        return cls(
            title=event.get("title") or "",
            description=event.get("description") or "",
            category=_enum_or(Category, event.get("category"), Category.HACKATHON),
            mode=_enum_or(EventMode, event.get("mode"), EventMode.ONLINE),
            startDate=start_date,
            startTime=start_time,
            endDate=end_date,
            endTime=end_time,
            timezone=tz_name,
            venue=location.get("venue") or "",
            city=location.get("city") or "",
            state=location.get("state") or "",
            registrationDeadline=deadline_date,
            registrationDeadlineTime=deadline_time,
            registrationFee=fee_amount,
            isFree=is_free,
            teamSizeMin=team_size.get("min") or 1,
            teamSizeMax=team_size.get("max") or 1,
            requirements=registration.get("requirements") or [],
            prizes=event.get("prizes") or [],
            tags=event.get("tags") or [],
            skills=event.get("skills") or [],
            faqs=event.get("faqs") or [],
            contactEmail=contact.get("email") or event.get("contactEmail") or "",
            contactPhone=contact.get("phone") or event.get("contactPhone") or "",
            website=contact.get("website") or (event.get("socialLinks") or {}).get("website") or "",
            organizerLinkedin=social_media.get("linkedin") or "",
            organizerTwitter=social_media.get("twitter") or "",
            organizerInstagram=social_media.get("instagram") or "",
            socialLinks=SocialLinks(**{
                k: v for k, v in (event.get("socialLinks") or {}).items()
                if k in SocialLinks.model_fields and v
            }),
        )


class _DraftUpdate(BaseModel):
    """Typed change to one group of draft fields; only the fields sent are applied."""

    def apply(self, draft: EventDraft) -> EventDraft:
        changes = self.model_dump(exclude_unset=True)
        return EventDraft.model_validate({**draft.model_dump(), **changes})


class BasicInfoUpdate(_DraftUpdate):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[Category] = None
    mode: Optional[EventMode] = None


class ScheduleUpdate(_DraftUpdate):
    startDate: Optional[date] = None
    startTime: Optional[time] = None
    endDate: Optional[date] = None
    endTime: Optional[time] = None
    timezone: Optional[str] = None

    @field_validator("startDate", "startTime", "endDate", "endTime", mode="before")
    @classmethod
    def _blank_is_missing(cls, v):
        return _blank_to_none(v)


class LocationUpdate(_DraftUpdate):
    venue: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


class RegistrationSettingsUpdate(_DraftUpdate):
    registrationDeadline: Optional[date] = None
    registrationDeadlineTime: Optional[time] = None
    registrationFee: Optional[float] = Field(None, ge=0)
    isFree: Optional[bool] = None
    teamSizeMin: Optional[int] = Field(None, ge=1)
    teamSizeMax: Optional[int] = Field(None, ge=1)
    requirements: Optional[List[str]] = None

    @field_validator("registrationDeadline", "registrationDeadlineTime", mode="before")
    @classmethod
    def _blank_is_missing(cls, v):
        return _blank_to_none(v)


class PrizesUpdate(_DraftUpdate):
    prizes: List[Prize]


class ExtrasUpdate(_DraftUpdate):
    tags: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    faqs: Optional[List[Faq]] = None
    contactEmail: Optional[str] = None
    contactPhone: Optional[str] = None
    website: Optional[str] = None
    organizerLinkedin: Optional[str] = None
    organizerTwitter: Optional[str] = None
    organizerInstagram: Optional[str] = None
    socialLinks: Optional[SocialLinks] = None


DRAFT_GROUPS = {
    "basic": BasicInfoUpdate,
    "schedule": ScheduleUpdate,
    "location": LocationUpdate,
    "registration": RegistrationSettingsUpdate,
    "prizes": PrizesUpdate,
    "extras": ExtrasUpdate,
}


class EventInfo(BaseModel):
    """The parts of a persisted event the registration flow relies on."""
    id: str
    title: str = ""
    teamSize: TeamSizeRange = Field(default_factory=TeamSizeRange)
    feeAmount: float = 0
    isFree: bool = True
    startAt: Optional[datetime] = None
    city: str = ""
    state: str = ""

    @property
    def requires_payment(self) -> bool:
        return not self.isFree and self.feeAmount > 0

    @classmethod
    def from_api(cls, event: dict) -> "EventInfo":
        registration = event.get("registration") or {}
        amount, is_free = fee_parts(registration.get("fee"))
        team_size = registration.get("teamSize") or {}
        location = event.get("location") or {}
        return cls(
            id=str(event.get("_id") or event.get("id")),
            title=event.get("title") or "",
            teamSize=TeamSizeRange(
                min=team_size.get("min") or 1,
                max=team_size.get("max") or 1,
            ),
            feeAmount=amount,
            isFree=is_free,
            startAt=parse_instant((event.get("dateTime") or {}).get("start")),
            city=location.get("city") or "",
            state=location.get("state") or "",
        )
