from datetime import date, time

import pytest
from pydantic import ValidationError

from schemas.event import (
    BasicInfoUpdate,
    Category,
    EventDraft,
    EventInfo,
    EventMode,
    Prize,
    RegistrationSettingsUpdate,
    ScheduleUpdate,
)


API_EVENT = {
    "_id": "ev-42",
    "title": "Robotics Workshop",
    "description": "Build a line follower robot from scratch in a day.",
    "category": "workshop",
    "mode": "Offline",
    "location": {"venue": "Lab 3", "city": "Pune", "state": "MH"},
    "dateTime": {
        "start": "2026-05-10T03:30:00.000Z",
        "end": "2026-05-10T12:30:00.000Z",
        "timezone": "Asia/Kolkata",
    },
    "registration": {
        "deadline": "2026-05-08T18:29:00.000Z",
        "fee": {"amount": 199, "currency": "INR", "isFree": False},
        "teamSize": {"min": 2, "max": 4},
        "requirements": ["Laptop"],
    },
    "tags": ["robots"],
    "faqs": [{"question": "Food?", "answer": "Lunch provided", "_id": "f1"}],
    "socialLinks": {"website": "https://robo.example", "discord": "robo"},
}


def test_draft_from_event_uses_local_time():
    draft = EventDraft.from_event(API_EVENT)
    assert draft.startDate == date(2026, 5, 10)
    assert draft.startTime == time(9, 0)
    assert draft.endTime == time(18, 0)
    assert draft.registrationDeadline == date(2026, 5, 8)
    assert draft.registrationDeadlineTime == time(23, 59)
    assert draft.mode == EventMode.OFFLINE
    assert draft.registrationFee == 199
    assert draft.isFree is False
    assert (draft.teamSizeMin, draft.teamSizeMax) == (2, 4)
    assert draft.website == "https://robo.example"
    assert draft.socialLinks.discord == "robo"
    assert draft.faqs[0].answer == "Lunch provided"


def test_flat_fee_is_normalized():
    event = dict(API_EVENT, registration={"fee": 300})
    draft = EventDraft.from_event(event)
    assert draft.registrationFee == 300
    assert draft.isFree is False
    assert EventInfo.from_api(event).requires_payment


def test_payload_round_trips_instants():
    payload = EventDraft.from_event(API_EVENT).to_payload()
    assert payload["dateTime"]["start"] == "2026-05-10T03:30:00Z"
    assert payload["registration"]["deadline"] == "2026-05-08T18:29:00Z"
    assert payload["registration"]["fee"] == {"amount": 199, "currency": "INR", "isFree": False}
    assert payload["location"]["country"] == "India"


def test_payload_drops_blank_entries():
    draft = EventDraft(
        isFree=True,
        registrationFee=500,
        tags=["ai", " ", ""],
        skills=[""],
        requirements=["Laptop", "  "],
        prizes=[Prize(position="Winner"), Prize(position="Runner up", amount=1000)],
        faqs=[{"question": "When?", "answer": ""}, {"question": "Where?", "answer": "Hall"}],
    )
    payload = draft.to_payload()
    assert payload["registration"]["fee"]["amount"] == 0
    assert payload["tags"] == ["ai"]
    assert payload["skills"] == []
    assert payload["registration"]["requirements"] == ["Laptop"]
    assert [p["position"] for p in payload["prizes"]] == ["Runner up"]
    assert payload["faqs"] == [{"question": "Where?", "answer": "Hall"}]


def test_group_update_only_touches_sent_fields():
    draft = EventDraft(title="Original title", description="kept as is")
    updated = BasicInfoUpdate(title="New title").apply(draft)
    assert updated.title == "New title"
    assert updated.description == "kept as is"


def test_schedule_update_parses_strings():
    draft = ScheduleUpdate.model_validate(
        {"startDate": "2026-06-01", "startTime": "10:30", "endDate": ""}
    ).apply(EventDraft())
    assert draft.startDate == date(2026, 6, 1)
    assert draft.startTime == time(10, 30)
    assert draft.endDate is None


def test_invalid_updates_are_rejected():
    with pytest.raises(ValidationError):
        RegistrationSettingsUpdate(teamSizeMin=0)
    with pytest.raises(ValidationError):
        ScheduleUpdate(timezone="Mars/Olympus").apply(EventDraft())


def test_event_info_defaults():
    info = EventInfo.from_api({"_id": "ev-1", "title": "Quiz"})
    assert info.teamSize.min == 1 and info.teamSize.max == 1
    assert not info.requires_payment


def test_draft_from_event_falls_back_on_unknown_values():
    draft = EventDraft.from_event({
        "title": "Legacy Meetup",
        "category": "gala",
        "mode": None,
        "dateTime": {"start": "2026-05-10T03:30:00Z", "timezone": "Nowhere/Special"},
    })
    assert draft.timezone == "Asia/Kolkata"
    assert draft.category == Category.HACKATHON
    assert draft.mode == EventMode.ONLINE
    assert draft.startTime == time(9, 0)
