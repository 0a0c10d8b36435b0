from datetime import date, datetime, time, timedelta, timezone

import pytest

from schemas.event import EventDraft, EventMode, WizardStep
from utils.validation import (
    CITY_REQUIRED,
    DEADLINE_AFTER_START,
    DEADLINE_REQUIRED,
    DESCRIPTION_TOO_SHORT,
    END_BEFORE_START,
    END_REQUIRED,
    START_NOT_IN_FUTURE,
    START_REQUIRED,
    TEAM_SIZE_INVERTED,
    TITLE_TOO_SHORT,
    VENUE_REQUIRED,
    validate_draft,
    validate_step,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def valid_draft(**overrides) -> EventDraft:
    fields = dict(
        title="Inter College Hackathon",
        description="Forty eight hours of building things with friends.",
        startDate=date(2026, 4, 10),
        startTime=time(9, 0),
        endDate=date(2026, 4, 12),
        endTime=time(18, 0),
        registrationDeadline=date(2026, 4, 5),
        registrationDeadlineTime=time(23, 59),
        teamSizeMin=1,
        teamSizeMax=4,
    )
    fields.update(overrides)
    return EventDraft(**fields)


def test_valid_draft_has_no_errors():
    assert validate_draft(valid_draft(), now=NOW) == []


def test_short_title_on_basic_info_step():
    draft = EventDraft(title="Hi", description="A description long enough to pass.")
    assert validate_step(draft, WizardStep.BASIC_INFO) == [TITLE_TOO_SHORT]
    assert TITLE_TOO_SHORT == "Title must be at least 5 characters long"


def test_title_is_trimmed_before_length_check():
    draft = valid_draft(title="  abc   ")
    assert validate_step(draft, WizardStep.BASIC_INFO) == [TITLE_TOO_SHORT]


def test_offline_event_without_city_on_schedule_step():
    draft = valid_draft(mode=EventMode.OFFLINE, city="", venue="Hall A")
    assert validate_step(draft, WizardStep.SCHEDULE) == [
        "City is required for offline/hybrid events"
    ]


def test_online_event_needs_no_location():
    draft = valid_draft(mode=EventMode.ONLINE, city="", venue="")
    assert validate_step(draft, WizardStep.SCHEDULE) == []


def test_schedule_step_requires_both_date_and_time():
    draft = valid_draft(startTime=None, endDate=None, mode=EventMode.HYBRID)
    assert validate_step(draft, WizardStep.SCHEDULE) == [
        START_REQUIRED, END_REQUIRED, CITY_REQUIRED, VENUE_REQUIRED,
    ]


def test_registration_step_requires_deadline():
    draft = valid_draft(registrationDeadlineTime=None)
    assert validate_step(draft, WizardStep.REGISTRATION) == [DEADLINE_REQUIRED]


@pytest.mark.parametrize("step", [WizardStep.PRIZES, WizardStep.EXTRAS])
def test_later_steps_have_no_rules(step):
    assert validate_step(EventDraft(), step) == []


def test_blank_strings_count_as_missing_dates():
    draft = EventDraft(startDate="", startTime="", endDate=" ", endTime="")
    assert draft.start_at is None
    assert draft.end_at is None


def test_full_validation_reports_everything_in_order():
    draft = EventDraft(
        title="Hey",
        description="short",
        mode=EventMode.OFFLINE,
        teamSizeMin=3,
        teamSizeMax=2,
    )
    assert validate_draft(draft, now=NOW) == [
        TITLE_TOO_SHORT,
        DESCRIPTION_TOO_SHORT,
        START_REQUIRED,
        END_REQUIRED,
        DEADLINE_REQUIRED,
        TEAM_SIZE_INVERTED,
        CITY_REQUIRED,
        VENUE_REQUIRED,
    ]


def test_end_before_start_fails_regardless_of_other_fields():
    draft = valid_draft(endDate=date(2026, 4, 9))
    assert validate_draft(draft, now=NOW) == [END_BEFORE_START]


def test_end_equal_to_start_fails():
    draft = valid_draft(endDate=date(2026, 4, 10), endTime=time(9, 0))
    assert validate_draft(draft, now=NOW) == [END_BEFORE_START]


def test_deadline_at_start_fails():
    draft = valid_draft(registrationDeadline=date(2026, 4, 10),
                        registrationDeadlineTime=time(9, 0))
    assert validate_draft(draft, now=NOW) == [DEADLINE_AFTER_START]


def test_start_tomorrow_end_yesterday():
    today = NOW.date()
    draft = valid_draft(
        startDate=today + timedelta(days=1),
        endDate=today - timedelta(days=1),
        registrationDeadline=today + timedelta(days=2),
    )
    errors = validate_draft(draft, now=NOW)
    assert END_BEFORE_START in errors
    assert errors == [END_BEFORE_START, DEADLINE_AFTER_START]


def test_start_in_past_rejected_on_create_only():
    draft = valid_draft(
        startDate=date(2026, 2, 1),
        endDate=date(2026, 2, 3),
        registrationDeadline=date(2026, 1, 20),
    )
    assert validate_draft(draft, now=NOW) == [START_NOT_IN_FUTURE]
    assert validate_draft(draft, now=NOW, editing=True) == []


def test_instants_use_draft_timezone():
    # 09:00 in Kolkata is 03:30 UTC
    draft = valid_draft(startDate=date(2026, 3, 1), startTime=time(9, 0))
    assert draft.start_at.astimezone(timezone.utc).hour == 3
    early = datetime(2026, 3, 1, 3, 0, tzinfo=timezone.utc)
    assert START_NOT_IN_FUTURE not in validate_draft(
        draft.model_copy(update={"endDate": date(2026, 3, 2),
                                 "registrationDeadline": date(2026, 2, 28)}),
        now=early,
    )
