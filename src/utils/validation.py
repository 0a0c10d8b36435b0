from datetime import datetime, timezone
from typing import List, Optional

from schemas.event import EventDraft, WizardStep

TITLE_MIN_LENGTH = 5
DESCRIPTION_MIN_LENGTH = 20

TITLE_TOO_SHORT = "Title must be at least 5 characters long"
DESCRIPTION_TOO_SHORT = "Description must be at least 20 characters long"
START_REQUIRED = "Start date and time are required"
END_REQUIRED = "End date and time are required"
DEADLINE_REQUIRED = "Registration deadline is required"
TEAM_SIZE_INVERTED = "Maximum team size must be greater than or equal to minimum team size"
START_NOT_IN_FUTURE = "Event start date must be in the future"
END_BEFORE_START = "Event end date must be after start date"
DEADLINE_AFTER_START = "Registration deadline must be before event start date"
CITY_REQUIRED = "City is required for offline/hybrid events"
VENUE_REQUIRED = "Venue is required for offline/hybrid events"


def _basic_info_errors(draft: EventDraft) -> List[str]:
    errors = []
    if len(draft.title.strip()) < TITLE_MIN_LENGTH:
        errors.append(TITLE_TOO_SHORT)
    if len(draft.description.strip()) < DESCRIPTION_MIN_LENGTH:
        errors.append(DESCRIPTION_TOO_SHORT)
    return errors


def _location_errors(draft: EventDraft) -> List[str]:
    errors = []
    if draft.mode.requires_location:
        if not draft.city.strip():
            errors.append(CITY_REQUIRED)
        if not draft.venue.strip():
            errors.append(VENUE_REQUIRED)
    return errors


def validate_step(draft: EventDraft, step: WizardStep) -> List[str]:
    """
    Checks only the fields collected by the given wizard step.

    :param draft: Draft being edited.
    :param step: Step the user is trying to leave.
    :return: Error messages in declaration order, empty when the step is valid.
    """
    errors = []
    if step == WizardStep.BASIC_INFO:
        errors.extend(_basic_info_errors(draft))
    elif step == WizardStep.SCHEDULE:
        if draft.start_at is None:
            errors.append(START_REQUIRED)
        if draft.end_at is None:
            errors.append(END_REQUIRED)
        errors.extend(_location_errors(draft))
    elif step == WizardStep.REGISTRATION:
        if draft.deadline_at is None:
            errors.append(DEADLINE_REQUIRED)
    return errors


def validate_draft(
    draft: EventDraft,
    now: Optional[datetime] = None,
    editing: bool = False,
) -> List[str]:
    """
    Full check run before a draft is submitted.

    Every violated rule is reported, in a fixed order. When ``editing`` is
    set the start date may already be in the past.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    errors = _basic_info_errors(draft)

    start, end, deadline = draft.start_at, draft.end_at, draft.deadline_at
    if start is None:
        errors.append(START_REQUIRED)
    if end is None:
        errors.append(END_REQUIRED)
    if deadline is None:
        errors.append(DEADLINE_REQUIRED)

    if draft.teamSizeMax < draft.teamSizeMin:
        errors.append(TEAM_SIZE_INVERTED)

    if start is not None:
        if not editing and start <= now:
            errors.append(START_NOT_IN_FUTURE)
        if end is not None and end <= start:
            errors.append(END_BEFORE_START)
        if deadline is not None and deadline >= start:
            errors.append(DEADLINE_AFTER_START)

    errors.extend(_location_errors(draft))
    return errors
