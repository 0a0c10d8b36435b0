from enum import Enum
from typing import Dict, List, Optional

import structlog
from pydantic import BaseModel, Field

from schemas.user import CurrentUser


log = structlog.get_logger()

MAX_HISTORY = 20


class Page(str, Enum):
    HOME = "home"
    BROWSE_EVENTS = "browse-events"
    EVENT_DETAILS = "event-details"
    MY_EVENTS = "my-events"
    BROWSE_NOTES = "browse-notes"
    DISCOVER_COURSES = "discover-courses"
    ADMIN_DASHBOARD = "admin-dashboard"
    EMAIL_VERIFICATION = "email-verification"


REQUIRED_PARAMS: Dict[Page, List[str]] = {
    Page.EVENT_DETAILS: ["eventId"],
    Page.EMAIL_VERIFICATION: ["token"],
}

ADMIN_PAGES = {Page.ADMIN_DASHBOARD}


class NavigationIntent(BaseModel):
    page: Page
    params: Dict[str, str] = Field(default_factory=dict)


class NavigationState(BaseModel):
    current: NavigationIntent = Field(
        default_factory=lambda: NavigationIntent(page=Page.HOME)
    )
    history: List[NavigationIntent] = Field(default_factory=list)
    notice: Optional[str] = None


class Navigator:
    """
    Single owner of the page the UI is showing.

    Components emit :class:`NavigationIntent` values; the navigator decides
    whether they are allowed and what the resulting page is.
    """

    def __init__(self, user: CurrentUser, state: Optional[NavigationState] = None):
        self.user = user
        self.state = state or NavigationState()

    def resolve(self, intent: NavigationIntent) -> NavigationIntent:
        if intent.page in ADMIN_PAGES and not self.user.is_admin:
            self.state.notice = "Admin access required"
            return NavigationIntent(page=Page.HOME)
        missing = [p for p in REQUIRED_PARAMS.get(intent.page, []) if not intent.params.get(p)]
        if missing:
            self.state.notice = f"Missing navigation parameter: {', '.join(missing)}"
            return NavigationIntent(page=Page.BROWSE_EVENTS) \
                if intent.page == Page.EVENT_DETAILS else NavigationIntent(page=Page.HOME)
        return intent

    def navigate(self, intent: NavigationIntent) -> NavigationState:
        self.state.notice = None
        target = self.resolve(intent)
        if target != self.state.current:
            self.state.history.append(self.state.current)
            del self.state.history[:-MAX_HISTORY]
            self.state.current = target
        log.info("navigation.changed", user=self.user.id, page=target.page.value,
                 requested=intent.page.value)
        return self.state

    def back(self) -> NavigationState:
        self.state.notice = None
        if self.state.history:
            self.state.current = self.state.history.pop()
        else:
            self.state.current = NavigationIntent(page=Page.HOME)
        return self.state
