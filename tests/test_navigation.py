from core.navigation import MAX_HISTORY, NavigationIntent, Navigator, Page
from schemas.user import CurrentUser, Role


def intent(page, **params):
    return NavigationIntent(page=page, params=params)


def test_starts_at_home(leader):
    assert Navigator(leader).state.current.page == Page.HOME


def test_navigate_and_back(leader):
    nav = Navigator(leader)
    nav.navigate(intent(Page.BROWSE_EVENTS))
    nav.navigate(intent(Page.EVENT_DETAILS, eventId="ev-1"))
    assert nav.state.current.params == {"eventId": "ev-1"}
    nav.back()
    assert nav.state.current.page == Page.BROWSE_EVENTS
    nav.back()
    nav.back()
    assert nav.state.current.page == Page.HOME


def test_event_details_without_id_goes_to_listing(leader):
    nav = Navigator(leader)
    state = nav.navigate(intent(Page.EVENT_DETAILS))
    assert state.current.page == Page.BROWSE_EVENTS
    assert "eventId" in state.notice


def test_admin_page_needs_admin(leader):
    state = Navigator(leader).navigate(intent(Page.ADMIN_DASHBOARD))
    assert state.current.page == Page.HOME
    assert state.notice == "Admin access required"

    admin = CurrentUser(id="a-1", name="Admin", email="admin@x.in", role=Role.ADMIN)
    state = Navigator(admin).navigate(intent(Page.ADMIN_DASHBOARD))
    assert state.current.page == Page.ADMIN_DASHBOARD
    assert state.notice is None


def test_same_page_is_not_pushed_twice(leader):
    nav = Navigator(leader)
    nav.navigate(intent(Page.BROWSE_NOTES))
    nav.navigate(intent(Page.BROWSE_NOTES))
    assert len(nav.state.history) == 1


def test_history_is_bounded(leader):
    nav = Navigator(leader)
    for i in range(MAX_HISTORY + 5):
        nav.navigate(intent(Page.EVENT_DETAILS, eventId=str(i)))
    assert len(nav.state.history) == MAX_HISTORY
