import pytest
import requests

from api.gateway import ApiGateway, GatewayError


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("No JSON")
        return self._body


@pytest.fixture
def api(monkeypatch):
    client = ApiGateway("http://api.test/api/")
    calls = []

    def respond(response):
        def request(method, url, **kwargs):
            calls.append((method, url, kwargs))
            if isinstance(response, Exception):
                raise response
            return response
        monkeypatch.setattr(client.session, "request", request)

    client.respond = respond
    client.calls = calls
    return client


def test_unwraps_envelope_and_forwards_token(api):
    api.respond(FakeResponse(200, {"success": True, "data": {"event": {"_id": "ev-1"}}}))
    assert api.get_event("ev-1", "tok") == {"_id": "ev-1"}
    method, url, kwargs = api.calls[0]
    assert (method, url) == ("GET", "http://api.test/api/events/ev-1")
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}


def test_bare_list_payload(api):
    api.respond(FakeResponse(200, {"success": True, "data": [{"_id": "p-1"}]}))
    assert api.get_participants("ev-1") == [{"_id": "p-1"}]


def test_server_message_is_kept(api):
    api.respond(FakeResponse(400, {"success": False, "message": "Registration closed"}))
    with pytest.raises(GatewayError) as e:
        api.register_for_event("ev-1", {})
    assert e.value.message == "Registration closed"
    assert e.value.status_code == 400


def test_fallback_message_when_server_is_silent(api):
    api.respond(FakeResponse(500))
    with pytest.raises(GatewayError) as e:
        api.get_participants("ev-1")
    assert e.value.message == "Failed to load event details"


def test_validation_errors_are_joined(api):
    api.respond(FakeResponse(400, {
        "success": False,
        "errors": [{"msg": "Title is required"}, {"msg": "Invalid date"}],
    }))
    with pytest.raises(GatewayError) as e:
        api.create_event({})
    assert e.value.message == "Validation failed:\nTitle is required\nInvalid date"
    assert len(e.value.errors) == 2


def test_success_false_with_200_is_an_error(api):
    api.respond(FakeResponse(200, {"success": False, "message": "Event is full"}))
    with pytest.raises(GatewayError, match="Event is full"):
        api.register_for_event("ev-1")


def test_transport_error(api):
    api.respond(requests.ConnectionError("refused"))
    with pytest.raises(GatewayError) as e:
        api.list_events()
    assert e.value.message == "Failed to load events"
    assert e.value.status_code is None
