import requests
import structlog

from core.config import settings


log = structlog.get_logger()


class GatewayError(Exception):
    """
    Failure talking to the REST API.

    ``status_code`` is None when the request never got an answer.
    """

    def __init__(self, message: str, status_code: int = None, errors: list = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


def _unwrap(data, key, default=None):
    """Picks ``key`` out of an envelope payload; bare lists are returned as is."""
    if isinstance(data, dict):
        return data.get(key, default)
    return data


class ApiGateway:
    """
    Thin client for the events/notes REST API.

    Every call forwards the caller's bearer token and unwraps the
    ``{"success": ..., "data": ...}`` envelope the API answers with.
    """

    def __init__(self, base_url: str, timeout: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def _request(self, method: str, path: str, token: str = None,
                 fallback: str = "Request failed", **kwargs):
        url = f"{self.base_url}{path}"
        headers = kwargs.pop("headers", {})
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = self.session.request(method, url, headers=headers,
                                        timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            log.error("gateway.transport_error", method=method, path=path, error=str(e))
            raise GatewayError(fallback) from e

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if resp.status_code >= 400 or body.get("success") is False:
            errors = body.get("errors") or []
            message = body.get("message") or fallback
            if errors:
                message = "Validation failed:\n" + "\n".join(
                    e.get("msg", str(e)) if isinstance(e, dict) else str(e) for e in errors
                )
            log.warning("gateway.error", method=method, path=path,
                        status_code=resp.status_code, message=message)
            raise GatewayError(message, resp.status_code, errors)

        log.debug("gateway.ok", method=method, path=path, status_code=resp.status_code)
        data = body.get("data", body)
        return data if data is not None else {}

    # Events

    def list_events(self, filters: dict = None, token: str = None):
        data = self._request("GET", "/events", token, "Failed to load events",
                             params=filters or {})
        return _unwrap(data, "events", [])

    def get_event(self, event_id: str, token: str = None) -> dict:
        data = self._request("GET", f"/events/{event_id}", token, "Failed to load event")
        return data.get("event", data)

    def create_event(self, payload: dict, token: str = None) -> dict:
        data = self._request("POST", "/events", token, "Failed to create event", json=payload)
        return data.get("event", data)

    def update_event(self, event_id: str, payload: dict, token: str = None) -> dict:
        data = self._request("PUT", f"/events/{event_id}", token, "Failed to update event",
                             json=payload)
        return data.get("event", data)

    def delete_event(self, event_id: str, token: str = None):
        return self._request("DELETE", f"/events/{event_id}", token, "Failed to delete event")

    def get_hosted_events(self, token: str = None):
        data = self._request("GET", "/events/my/hosted", token, "Failed to load hosted events")
        return _unwrap(data, "events", [])

    def get_registered_events(self, token: str = None):
        data = self._request("GET", "/events/my/registered", token,
                             "Failed to load registered events")
        return _unwrap(data, "events", [])

    # Registrations

    def register_for_event(self, event_id: str, payload: dict = None, token: str = None):
        return self._request("POST", f"/events/{event_id}/register", token,
                             "Failed to register for event", json=payload or {})

    def unregister_from_event(self, event_id: str, token: str = None):
        return self._request("DELETE", f"/events/{event_id}/register", token,
                             "Failed to unregister from event")

    def get_participants(self, event_id: str, token: str = None) -> list:
        data = self._request("GET", f"/events/{event_id}/participants", token,
                             "Failed to load event details")
        return _unwrap(data, "participants", [])

    def update_participant_status(self, event_id: str, participant_id: str,
                                  status: str, token: str = None):
        return self._request("PATCH", f"/events/{event_id}/participants/{participant_id}",
                             token, "Failed to update participant status",
                             json={"status": status})

    def get_event_analytics(self, event_id: str, token: str = None):
        data = self._request("GET", f"/events/{event_id}/analytics", token,
                             "Failed to load analytics")
        return _unwrap(data, "analytics")

    # Payments

    def create_payment_order(self, event_id: str, registration: dict, token: str = None) -> dict:
        return self._request("POST", "/payments/create-order", token,
                             "Failed to create payment order",
                             json={"eventId": event_id, "registrationData": registration})

    def verify_payment(self, confirmation: dict, token: str = None):
        return self._request("POST", "/payments/verify", token,
                             "Payment verification failed", json=confirmation)

    # Notes

    def list_notes(self, filters: dict = None, token: str = None) -> list:
        data = self._request("GET", "/notes", token, "Failed to load notes",
                             params=filters or {})
        return _unwrap(data, "notes", [])

    def upload_note(self, fields: dict, filename: str, content: bytes,
                    content_type: str, token: str = None):
        files = {"file": (filename, content, content_type)}
        return self._request("POST", "/notes/upload", token, "Failed to upload note",
                             data=fields, files=files)

    def download_note(self, note_id: str, token: str = None) -> dict:
        return self._request("GET", f"/notes/{note_id}/download", token,
                             "Failed to download note")

    # Admin

    def get_dashboard_stats(self, token: str = None):
        return self._request("GET", "/admin/stats", token,
                             "Failed to load dashboard statistics")

    def list_users(self, filters: dict = None, token: str = None) -> list:
        data = self._request("GET", "/admin/users", token, "Failed to load users",
                             params=filters or {})
        return _unwrap(data, "users", [])

    def update_user_status(self, user_id: str, is_active: bool, token: str = None):
        return self._request("PATCH", f"/admin/users/{user_id}/status", token,
                             "Failed to update user status", json={"isActive": is_active})

    def admin_register(self, event_id: str, user_id: str, token: str = None):
        return self._request("POST", f"/events/{event_id}/admin-register", token,
                             "Failed to register user for event", json={"userId": user_id})


gateway = ApiGateway(settings.API_BASE_URL, timeout=settings.GATEWAY_TIMEOUT)
