import os
import sys

import jwt
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))
# Minimal environment required by the settings module, set before any
# application module is imported.
os.environ.setdefault("API_BASE_URL", "http://api.test/api")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("JWT_SECRET", "test-secret-with-enough-bytes-for-hs256")
os.environ.setdefault("UPI_VPA", "events@upi")

from schemas.user import CurrentUser, Role  # noqa: E402


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.ttl = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value):
        self.store[key] = value

    async def expire(self, key, seconds):
        self.ttl[key] = seconds

    async def delete(self, key):
        self.store.pop(key, None)

    async def aclose(self):
        pass


@pytest.fixture
def fake_redis(monkeypatch):
    from core import sessions
    fake = FakeRedis()
    monkeypatch.setattr(sessions, "redis", fake)
    return fake


@pytest.fixture
def leader():
    return CurrentUser(id="u-1", name="Asha Rao", email="asha@college.edu",
                       role=Role.STUDENT, institution="IIT Madras")


def make_token(user_id="u-1", name="Asha Rao", email="asha@college.edu", role="student",
               institution="IIT Madras"):
    payload = {"sub": user_id, "name": name, "email": email, "role": role,
               "institution": institution}
    return jwt.encode(payload, os.environ["JWT_SECRET"], algorithm="HS256")
