"""Fake service clients: in-memory stand-ins for the identity provider, limiter, and LLM.

Invariants:
    - FakeSessionVerifier treats a bearer token equal to a known user id as valid
    - FakeIdentityClient records every get_users() batch for call-count assertions
    - FakeRateLimiter applies the real core/sliding_window decision with a settable clock
    - FakeTextGenerator returns a fixed reply (or raises) and records prompts
"""

from datetime import datetime, timedelta, timezone

from bookcircle.core.domain_types import ExternalUser
from bookcircle.core.service_protocols import RateLimitResult
from bookcircle.core.sliding_window import evaluate_window


ALICE = ExternalUser(
    id="user_alice", username="alice", first_name="Alice", last_name="Reed",
    profile_image_url="https://img.example/alice.png",
)
BOB = ExternalUser(
    id="user_bob", username=None, first_name="Bob", last_name="Stone",
    external_usernames=("bobgh",),
)
CAROL = ExternalUser(
    id="user_carol", username=None, first_name="Carol", last_name="King",
)
GHOST = ExternalUser(id="user_ghost")

DEFAULT_USERS = (ALICE, BOB, CAROL, GHOST)


def auth(user: ExternalUser) -> dict:
    return {"Authorization": f"Bearer {user.id}"}


class FakeIdentityClient:
    def __init__(self, users=DEFAULT_USERS):
        self.users = {u.id: u for u in users}
        self.batches: list[list[str]] = []

    async def get_users(self, user_ids):
        self.batches.append(list(user_ids))
        return [self.users[i] for i in user_ids if i in self.users]

    async def get_users_by_username(self, usernames):
        return [u for u in self.users.values() if u.username in usernames]

    async def list_users(self, limit):
        return list(self.users.values())[:limit]


class FakeSessionVerifier:
    def __init__(self, users=DEFAULT_USERS):
        self.user_ids = {u.id for u in users}

    async def verify(self, token):
        return token if token in self.user_ids else None


class FakeRateLimiter:
    def __init__(self, max_requests=5, window_seconds=60):
        self.max_requests = max_requests
        self.window = timedelta(seconds=window_seconds)
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.hits: dict[str, list[datetime]] = {}

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)

    async def limit(self, key):
        hits = self.hits.setdefault(key, [])
        decision = evaluate_window(hits, self.now, self.max_requests, self.window)
        if decision.allowed:
            hits.append(self.now)
        return RateLimitResult(
            decision.allowed, decision.remaining, decision.retry_after_ms,
        )


class FakeTextGenerator:
    def __init__(self, reply="", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply
