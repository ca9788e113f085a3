"""Shared fixtures for the Clerk user sync test suite.

Settings are read at import time, so the env vars below are set before the app is imported.
The Supabase client is swapped for an in-memory fake through dependency_overrides.
Payloads are signed with the real Svix library, so the real verifier runs in route tests.
"""

from __future__ import annotations

import base64
import json
import os
from datetime import datetime, timezone

import pytest

TEST_SIGNING_SECRET = "whsec_" + base64.b64encode(b"clerk-user-sync-test-secret").decode()

os.environ["SUPABASE_URL"] = "https://test-project.supabase.co"
os.environ["SUPABASE_KEY"] = "test-service-key"
os.environ["CLERK_SIGNING_SECRET"] = TEST_SIGNING_SECRET

from fastapi.testclient import TestClient  # noqa: E402
from svix.webhooks import Webhook  # noqa: E402

from app.main import app  # noqa: E402
from app.utils.supabase_client_handlers import get_supabase_client  # noqa: E402


# ── In-memory Supabase ────────────────────────────────────────────────────


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """One table().insert/update/delete() call, filtered with eq() and run with execute()."""

    def __init__(self, client: "FakeSupabaseClient", table: str, operation: str, values: dict | None = None):
        self.client = client
        self.table = table
        self.operation = operation
        self.values = values
        self.filters: list[tuple[str, object]] = []

    def eq(self, column: str, value):
        self.filters.append((column, value))
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    async def execute(self) -> FakeResponse:
        self.client.calls.append((self.operation, self.table, self.values, list(self.filters)))
        if self.client.error is not None:
            raise self.client.error

        rows = self.client.tables.setdefault(self.table, [])
        if self.operation == "insert":
            row = dict(self.values)
            rows.append(row)
            return FakeResponse([row])

        matched = [row for row in rows if self._matches(row)]
        if self.operation == "update":
            for row in matched:
                row.update(self.values)
        elif self.operation == "delete":
            self.client.tables[self.table] = [row for row in rows if not self._matches(row)]
        return FakeResponse(matched)


class FakeTable:
    def __init__(self, client: "FakeSupabaseClient", name: str):
        self.client = client
        self.name = name

    def insert(self, values: dict) -> FakeQuery:
        return FakeQuery(self.client, self.name, "insert", values)

    def update(self, values: dict) -> FakeQuery:
        return FakeQuery(self.client, self.name, "update", values)

    def delete(self) -> FakeQuery:
        return FakeQuery(self.client, self.name, "delete")


class FakeSupabaseClient:
    """Stands in for supabase.AsyncClient; records every executed call."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple] = []
        self.error: Exception | None = None

    def table(self, name: str) -> FakeTable:
        return FakeTable(self, name)

    def rows(self, name: str = "users") -> list[dict]:
        return self.tables.get(name, [])


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def supabase_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def client(supabase_client):
    """TestClient without lifespan, so no real Supabase client is created."""
    app.dependency_overrides[get_supabase_client] = lambda: supabase_client
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def sign_payload():
    """Factory returning (body, headers) for a Svix-signed Clerk payload."""

    def _sign(
        payload,
        secret: str = TEST_SIGNING_SECRET,
        msg_id: str = "msg_2abc",
        timestamp: datetime | None = None,
    ) -> tuple[str, dict[str, str]]:
        body = payload if isinstance(payload, str) else json.dumps(payload)
        ts = timestamp or datetime.now(tz=timezone.utc)
        headers = {
            "svix-id": msg_id,
            "svix-timestamp": str(int(ts.timestamp())),
            "svix-signature": Webhook(secret).sign(msg_id, ts, body),
            "content-type": "application/json",
        }
        return body, headers

    return _sign


@pytest.fixture
def clerk_user_payload():
    """Factory for Clerk user.* event payloads."""

    def _payload(event_type: str, **data) -> dict:
        return {"object": "event", "type": event_type, "timestamp": 1700000000000, "data": data}

    return _payload
