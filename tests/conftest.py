"""
Shared pytest fixtures.

FakeSupabase is an in-memory stand-in for the supabase-py client. It covers the
slice of the PostgREST query builder the services use: select / insert /
update / delete / upsert with eq, neq, in_, gt, gte, lt, lte, order and limit.
ISO timestamps are compared as datetimes, as Postgres would.
"""

from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from irlly.core.dependencies import get_current_user_id
from irlly.database.supabase_client import get_supabase
from irlly.main import app
from irlly.modules.auth.service import clear_auth_cache


def _coerce(value: Any) -> Any:
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return value
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(actual: Any, expected: Any) -> bool:
        if actual is None:
            return False
        return op(_coerce(actual), _coerce(expected))
    return check


# ---------------------------------------------------------------------------
# Fake Supabase client
# ---------------------------------------------------------------------------


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.columns = "*"
        self.filters: List[tuple] = []
        self.orders: List[tuple] = []
        self.row_limit: Optional[int] = None
        self.payload: Any = None
        self.on_conflict = ""

    # -- operations --------------------------------------------------------

    def select(self, columns: str = "*") -> "FakeQuery":
        self.columns = columns
        return self

    def insert(self, rows) -> "FakeQuery":
        self.operation = "insert"
        self.payload = rows
        return self

    def update(self, data: dict) -> "FakeQuery":
        self.operation = "update"
        self.payload = data
        return self

    def delete(self) -> "FakeQuery":
        self.operation = "delete"
        return self

    def upsert(self, rows, on_conflict: str = "id") -> "FakeQuery":
        self.operation = "upsert"
        self.payload = rows
        self.on_conflict = on_conflict
        return self

    # -- filters -----------------------------------------------------------

    def _filter(self, column: str, check: Callable[[Any, Any], bool], value: Any) -> "FakeQuery":
        self.filters.append((column, check, value))
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, lambda a, b: a == b, value)

    def neq(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, lambda a, b: a != b, value)

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        return self._filter(column, lambda a, b: a in b, list(values))

    def gt(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, _compare(lambda a, b: a > b), value)

    def gte(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, _compare(lambda a, b: a >= b), value)

    def lt(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, _compare(lambda a, b: a < b), value)

    def lte(self, column: str, value: Any) -> "FakeQuery":
        return self._filter(column, _compare(lambda a, b: a <= b), value)

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.orders.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.row_limit = count
        return self

    # -- execution ---------------------------------------------------------

    def _matches(self, row: dict) -> bool:
        return all(check(row.get(column), value) for column, check, value in self.filters)

    def _project(self, row: dict) -> dict:
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        names = [c.strip() for c in self.columns.split(",")]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    def _new_row(self, row: dict) -> dict:
        stored = {"id": str(uuid.uuid4()), "created_at": datetime.now(timezone.utc).isoformat()}
        stored.update(copy.deepcopy(row))
        return stored

    def execute(self) -> SimpleNamespace:
        self.db.log.append((self.table_name, self.operation))
        for key in ((self.table_name, self.operation), (self.table_name, None)):
            if key in self.db.failures:
                raise self.db.failures[key] or Exception(f"connection refused while querying {self.table_name}")

        rows = self.db.tables[self.table_name]

        if self.operation == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self._new_row(r) for r in payload]
            rows.extend(inserted)
            return SimpleNamespace(data=copy.deepcopy(inserted))

        if self.operation == "upsert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            keys = [k.strip() for k in self.on_conflict.split(",")]
            written = []
            for incoming in payload:
                existing = next(
                    (r for r in rows if all(r.get(k) == incoming.get(k) for k in keys)),
                    None
                )
                if existing is not None:
                    existing.update(copy.deepcopy(incoming))
                    written.append(existing)
                else:
                    stored = self._new_row(incoming)
                    rows.append(stored)
                    written.append(stored)
            return SimpleNamespace(data=copy.deepcopy(written))

        matched = [r for r in rows if self._matches(r)]

        if self.operation == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return SimpleNamespace(data=copy.deepcopy(matched))

        if self.operation == "delete":
            self.db.tables[self.table_name] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=copy.deepcopy(matched))

        for column, desc in reversed(self.orders):
            matched.sort(
                key=lambda r: (r.get(column) is None, _coerce(r.get(column))),
                reverse=desc
            )
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        return SimpleNamespace(data=[self._project(r) for r in matched])


class FakeAuth:
    def __init__(self):
        self.tokens: Dict[str, str] = {}
        self.calls = 0

    def get_user(self, jwt: str):
        self.calls += 1
        if jwt not in self.tokens:
            raise Exception("invalid JWT: signature mismatch")
        return SimpleNamespace(user=SimpleNamespace(
            id=self.tokens[jwt], phone=None, user_metadata={}
        ))


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[dict]] = defaultdict(list)
        self.failures: Dict[tuple, Optional[Exception]] = {}
        self.log: List[tuple] = []
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, operation: Optional[str] = None, error: Optional[Exception] = None) -> None:
        """Make every later query on `table` (optionally only `operation`) raise `error`"""
        self.failures[(table, operation)] = error

    def rows(self, table: str) -> List[dict]:
        return self.tables[table]

    # -- seeding -----------------------------------------------------------

    def _add(self, table: str, row: dict) -> dict:
        stored = {"id": str(uuid.uuid4()), "created_at": datetime.now(timezone.utc).isoformat()}
        stored.update(row)
        self.tables[table].append(stored)
        return stored

    def add_user(self, name: str, username: Optional[str] = None) -> str:
        return self._add("users", {"name": name, "username": username, "avatar_url": None})["id"]

    def add_contact(self, owner_id: str, linked_user_id: Optional[str] = None, name: str = "Friend") -> str:
        return self._add("contacts", {
            "owner_id": owner_id,
            "linked_user_id": linked_user_id,
            "name": name,
            "username": None,
            "phone_number": None
        })["id"]

    def add_circle(self, owner_id: str, name: str = "Close Friends", contact_ids: List[str] = ()) -> str:
        circle_id = self._add("circles", {"owner_id": owner_id, "name": name, "emoji": None})["id"]
        for contact_id in contact_ids:
            self._add("circle_members", {"circle_id": circle_id, "contact_id": contact_id})
        return circle_id

    def share(self, kind: str, event_id: str, circle_ids: List[str]) -> None:
        for circle_id in circle_ids:
            self._add("event_circles", {"event_id": event_id, "event_kind": kind, "circle_id": circle_id})

    def add_pin(
        self,
        creator_id: str,
        circle_ids: List[str] = (),
        created_at: Optional[datetime] = None,
        expires_at: Optional[datetime] = None,
        is_active: bool = True,
        title: str = "Coffee now"
    ) -> str:
        created_at = created_at or datetime.now(timezone.utc)
        expires_at = expires_at or created_at + timedelta(hours=4)
        pin_id = self._add("pins", {
            "creator_id": creator_id,
            "title": title,
            "note": None,
            "emoji": None,
            "latitude": 40.7,
            "longitude": -74.0,
            "address": None,
            "is_active": is_active,
            "created_at": created_at.isoformat(),
            "expires_at": expires_at.isoformat()
        })["id"]
        self.share("pin", pin_id, circle_ids)
        return pin_id

    def add_meetup(
        self,
        creator_id: str,
        circle_ids: List[str] = (),
        scheduled_for: Optional[datetime] = None,
        title: str = "Dinner"
    ) -> str:
        scheduled_for = scheduled_for or datetime.now(timezone.utc) + timedelta(days=1)
        meetup_id = self._add("meetups", {
            "creator_id": creator_id,
            "title": title,
            "description": None,
            "emoji": None,
            "latitude": 40.7,
            "longitude": -74.0,
            "address": None,
            "scheduled_for": scheduled_for.isoformat()
        })["id"]
        self.share("meetup", meetup_id, circle_ids)
        return meetup_id


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def close_friends(db: FakeSupabase) -> SimpleNamespace:
    """
    Alice owns "Close Friends" and has filed Bob in it. Carol is unconnected.
    """
    alice = db.add_user("Alice", "alice")
    bob = db.add_user("Bob", "bob")
    carol = db.add_user("Carol", "carol")
    bob_contact = db.add_contact(alice, linked_user_id=bob, name="Bob")
    circle = db.add_circle(alice, "Close Friends", [bob_contact])
    return SimpleNamespace(alice=alice, bob=bob, carol=carol, bob_contact=bob_contact, circle=circle)


class ApiClient:
    """TestClient whose requests are made as whichever user act_as() last set"""

    def __init__(self, client: TestClient):
        self.client = client
        self.user_id: Optional[str] = None

    def act_as(self, user_id: str) -> "ApiClient":
        self.user_id = user_id
        return self

    def __getattr__(self, name: str):
        return getattr(self.client, name)


@pytest.fixture
def api(db: FakeSupabase):
    clear_auth_cache()
    api_client = ApiClient(TestClient(app))
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_current_user_id] = lambda: api_client.user_id
    yield api_client
    app.dependency_overrides.clear()


@pytest.fixture
def raw_client(db: FakeSupabase):
    """Client that authenticates through the real bearer-token path"""
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()
    clear_auth_cache()
