"""Shared pytest fixtures: domain items, a memory-backed cart and a fake Supabase client."""

import copy
from decimal import Decimal
from types import SimpleNamespace

import pytest

from domain.models import Item
from services.cart_service import CartStore
from services.cart_storage import MemoryCartStorage


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Just enough of the PostgREST query builder for data_integrator."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self._order = None
        self._limit = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, n):
        self._limit = n
        return self

    def _matches(self, row):
        return all(row.get(c) == v for c, v in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op, copy.deepcopy(self.payload)))
        if self.db.before_execute:
            self.db.before_execute(self.table, self.op, self.payload)

        for table, op, when, exc in self.db.failures:
            if table == self.table and op == self.op and when(self.payload, self.filters):
                raise exc

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for row in payload:
                self.db.next_id += 1
                stored = {"id": f"{self.table}-{self.db.next_id}", **row}
                rows.append(stored)
                inserted.append(dict(stored))
            return FakeResponse(inserted)

        if self.op == "delete":
            deleted = [r for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResponse(deleted)

        found = [dict(r) for r in rows if self._matches(r)]
        if self._order:
            column, desc = self._order
            found.sort(key=lambda r: r.get(column) or "", reverse=desc)
        if self._limit is not None:
            found = found[: self._limit]
        return FakeResponse(found)


class FakeAuth:
    def __init__(self):
        self.user = None
        self.passwords = {}

    def get_user(self):
        if self.user is None:
            return None
        return SimpleNamespace(user=self.user)

    def sign_in_with_password(self, credentials):
        email = credentials["email"]
        if self.passwords.get(email) != credentials["password"]:
            raise Exception("Invalid login credentials")
        self.user = SimpleNamespace(id=f"user-{email}", email=email)

    def sign_out(self):
        self.user = None


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = []
        self.next_id = 0
        self.before_execute = None
        self.auth = FakeAuth()

    def schema(self, name):
        return self

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op, when=lambda payload, filters: True, exc=None):
        """Make matching executes raise."""
        self.failures.append((table, op, when, exc or Exception(f"{table} {op} failed")))

    def sign_in_as(self, user_id="user-1", email="owner@example.com"):
        self.auth.user = SimpleNamespace(id=user_id, email=email)

    def inserted(self, table):
        return [payload for t, op, payload in self.calls if t == table and op == "insert"]


@pytest.fixture
def fake_client():
    return FakeSupabase()


@pytest.fixture
def signed_in_client(fake_client):
    fake_client.sign_in_as()
    fake_client.tables["user_stores"] = [
        {"user_id": "user-1", "store_id": "s1", "stores": {"id": "s1", "name": "Montreal"}},
        {"user_id": "user-1", "store_id": "s2", "stores": {"id": "s2", "name": "Laval"}},
    ]
    return fake_client


@pytest.fixture
def product():
    return Item(id="p1", name_en="Apron", name_fr="Tablier", category="Uniforms", price=Decimal("5.00"))


@pytest.fixture
def product2():
    return Item(id="p2", name_en="Cap", name_fr="Casquette", category="Uniforms", price=Decimal("5.00"))


@pytest.fixture
def sized_product():
    return Item(
        id="p3",
        name_en="Polo",
        name_fr="Polo",
        category="Uniforms",
        price=Decimal("24.50"),
        sizes=["S", "M", "L"],
    )


@pytest.fixture
def kit():
    return Item(
        id="k1",
        name_en="Opening Kit",
        name_fr="Ensemble d'ouverture",
        category="Kits",
        price=Decimal("0"),
        is_kit=True,
        products=["Apron x4", "Cap x4"],
    )


@pytest.fixture
def other_kit():
    return Item(id="k2", name_en="Seasonal Kit", name_fr="Ensemble saisonnier",
                category="Kits", price=Decimal("0"), is_kit=True)


@pytest.fixture
def storage():
    return MemoryCartStorage()


@pytest.fixture
def cart(storage):
    return CartStore(storage)
