"""Shared fixtures: an in-memory obligations store and a wired test client.

The store is a plain DB-API connection (sqlite3) with the three tables the
expander reads, so the query layer runs unmodified in tests.
"""
import sqlite3
from datetime import date

import pytest
from fastapi.testclient import TestClient

from cashflow_forecast.api.deps import get_db, get_today
from cashflow_forecast.main import app

FILE_ID = "budget-1"
TODAY = date(2026, 10, 19)

_SCHEMA = """
CREATE TABLE contracts (
    id TEXT PRIMARY KEY,
    file_id TEXT NOT NULL,
    name TEXT NOT NULL,
    amount INTEGER,
    frequency TEXT DEFAULT 'monthly',
    next_payment_date TEXT,
    status TEXT DEFAULT 'active'
);
CREATE TABLE invoices (
    id TEXT PRIMARY KEY,
    contract_id TEXT REFERENCES contracts(id),
    file_id TEXT NOT NULL,
    amount INTEGER NOT NULL,
    due_date TEXT,
    status TEXT DEFAULT 'pending'
);
CREATE TABLE expected_events (
    id TEXT PRIMARY KEY,
    file_id TEXT NOT NULL,
    source_type TEXT NOT NULL,
    source_id TEXT NOT NULL,
    expected_date TEXT NOT NULL,
    expected_amount INTEGER,
    status TEXT DEFAULT 'pending'
);
"""


class Store:
    """Thin seeding helper over a sqlite3 connection."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def add_contract(self, id, name, amount, next_payment_date, frequency="monthly",
                     status="active", file_id=FILE_ID):
        self.conn.execute(
            "INSERT INTO contracts (id, file_id, name, amount, frequency, next_payment_date, status)"
            " VALUES (?, ?, ?, ?, ?, ?, ?)",
            (id, file_id, name, amount, frequency, _iso(next_payment_date), status),
        )

    def add_invoice(self, id, amount, due_date, contract_id=None, status="pending", file_id=FILE_ID):
        self.conn.execute(
            "INSERT INTO invoices (id, contract_id, file_id, amount, due_date, status)"
            " VALUES (?, ?, ?, ?, ?, ?)",
            (id, contract_id, file_id, amount, _iso(due_date), status),
        )

    def add_expected(self, id, amount, expected_date, source_type="schedule", source_id="src",
                     status="pending", file_id=FILE_ID):
        self.conn.execute(
            "INSERT INTO expected_events"
            " (id, file_id, source_type, source_id, expected_date, expected_amount, status)"
            " VALUES (?, ?, ?, ?, ?, ?, ?)",
            (id, file_id, source_type, source_id, _iso(expected_date), amount, status),
        )


def _iso(value):
    return value.isoformat() if hasattr(value, "isoformat") else value


@pytest.fixture
def store():
    # TestClient runs sync endpoints on a worker thread
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.executescript(_SCHEMA)
    yield Store(conn)
    conn.close()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_db] = lambda: store.conn
    app.dependency_overrides[get_today] = lambda: TODAY
    yield TestClient(app)
    app.dependency_overrides.clear()
