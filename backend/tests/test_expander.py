"""Tests for the event expander — contracts, invoices, expected events, merging."""
import logging
from datetime import date, datetime, timedelta

from cashflow_forecast.db.queries.common import build_records
from cashflow_forecast.db.queries.contracts import get_active_contracts
from cashflow_forecast.db.queries.expected_events import get_pending_expected_events
from cashflow_forecast.db.queries.invoices import get_pending_invoices
from cashflow_forecast.models.forecast import SourceType
from cashflow_forecast.models.records import ContractRecord, InvoiceRecord
from cashflow_forecast.simulation.expander import (
    contract_events,
    contract_occurrences,
    expand_events,
    parse_store_date,
)

FILE_ID = "budget-1"
TODAY = date(2026, 10, 19)


def _days(n: int) -> date:
    return TODAY + timedelta(days=n)


# --- Store queries ---


def test_queries_filter_by_file_and_status(store):
    store.add_contract("c1", "Rent", -90000, _days(1))
    store.add_contract("c2", "Old gym", -3000, _days(1), status="cancelled")
    store.add_contract("c3", "Other file", -100, _days(1), file_id="budget-2")
    store.add_contract("c4", "No date", -100, None)
    store.add_invoice("i1", 5000, _days(2))
    store.add_invoice("i2", 5000, _days(2), status="paid")
    store.add_expected("e1", 100, _days(3))
    store.add_expected("e2", 100, _days(3), status="matched")

    assert [c.id for c in get_active_contracts(store.conn, FILE_ID)] == ["c1"]
    assert [i.id for i in get_pending_invoices(store.conn, FILE_ID)] == ["i1"]
    assert [e.id for e in get_pending_expected_events(store.conn, FILE_ID)] == ["e1"]


def test_invoice_query_joins_contract_name(store):
    store.add_contract("c1", "Electricity", -8000, _days(1))
    store.add_invoice("i1", -8123, _days(5), contract_id="c1")
    store.add_invoice("i2", 4000, _days(5))
    invoices = {i.id: i for i in get_pending_invoices(store.conn, FILE_ID)}
    assert invoices["i1"].linked_name == "Electricity"
    assert invoices["i2"].linked_name is None


# --- Contract recurrence ---


def test_empty_store_expands_to_nothing(store):
    assert expand_events(store.conn, FILE_ID, 30, today=TODAY) == []


def test_monthly_contract_recurs(store):
    store.add_contract("c1", "Netflix", -1599, TODAY, "monthly")
    events = expand_events(store.conn, FILE_ID, 90, today=TODAY)
    assert len(events) >= 3
    first = events[0]
    assert first.source_type == SourceType.contract
    assert first.source_id == "c1"
    assert first.amount == -1599
    assert first.description == "Netflix"
    assert first.date == TODAY


def test_weekly_contract_over_28_days_has_five_occurrences(store):
    store.add_contract("c2", "Weekly cleaning", -5000, TODAY, "weekly")
    events = expand_events(store.conn, FILE_ID, 28, today=TODAY)
    assert [e.date for e in events] == [_days(n) for n in (0, 7, 14, 21, 28)]


def test_quarterly_and_yearly_steps():
    assert contract_occurrences(date(2026, 1, 15), "quarterly", date(2026, 12, 31)) == [
        date(2026, 1, 15), date(2026, 4, 15), date(2026, 7, 15), date(2026, 10, 15),
    ]
    assert contract_occurrences(date(2026, 2, 1), "yearly", date(2028, 2, 1)) == [
        date(2026, 2, 1), date(2027, 2, 1), date(2028, 2, 1),
    ]


def test_month_end_is_clamped_without_drift():
    dates = contract_occurrences(date(2027, 1, 31), "monthly", date(2027, 5, 31))
    assert dates == [
        date(2027, 1, 31), date(2027, 2, 28), date(2027, 3, 31), date(2027, 4, 30), date(2027, 5, 31),
    ]


def test_leap_day_yearly_clamps_to_feb_28():
    dates = contract_occurrences(date(2028, 2, 29), "yearly", date(2030, 3, 1))
    assert dates == [date(2028, 2, 29), date(2029, 2, 28), date(2030, 2, 28)]


def test_stale_next_payment_date_catches_up():
    contract = ContractRecord(
        id="c1", name="Phone", amount=-2500,
        next_payment_date=(TODAY - timedelta(days=21)).isoformat(), frequency="weekly",
    )
    events = contract_events([contract], TODAY, _days(14))
    # -21, -14, -7 are skipped; 0, 7, 14 are in range
    assert [e.date for e in events] == [TODAY, _days(7), _days(14)]


def test_unknown_frequency_does_not_recur():
    assert contract_occurrences(TODAY, "biweekly", _days(60)) == [TODAY]
    stale = ContractRecord(
        id="c1", name="One-off", amount=-100,
        next_payment_date=(TODAY - timedelta(days=1)).isoformat(), frequency="fortnightly",
    )
    assert contract_events([stale], TODAY, _days(60)) == []


def test_contract_past_horizon_emits_nothing():
    assert contract_occurrences(_days(40), "monthly", _days(30)) == []


def test_null_contract_amount_counts_as_zero(store):
    store.add_contract("c1", "Free tier", None, _days(1))
    events = expand_events(store.conn, FILE_ID, 10, today=TODAY)
    assert [e.amount for e in events] == [0]


# --- Invoices and expected events ---


def test_pending_invoice_within_horizon(store):
    store.add_invoice("inv1", 500000, _days(15))
    events = expand_events(store.conn, FILE_ID, 30, today=TODAY)
    assert len(events) == 1
    assert events[0].source_type == SourceType.invoice
    assert events[0].amount == 500000
    assert events[0].description == "Invoice"


def test_invoices_outside_window_excluded(store):
    store.add_invoice("late", 100000, _days(200))
    store.add_invoice("past", 100000, _days(-1))
    store.add_invoice("edge", 100000, _days(30))
    events = expand_events(store.conn, FILE_ID, 30, today=TODAY)
    assert [e.source_id for e in events] == ["edge"]


def test_expected_event_description_and_source(store):
    store.add_expected("ee1", 250000, _days(10), source_type="schedule", source_id="src1")
    events = expand_events(store.conn, FILE_ID, 30, today=TODAY)
    assert len(events) == 1
    assert events[0].description == "Expected: schedule"
    assert events[0].source_type == SourceType.schedule
    assert events[0].source_id == "src1"


def test_expected_event_null_amount_defaults_to_zero(store):
    store.add_expected("ee1", None, _days(3), source_type="contract", source_id="c9")
    events = expand_events(store.conn, FILE_ID, 30, today=TODAY)
    assert events[0].amount == 0
    assert events[0].source_type == SourceType.contract
    assert events[0].description == "Expected: contract"


# --- Merging and robustness ---


def test_events_sorted_by_date_with_stable_ties(store):
    store.add_invoice("inv-a", 100, _days(5))
    store.add_invoice("inv-b", 200, _days(2))
    store.add_invoice("inv-c", 300, _days(10))
    store.add_contract("c1", "Same day as inv-b", -50, _days(2), "yearly")
    events = expand_events(store.conn, FILE_ID, 30, today=TODAY)
    assert [e.date for e in events] == sorted(e.date for e in events)
    # Contracts are expanded before invoices, so they win ties
    assert [e.source_id for e in events if e.date == _days(2)] == ["c1", "inv-b"]


def test_no_deduplication_across_sources(store):
    store.add_contract("c1", "Insurance", -12000, _days(4), "yearly")
    store.add_invoice("i1", -12000, _days(4), contract_id="c1")
    events = expand_events(store.conn, FILE_ID, 30, today=TODAY)
    assert len(events) == 2


def test_malformed_date_skips_only_that_record(store, caplog):
    store.add_contract("bad", "Corrupt", -100, "2026-13-45")
    store.add_contract("good", "Fine", -200, _days(1))
    store.add_invoice("bad-inv", 100, "someday")
    with caplog.at_level(logging.WARNING, logger="cashflow_forecast.simulation.expander"):
        events = expand_events(store.conn, FILE_ID, 30, today=TODAY)
    assert [e.source_id for e in events] == ["good"]
    assert "bad" in caplog.text
    assert "bad-inv" in caplog.text


def test_parse_store_date_accepts_date_objects():
    assert parse_store_date(date(2026, 1, 2), "invoice", "i1") == date(2026, 1, 2)
    assert parse_store_date(" 2026-01-02 ", "invoice", "i1") == date(2026, 1, 2)
    assert parse_store_date("02.01.2026", "invoice", "i1") is None


def test_every_event_within_window(store):
    store.add_contract("c1", "Weekly", -100, _days(-30), "weekly")
    store.add_contract("c2", "Monthly", -100, _days(3), "monthly")
    store.add_invoice("i1", 100, _days(45))
    store.add_expected("e1", 100, _days(60))
    horizon = 45
    events = expand_events(store.conn, FILE_ID, horizon, today=TODAY)
    assert events
    assert all(TODAY <= e.date <= _days(horizon) for e in events)


def test_corrupt_row_skips_only_that_record(store, caplog):
    store.add_contract("bad", "Corrupt", "12,50", _days(1))
    store.add_contract("good", "Fine", -200, _days(1))
    store.add_invoice("bad-inv", "a lot", _days(2))
    store.add_expected("bad-exp", "?", _days(3))
    with caplog.at_level(logging.WARNING, logger="cashflow_forecast.db.queries.common"):
        events = expand_events(store.conn, FILE_ID, 30, today=TODAY)
    assert [e.source_id for e in events] == ["good"]
    assert "ContractRecord bad" in caplog.text
    assert "InvoiceRecord bad-inv" in caplog.text
    assert "ExpectedEventRecord bad-exp" in caplog.text


def test_build_records_keeps_valid_rows_in_order():
    rows = [
        {"id": "i1", "amount": 100, "due_date": "2026-11-01"},
        {"id": "i2", "amount": "n/a", "due_date": "2026-11-02"},
        {"id": "i3", "amount": -50, "due_date": None},
    ]
    assert [r.id for r in build_records(InvoiceRecord, rows)] == ["i1", "i3"]


def test_driver_datetime_is_kept_and_truncated_to_date():
    contract = ContractRecord(
        id="c1", name="Rent", amount=-90000,
        next_payment_date=datetime(2026, 10, 20, 9, 30), frequency="monthly",
    )
    assert contract.next_payment_date == datetime(2026, 10, 20, 9, 30)
    events = contract_events([contract], TODAY, _days(40))
    assert [e.date for e in events] == [date(2026, 10, 20), date(2026, 11, 20)]
