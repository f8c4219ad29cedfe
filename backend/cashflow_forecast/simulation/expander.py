"""Event expander — flattens stored obligations into dated forecast events.

Reads recurring contracts, pending invoices and pending expected events for a
budget file and turns them into a single date-ordered list of ForecastEvent,
bounded to [today, today + horizon_days].
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from cashflow_forecast.db.queries.contracts import get_active_contracts
from cashflow_forecast.db.queries.expected_events import get_pending_expected_events
from cashflow_forecast.db.queries.invoices import get_pending_invoices
from cashflow_forecast.models.forecast import ForecastEvent, SourceType
from cashflow_forecast.models.records import (
    ContractRecord,
    ExpectedEventRecord,
    Frequency,
    InvoiceRecord,
)

logger = logging.getLogger(__name__)

_FREQUENCY_STEPS: dict[str, relativedelta] = {
    Frequency.weekly.value: relativedelta(weeks=1),
    Frequency.monthly.value: relativedelta(months=1),
    Frequency.quarterly.value: relativedelta(months=3),
    Frequency.yearly.value: relativedelta(years=1),
}


def parse_store_date(raw, kind: str, record_id: str) -> Optional[date]:
    """Coerce a stored date value, or log and return None if it is unusable."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw).strip())
    except ValueError:
        logger.warning("Skipping %s %s: unparseable date %r", kind, record_id, raw)
        return None


def contract_occurrences(anchor: date, frequency: Optional[str], end: date) -> list[date]:
    """All payment dates from anchor up to end inclusive.

    Occurrence k is computed from the anchor (anchor + k * step), so month
    arithmetic clamps to the month's last day without drifting: a contract
    anchored on Jan 31 pays on Feb 28/29, Mar 31, Apr 30, ...
    An unknown frequency does not recur; only the anchor is returned.
    """
    if anchor > end:
        return []
    step = _FREQUENCY_STEPS.get(frequency or "")
    if step is None:
        return [anchor]

    dates = []
    k = 0
    current = anchor
    while current <= end:
        dates.append(current)
        k += 1
        current = anchor + step * k
    return dates


def contract_events(
    contracts: Iterable[ContractRecord], today: date, end: date,
) -> list[ForecastEvent]:
    events = []
    for contract in contracts:
        if contract.next_payment_date is None:
            continue
        anchor = parse_store_date(contract.next_payment_date, "contract", contract.id)
        if anchor is None:
            continue
        for occurrence in contract_occurrences(anchor, contract.frequency, end):
            # Stale next-payment dates catch up silently
            if occurrence < today:
                continue
            events.append(ForecastEvent(
                date=occurrence,
                amount=contract.amount or 0,
                description=contract.name,
                source_type=SourceType.contract,
                source_id=contract.id,
            ))
    return events


def invoice_events(
    invoices: Iterable[InvoiceRecord], today: date, end: date,
) -> list[ForecastEvent]:
    events = []
    for invoice in invoices:
        if invoice.due_date is None:
            continue
        due = parse_store_date(invoice.due_date, "invoice", invoice.id)
        if due is None or not today <= due <= end:
            continue
        events.append(ForecastEvent(
            date=due,
            amount=invoice.amount,
            description=invoice.linked_name or "Invoice",
            source_type=SourceType.invoice,
            source_id=invoice.id,
        ))
    return events


def expected_events(
    rows: Iterable[ExpectedEventRecord], today: date, end: date,
) -> list[ForecastEvent]:
    events = []
    for row in rows:
        if row.expected_date is None:
            continue
        expected = parse_store_date(row.expected_date, "expected event", row.id)
        if expected is None or not today <= expected <= end:
            continue
        try:
            source_type = SourceType(row.source_type or SourceType.schedule.value)
        except ValueError:
            logger.warning("Skipping expected event %s: unknown source type %r", row.id, row.source_type)
            continue
        events.append(ForecastEvent(
            date=expected,
            amount=row.expected_amount or 0,
            description=f"Expected: {source_type.value}",
            source_type=source_type,
            source_id=row.source_id or row.id,
        ))
    return events


def merge_events(*sources: Iterable[ForecastEvent]) -> list[ForecastEvent]:
    """Concatenate event lists and stable-sort by date. No deduplication."""
    merged = [event for source in sources for event in source]
    merged.sort(key=lambda e: e.date)
    return merged


def expand_events(
    conn, file_id: str, horizon_days: int, today: Optional[date] = None,
) -> list[ForecastEvent]:
    """Read a budget file's obligations and expand them into forecast events."""
    today = today or date.today()
    end = today + timedelta(days=horizon_days)

    contracts = get_active_contracts(conn, file_id)
    invoices = get_pending_invoices(conn, file_id)
    pending = get_pending_expected_events(conn, file_id)

    events = merge_events(
        contract_events(contracts, today, end),
        invoice_events(invoices, today, end),
        expected_events(pending, today, end),
    )
    logger.debug(
        "Expanded %d events for file %s (%d contracts, %d invoices, %d expected) through %s",
        len(events), file_id, len(contracts), len(invoices), len(pending), end,
    )
    return events
