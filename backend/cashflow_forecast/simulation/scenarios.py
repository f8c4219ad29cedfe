"""Scenario engine — what-if mutations over an event list, and result diffing.

Mutations are replayed in order over a copy of the baseline events; the
comparison reads only the worst points and monthly net cashflow of two
simulation results.
"""
from __future__ import annotations

import uuid
from functools import reduce
from typing import Callable, Sequence

from cashflow_forecast.models.forecast import ForecastEvent, ForecastResult, SourceType
from cashflow_forecast.models.scenario import (
    AddEvent,
    CancelContract,
    DelayInvoice,
    ModifyAmount,
    MonthlyDelta,
    ScenarioDelta,
    ScenarioMutation,
)


def _is_contract(event: ForecastEvent, contract_id: str) -> bool:
    return event.source_type == SourceType.contract and event.source_id == contract_id


def _is_invoice(event: ForecastEvent, invoice_id: str) -> bool:
    return event.source_type == SourceType.invoice and event.source_id == invoice_id


def _cancel_contract(events: list[ForecastEvent], mut: CancelContract) -> list[ForecastEvent]:
    return [e for e in events if not _is_contract(e, mut.contract_id)]


def _modify_amount(events: list[ForecastEvent], mut: ModifyAmount) -> list[ForecastEvent]:
    return [
        e.model_copy(update={"amount": mut.new_amount}) if _is_contract(e, mut.contract_id) else e
        for e in events
    ]


def _add_event(events: list[ForecastEvent], mut: AddEvent) -> list[ForecastEvent]:
    synthetic = ForecastEvent(
        date=mut.date,
        amount=mut.amount,
        description=mut.description,
        source_type=SourceType.schedule,
        source_id=f"scenario-{uuid.uuid4().hex}",
    )
    return [*events, synthetic]


def _delay_invoice(events: list[ForecastEvent], mut: DelayInvoice) -> list[ForecastEvent]:
    return [
        e.model_copy(update={"date": mut.new_date}) if _is_invoice(e, mut.invoice_id) else e
        for e in events
    ]


_HANDLERS: dict[type, Callable[[list[ForecastEvent], ScenarioMutation], list[ForecastEvent]]] = {
    CancelContract: _cancel_contract,
    ModifyAmount: _modify_amount,
    AddEvent: _add_event,
    DelayInvoice: _delay_invoice,
}


def apply_mutation(events: list[ForecastEvent], mutation: ScenarioMutation) -> list[ForecastEvent]:
    """Apply a single mutation, returning a new list."""
    return _HANDLERS[type(mutation)](events, mutation)


def apply_mutations(
    events: Sequence[ForecastEvent], mutations: Sequence[ScenarioMutation],
) -> list[ForecastEvent]:
    """Replay mutations in order over a copy of events, then re-sort by date.

    The input list and its events are never modified; events are frozen and
    every rewrite produces a copy.
    """
    result = reduce(apply_mutation, mutations, list(events))
    return sorted(result, key=lambda e: e.date)


def compare_scenarios(baseline: ForecastResult, scenario: ForecastResult) -> ScenarioDelta:
    """Per-month and total cashflow difference of scenario minus baseline."""
    base_monthly = {m.month: m.net for m in baseline.monthly_net_cashflow}
    scenario_monthly = {m.month: m.net for m in scenario.monthly_net_cashflow}

    monthly_delta = [
        MonthlyDelta(month=month, delta=scenario_monthly.get(month, 0) - base_monthly.get(month, 0))
        for month in sorted(base_monthly.keys() | scenario_monthly.keys())
    ]

    return ScenarioDelta(
        baseline_worst_point=baseline.worst_point.balance,
        scenario_worst_point=scenario.worst_point.balance,
        total_delta=sum(m.delta for m in monthly_delta),
        monthly_delta=monthly_delta,
    )
