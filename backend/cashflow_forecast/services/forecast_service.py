"""Forecast orchestration service.

Wires the expander, simulator and scenario engine together for one budget
file per call. Every call recomputes from the store; nothing is cached.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from cashflow_forecast.config import settings
from cashflow_forecast.models.forecast import CrunchDay, ForecastResult
from cashflow_forecast.models.scenario import ScenarioMutation, ScenarioResponse
from cashflow_forecast.simulation.crunch_days import find_crunch_days
from cashflow_forecast.simulation.engine import simulate_forecast
from cashflow_forecast.simulation.expander import expand_events
from cashflow_forecast.simulation.scenarios import apply_mutations, compare_scenarios

logger = logging.getLogger(__name__)


def clamp_horizon(horizon: Optional[int]) -> int:
    """Missing or zero horizon falls back to the default; then clamp to [1, max]."""
    if not horizon:
        horizon = settings.DEFAULT_HORIZON_DAYS
    return max(1, min(horizon, settings.MAX_HORIZON_DAYS))


def run_baseline(
    conn,
    file_id: str,
    horizon: Optional[int] = None,
    starting_balance: int = 0,
    today: Optional[date] = None,
) -> ForecastResult:
    horizon_days = clamp_horizon(horizon)
    today = today or date.today()
    events = expand_events(conn, file_id, horizon_days, today)
    result = simulate_forecast(starting_balance, events, horizon_days, today)
    logger.info(
        "Baseline for file %s: %d days, %d events, worst %d on %s",
        file_id, horizon_days, len(events),
        result.worst_point.balance, result.worst_point.date,
    )
    return result


def run_scenario(
    conn,
    file_id: str,
    mutations: Sequence[ScenarioMutation],
    horizon: Optional[int] = None,
    starting_balance: int = 0,
    today: Optional[date] = None,
) -> ScenarioResponse:
    """Simulate the baseline and the mutated timeline, and diff them."""
    horizon_days = clamp_horizon(horizon)
    today = today or date.today()
    baseline_events = expand_events(conn, file_id, horizon_days, today)
    baseline = simulate_forecast(starting_balance, baseline_events, horizon_days, today)

    scenario_events = apply_mutations(baseline_events, mutations)
    scenario = simulate_forecast(starting_balance, scenario_events, horizon_days, today)

    delta = compare_scenarios(baseline, scenario)
    logger.info(
        "Scenario for file %s: %d mutations, total delta %d",
        file_id, len(mutations), delta.total_delta,
    )
    return ScenarioResponse(baseline=baseline, scenario=scenario, delta=delta)


def run_crunch_days(
    conn,
    file_id: str,
    horizon: Optional[int] = None,
    starting_balance: int = 0,
    today: Optional[date] = None,
) -> list[CrunchDay]:
    result = run_baseline(conn, file_id, horizon, starting_balance, today)
    return find_crunch_days(result)
