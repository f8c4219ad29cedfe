#!/usr/bin/env python3
"""Forecast Report — daily curve and monthly net cashflow as CSV.

Runs the baseline forecast (and optionally a what-if scenario) for one budget
file straight against the store configured in DB_CONN_STRING.

Usage:
    cd backend && python scripts/forecast_report.py --file-id FILE
    cd backend && python scripts/forecast_report.py --file-id FILE --horizon 365 --starting-balance 250000
    cd backend && python scripts/forecast_report.py --file-id FILE --scenario mutations.json

Output lands in ``reports/`` at the project root.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
BACKEND_DIR = Path(__file__).resolve().parent.parent
PROJECT_DIR = BACKEND_DIR.parent
REPORTS_DIR = PROJECT_DIR / "reports"

sys.path.insert(0, str(BACKEND_DIR))

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(message)s", datefmt="%H:%M:%S")
logger = logging.getLogger(__name__)

from cashflow_forecast.db.connection import db_pool
from cashflow_forecast.models.scenario import ScenarioMutation
from cashflow_forecast.services.forecast_service import run_baseline, run_scenario
from cashflow_forecast.services.report_service import daily_curve_frame, monthly_frame
from cashflow_forecast.simulation.crunch_days import find_crunch_days


def _cents(value: int) -> str:
    return f"{value / 100:,.2f}"


def load_mutations(path: str) -> list:
    """Read a JSON array of scenario mutations."""
    with open(path) as f:
        return TypeAdapter(list[ScenarioMutation]).validate_python(json.load(f))


def main():
    parser = argparse.ArgumentParser(description="Export a cashflow forecast to CSV")
    parser.add_argument("--file-id", required=True, help="Budget file to forecast")
    parser.add_argument("--horizon", type=int, default=None, help="Days to simulate (default 180, max 730)")
    parser.add_argument("--starting-balance", type=int, default=0, help="Starting balance in cents")
    parser.add_argument("--scenario", help="JSON file with a list of mutations to compare against")
    parser.add_argument("--out-prefix", default="forecast", help="Output filename prefix")
    args = parser.parse_args()

    db_pool.initialize()
    conn = db_pool.get_connection()
    try:
        if args.scenario:
            mutations = load_mutations(args.scenario)
            response = run_scenario(
                conn, args.file_id, mutations,
                horizon=args.horizon, starting_balance=args.starting_balance,
            )
            result = response.scenario
            logger.info("Scenario worst point: %s (baseline %s)",
                        _cents(response.delta.scenario_worst_point),
                        _cents(response.delta.baseline_worst_point))
            logger.info("Scenario total delta: %s", _cents(response.delta.total_delta))
        else:
            result = run_baseline(
                conn, args.file_id,
                horizon=args.horizon, starting_balance=args.starting_balance,
            )
    finally:
        conn.close()

    REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    daily_path = REPORTS_DIR / f"{args.out_prefix}_daily.csv"
    monthly_path = REPORTS_DIR / f"{args.out_prefix}_monthly.csv"
    daily_curve_frame(result).to_csv(daily_path, index=False)
    monthly_frame(result).to_csv(monthly_path, index=False)

    logger.info("Worst point: %s on %s", _cents(result.worst_point.balance), result.worst_point.date)
    logger.info("Safe to spend (30 days): %s", _cents(result.safe_to_spend))
    for day in find_crunch_days(result):
        logger.info("Crunch day %s: %d payments, net %s", day.date, day.payment_count, _cents(day.total))
    logger.info("Wrote %s and %s", daily_path, monthly_path)


if __name__ == "__main__":
    main()
