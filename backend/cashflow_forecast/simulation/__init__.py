"""Forecast engine — event expansion, balance simulation, and what-if scenarios."""
from cashflow_forecast.simulation.expander import expand_events
from cashflow_forecast.simulation.engine import simulate_forecast
from cashflow_forecast.simulation.scenarios import apply_mutations, compare_scenarios
from cashflow_forecast.simulation.crunch_days import find_crunch_days

__all__ = [
    "expand_events",
    "simulate_forecast",
    "apply_mutations",
    "compare_scenarios",
    "find_crunch_days",
]
