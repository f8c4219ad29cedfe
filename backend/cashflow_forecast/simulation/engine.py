"""Balance simulator.

Walks day by day from today through today + horizon_days, applying each
day's net event total to a running balance. Produces the daily curve plus
worst point, safe-to-spend and monthly net cashflow.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional

from cashflow_forecast.models.forecast import (
    BalancePoint,
    DailyBalance,
    ForecastEvent,
    ForecastResult,
    MonthlyNet,
)

SAFE_TO_SPEND_WINDOW_DAYS = 30


def group_by_date(events: Iterable[ForecastEvent]) -> dict[date, list[ForecastEvent]]:
    by_date: dict[date, list[ForecastEvent]] = defaultdict(list)
    for event in events:
        by_date[event.date].append(event)
    return by_date


def simulate_forecast(
    starting_balance: int,
    events: Iterable[ForecastEvent],
    horizon_days: int,
    today: Optional[date] = None,
) -> ForecastResult:
    """Run the day-by-day balance simulation.

    Events dated outside [today, today + horizon_days] never land on a
    simulated day and are ignored.
    """
    if horizon_days < 0:
        raise ValueError(f"horizon_days must be >= 0, got {horizon_days}")
    today = today or date.today()
    events_by_date = group_by_date(events)

    daily_curve: list[DailyBalance] = []
    balance = starting_balance
    worst_point = BalancePoint(date=today, balance=balance)
    min_balance_30 = balance
    monthly: dict[str, int] = defaultdict(int)

    for i in range(horizon_days + 1):
        current = today + timedelta(days=i)
        day_events = events_by_date.get(current, [])
        day_net = sum(e.amount for e in day_events)

        balance += day_net
        daily_curve.append(DailyBalance(date=current, balance=balance, events=day_events))

        # Strict comparison: the earliest date wins on ties
        if balance < worst_point.balance:
            worst_point = BalancePoint(date=current, balance=balance)
        if i <= SAFE_TO_SPEND_WINDOW_DAYS:
            min_balance_30 = min(min_balance_30, balance)

        monthly[current.strftime("%Y-%m")] += day_net

    return ForecastResult(
        daily_curve=daily_curve,
        worst_point=worst_point,
        safe_to_spend=max(0, min_balance_30),
        monthly_net_cashflow=[
            MonthlyNet(month=month, net=net) for month, net in sorted(monthly.items())
        ],
    )
