"""Heavy payment days — days with many events or a large net movement."""
from __future__ import annotations

from typing import Optional

from cashflow_forecast.config import settings
from cashflow_forecast.models.forecast import CrunchDay, ForecastResult


def is_crunch_day(payment_count: int, total: int, min_payments: int, min_amount: int) -> bool:
    return payment_count >= min_payments or abs(total) >= min_amount


def find_crunch_days(
    result: ForecastResult,
    min_payments: Optional[int] = None,
    min_amount: Optional[int] = None,
) -> list[CrunchDay]:
    """Days of a simulated curve that qualify as crunch days, in date order."""
    min_payments = settings.CRUNCH_PAYMENT_COUNT if min_payments is None else min_payments
    min_amount = settings.CRUNCH_AMOUNT_CENTS if min_amount is None else min_amount

    crunch_days = []
    for day in result.daily_curve:
        if not day.events:
            continue
        total = sum(e.amount for e in day.events)
        if is_crunch_day(len(day.events), total, min_payments, min_amount):
            crunch_days.append(CrunchDay(date=day.date, payment_count=len(day.events), total=total))
    return crunch_days
