"""Tabular views of a forecast for CSV export."""
from __future__ import annotations

import pandas as pd

from cashflow_forecast.models.forecast import ForecastResult

DAILY_COLUMNS = ["date", "balance", "day_net", "event_count", "descriptions"]


def daily_curve_frame(result: ForecastResult) -> pd.DataFrame:
    """One row per simulated day; amounts stay in cents."""
    rows = [
        {
            "date": day.date.isoformat(),
            "balance": day.balance,
            "day_net": sum(e.amount for e in day.events),
            "event_count": len(day.events),
            "descriptions": "; ".join(e.description for e in day.events),
        }
        for day in result.daily_curve
    ]
    return pd.DataFrame(rows, columns=DAILY_COLUMNS)


def monthly_frame(result: ForecastResult) -> pd.DataFrame:
    """Monthly net cashflow with the closing balance of each month."""
    daily = daily_curve_frame(result)
    daily["month"] = daily["date"].str.slice(0, 7)
    closing = daily.groupby("month", sort=True)["balance"].last()

    nets = pd.Series(
        {m.month: m.net for m in result.monthly_net_cashflow}, name="net", dtype="int64",
    )
    frame = pd.DataFrame({"net": nets, "closing_balance": closing})
    frame.index.name = "month"
    return frame.reset_index()
