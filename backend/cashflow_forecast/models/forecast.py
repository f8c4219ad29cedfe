import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys; accepts either spelling on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourceType(str, Enum):
    """Which kind of record a forecast event came from."""
    schedule = "schedule"
    contract = "contract"
    invoice = "invoice"


class ForecastEvent(CamelModel):
    """One dated cash movement. Amount in cents, positive = inflow."""
    model_config = ConfigDict(frozen=True)

    date: dt.date
    amount: int
    description: str
    source_type: SourceType
    source_id: str


class DailyBalance(CamelModel):
    date: dt.date
    balance: int
    events: list[ForecastEvent] = []


class BalancePoint(CamelModel):
    date: dt.date
    balance: int


class MonthlyNet(CamelModel):
    month: str  # YYYY-MM
    net: int


class ForecastResult(CamelModel):
    """Simulated daily balance curve plus summary statistics."""
    daily_curve: list[DailyBalance]
    worst_point: BalancePoint
    safe_to_spend: int
    monthly_net_cashflow: list[MonthlyNet]


class CrunchDay(CamelModel):
    """A day with many payments or a large net movement."""
    date: dt.date
    payment_count: int
    total: int
