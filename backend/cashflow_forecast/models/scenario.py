import datetime as dt
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, field_validator

from cashflow_forecast.models.forecast import CamelModel, ForecastResult


class CancelContract(CamelModel):
    """Remove every event generated by a contract."""
    type: Literal["cancel_contract"] = "cancel_contract"
    contract_id: str


class ModifyAmount(CamelModel):
    """Overwrite the amount of every event generated by a contract."""
    type: Literal["modify_amount"] = "modify_amount"
    contract_id: str
    new_amount: int


class AddEvent(CamelModel):
    """Inject a one-off hypothetical event."""
    type: Literal["add_event"] = "add_event"
    date: dt.date
    amount: int
    description: str


class DelayInvoice(CamelModel):
    """Move a pending invoice to another due date."""
    type: Literal["delay_invoice"] = "delay_invoice"
    invoice_id: str
    new_date: dt.date


ScenarioMutation = Annotated[
    Union[CancelContract, ModifyAmount, AddEvent, DelayInvoice],
    Field(discriminator="type"),
]


class MonthlyDelta(CamelModel):
    month: str  # YYYY-MM
    delta: int


class ScenarioDelta(CamelModel):
    """Impact of a scenario relative to the baseline, in cents."""
    baseline_worst_point: int
    scenario_worst_point: int
    total_delta: int
    monthly_delta: list[MonthlyDelta]


class ScenarioRequest(CamelModel):
    """Request body for running a what-if scenario."""
    file_id: str = Field(min_length=1)
    horizon: Optional[int] = None
    starting_balance: int = 0
    mutations: Optional[list[ScenarioMutation]] = None

    @field_validator("starting_balance", mode="before")
    @classmethod
    def null_balance_is_zero(cls, v):
        return 0 if v is None else v


class ScenarioResponse(CamelModel):
    baseline: ForecastResult
    scenario: ForecastResult
    delta: ScenarioDelta
