"""Store rows consumed by the event expander.

Date columns are kept as whatever the driver returns (a ``datetime`` from
pyodbc DATETIME columns, a ``date``, or the raw text) and parsed later by the
expander, so a malformed date skips its own row only. Rows failing validation
outright are dropped by ``db.queries.common.build_records``.
"""
import datetime as dt
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

RawDate = Optional[Union[dt.datetime, dt.date, str]]


class Frequency(str, Enum):
    weekly = "weekly"
    monthly = "monthly"
    quarterly = "quarterly"
    yearly = "yearly"


class StoreRecord(BaseModel):
    # Integer primary keys come back as ints from some drivers
    model_config = ConfigDict(coerce_numbers_to_str=True)


class ContractRecord(StoreRecord):
    id: str
    name: str
    amount: Optional[int] = None
    next_payment_date: RawDate = None
    frequency: Optional[str] = None


class InvoiceRecord(StoreRecord):
    id: str
    amount: int
    due_date: RawDate = None
    linked_name: Optional[str] = None


class ExpectedEventRecord(StoreRecord):
    id: str
    expected_amount: Optional[int] = None
    expected_date: RawDate = None
    source_type: Optional[str] = None
    source_id: Optional[str] = None
