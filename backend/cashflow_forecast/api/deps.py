from collections.abc import Generator
from datetime import date

from cashflow_forecast.db.connection import db_pool


def get_db() -> Generator:
    """FastAPI dependency yielding a per-request store connection, closed afterwards."""
    conn = db_pool.get_connection()
    try:
        yield conn
    finally:
        conn.close()


def get_today() -> date:
    """The day a forecast starts from. Overridden in tests to pin the calendar."""
    return date.today()
