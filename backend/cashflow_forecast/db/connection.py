from __future__ import annotations

import logging
import time

try:
    import pyodbc
except ImportError:
    pyodbc = None

from cashflow_forecast.config import settings

logger = logging.getLogger(__name__)

FORECAST_TABLES = ("contracts", "invoices", "expected_events")


class DatabasePool:
    """Hands out read-only pyodbc connections to the obligations store."""

    def __init__(self):
        self._conn_string: str = ""
        self._initialized: bool = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self, conn_string: str | None = None):
        self._conn_string = conn_string if conn_string is not None else settings.DB_CONN_STRING
        if self._conn_string:
            logger.info("Database pool initialized")
            self._initialized = True
        else:
            logger.warning("DB_CONN_STRING is empty; forecast endpoints will return 500")

    def get_connection(self, retries: int = 3, delay: float = 1.0):
        """Open a read-only connection to the obligations store.

        The forecast only ever reads contracts, invoices and expected events,
        so the ODBC session is opened with ``readonly=True``. Driver errors are
        retried ``retries`` times, ``delay`` seconds apart.
        """
        if pyodbc is None:
            raise RuntimeError("Cannot reach the obligations store: pyodbc is not installed")
        if not self._initialized or not self._conn_string:
            raise RuntimeError("Obligations store not configured; set DB_CONN_STRING")

        last_error = None
        for attempt in range(1, retries + 1):
            try:
                return pyodbc.connect(self._conn_string, timeout=30, readonly=True)
            except pyodbc.Error as e:
                last_error = e
                logger.warning("Obligations store unreachable (attempt %d/%d): %s", attempt, retries, e)
                if attempt < retries:
                    time.sleep(delay)

        raise RuntimeError(f"Obligations store unreachable after {retries} attempts: {last_error}")

    def test_connection(self) -> dict:
        """Health check: row counts of the tables the forecast reads."""
        if pyodbc is None:
            return {"status": "unavailable", "message": "pyodbc not installed"}
        if not self._initialized or not self._conn_string:
            return {"status": "not_configured", "message": "DB_CONN_STRING is empty"}
        try:
            conn = self.get_connection(retries=1)
            try:
                cursor = conn.cursor()
                tables = {}
                for table in FORECAST_TABLES:
                    cursor.execute(f"SELECT COUNT(*) FROM {table}")
                    tables[table] = cursor.fetchone()[0]
            finally:
                conn.close()
            return {"status": "connected", "tables": tables}
        except Exception as e:
            return {"status": "error", "message": str(e)}

    def close(self):
        logger.info("Database pool closed")
        self._initialized = False


db_pool = DatabasePool()
