import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def fetch_dicts(conn, query: str, params: tuple) -> list[dict[str, Any]]:
    """Run a query and return rows as column-name keyed dicts."""
    cursor = conn.cursor()
    cursor.execute(query, params)
    rows = cursor.fetchall()
    columns = [desc[0] for desc in cursor.description]
    return [dict(zip(columns, row)) for row in rows]


def build_records(model: type[RecordT], rows: list[dict[str, Any]]) -> list[RecordT]:
    """Validate rows one at a time; a row the model rejects is logged and skipped."""
    records = []
    for row in rows:
        try:
            records.append(model(**row))
        except ValidationError as e:
            logger.warning(
                "Skipping %s %s: %d invalid field(s): %s",
                model.__name__, row.get("id"), e.error_count(),
                ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"]),
            )
    return records
