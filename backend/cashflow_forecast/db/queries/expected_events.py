from cashflow_forecast.db.queries.common import build_records, fetch_dicts
from cashflow_forecast.models.records import ExpectedEventRecord


def get_pending_expected_events(conn, file_id: str) -> list[ExpectedEventRecord]:
    query = """
        SELECT id, expected_amount, expected_date, source_type, source_id
        FROM expected_events
        WHERE file_id = ? AND status = 'pending'
    """
    return build_records(ExpectedEventRecord, fetch_dicts(conn, query, (file_id,)))
