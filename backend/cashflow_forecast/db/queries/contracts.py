from cashflow_forecast.db.queries.common import build_records, fetch_dicts
from cashflow_forecast.models.records import ContractRecord


def get_active_contracts(conn, file_id: str) -> list[ContractRecord]:
    """Active contracts of a budget file that have a next payment date."""
    query = """
        SELECT id, name, amount, next_payment_date, frequency
        FROM contracts
        WHERE file_id = ? AND status = 'active' AND next_payment_date IS NOT NULL
    """
    return build_records(ContractRecord, fetch_dicts(conn, query, (file_id,)))
