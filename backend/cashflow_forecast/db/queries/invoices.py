from cashflow_forecast.db.queries.common import build_records, fetch_dicts
from cashflow_forecast.models.records import InvoiceRecord


def get_pending_invoices(conn, file_id: str) -> list[InvoiceRecord]:
    """Pending invoices with a due date, labelled with their contract's name if linked."""
    query = """
        SELECT i.id, i.amount, i.due_date, c.name AS linked_name
        FROM invoices i
        LEFT JOIN contracts c ON i.contract_id = c.id
        WHERE i.file_id = ? AND i.status = 'pending' AND i.due_date IS NOT NULL
    """
    return build_records(InvoiceRecord, fetch_dicts(conn, query, (file_id,)))
