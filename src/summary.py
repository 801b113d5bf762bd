import csv
import io
from decimal import Decimal
from typing import Dict, List

from models import LEDGER_CONTEXT, ClientAccount

HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Format decimal as plain text, removing trailing zeros. No rounding."""
    normalized = value.normalize(LEDGER_CONTEXT)
    if normalized.is_zero():
        return "0"
    return f"{normalized:f}"


def summary_rows(accounts: Dict[int, ClientAccount]) -> List[List[str]]:
    """One row per client, ordered by client id."""
    rows = []
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        rows.append([
            str(client_id),
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])
    return rows


def render_summary(accounts: Dict[int, ClientAccount]) -> str:
    """Render the final account table as CSV text, header included."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADER)
    writer.writerows(summary_rows(accounts))
    return buffer.getvalue()
