"""
Decodes CSV rows into Transaction values.

Rows are positional: type, client, tx, amount. The first non-blank row is the
header and is skipped. Rows may have fewer or more columns than the header;
a row that cannot be decoded is logged and dropped, never raised to the caller.
"""

import csv
import logging
import re
from decimal import Decimal
from typing import Callable, Iterable, Iterator, List, Optional, Sequence

from models import (
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
    Chargeback,
    Deposit,
    Dispute,
    Resolve,
    Transaction,
    TransactionType,
    Unrecognized,
    Withdrawal,
)

logger = logging.getLogger(__name__)

TYPE_FIELD = 0
CLIENT_FIELD = 1
TX_FIELD = 2
AMOUNT_FIELD = 3

# ASCII digits only. Python's int() and Decimal() also take underscores and
# non-ASCII digits.
ID_PATTERN = re.compile(r"\+?[0-9]+")
AMOUNT_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


class TransactionDecodeError(ValueError):
    """Raised when a CSV row cannot be turned into a Transaction."""


def parse_row(row: Sequence[str]) -> Transaction:
    """Decode one CSV row. Raises TransactionDecodeError if the row is malformed."""
    fields = [field.strip() for field in row]
    if not fields or not fields[TYPE_FIELD]:
        raise TransactionDecodeError("missing transaction type")

    label = fields[TYPE_FIELD].lower()
    try:
        transaction_type = TransactionType(label)
    except ValueError:
        transaction_type = TransactionType.UNRECOGNIZED
    if transaction_type is TransactionType.UNRECOGNIZED:
        return Unrecognized(label)

    client_id = _parse_id(fields, CLIENT_FIELD, "client", MAX_CLIENT_ID)
    transaction_id = _parse_id(fields, TX_FIELD, "tx", MAX_TRANSACTION_ID)

    match transaction_type:
        case TransactionType.DEPOSIT:
            return Deposit(client_id, transaction_id, _parse_amount(fields))
        case TransactionType.WITHDRAWAL:
            return Withdrawal(client_id, transaction_id, _parse_amount(fields))
        case TransactionType.DISPUTE:
            return Dispute(client_id, transaction_id)
        case TransactionType.RESOLVE:
            return Resolve(client_id, transaction_id)
        case TransactionType.CHARGEBACK:
            return Chargeback(client_id, transaction_id)

    raise TransactionDecodeError(f"unhandled transaction type {label!r}")


def _field(fields: List[str], index: int, name: str) -> str:
    if index >= len(fields) or not fields[index]:
        raise TransactionDecodeError(f"missing {name}")
    return fields[index]


def _parse_id(fields: List[str], index: int, name: str, maximum: int) -> int:
    raw = _field(fields, index, name)
    if not ID_PATTERN.fullmatch(raw):
        raise TransactionDecodeError(f"invalid {name} {raw!r}")
    value = int(raw)
    if value > maximum:
        raise TransactionDecodeError(f"{name} {value} out of range")
    return value


def _parse_amount(fields: List[str]) -> Decimal:
    raw = _field(fields, AMOUNT_FIELD, "amount")
    if not AMOUNT_PATTERN.fullmatch(raw):
        raise TransactionDecodeError(f"invalid amount {raw!r}")
    return Decimal(raw)


def read_transactions(
    lines: Iterable[str],
    on_skip: Optional[Callable[[int], None]] = None,
) -> Iterator[Transaction]:
    """
    Yield a Transaction for every decodable row of CSV text, in input order.

    Args:
        lines: CSV text, e.g. an open file.
        on_skip: Called with the line number of each row that failed to decode.
    """
    reader = csv.reader(lines)
    header_seen = False
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            # The reader resets after an error and carries on with the next line.
            logger.warning(f"Skipping row {reader.line_num}: {e}")
            if on_skip is not None:
                on_skip(reader.line_num)
            continue

        if not any(field.strip() for field in row):
            continue
        if not header_seen:
            header_seen = True
            continue

        try:
            transaction = parse_row(row)
        except TransactionDecodeError as e:
            logger.warning(f"Skipping row {reader.line_num} {row}: {e}")
            if on_skip is not None:
                on_skip(reader.line_num)
            continue
        yield transaction
