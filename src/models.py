import threading
from dataclasses import dataclass
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal
from enum import Enum
from typing import Union

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

# Addition and subtraction under this context never round.
LEDGER_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Deposit:
    client_id: int
    transaction_id: int
    amount: Decimal

    transaction_type = TransactionType.DEPOSIT


@dataclass(frozen=True)
class Withdrawal:
    client_id: int
    transaction_id: int
    amount: Decimal

    transaction_type = TransactionType.WITHDRAWAL


@dataclass(frozen=True)
class Dispute:
    client_id: int
    transaction_id: int

    transaction_type = TransactionType.DISPUTE


@dataclass(frozen=True)
class Resolve:
    client_id: int
    transaction_id: int

    transaction_type = TransactionType.RESOLVE


@dataclass(frozen=True)
class Chargeback:
    client_id: int
    transaction_id: int

    transaction_type = TransactionType.CHARGEBACK


@dataclass(frozen=True)
class Unrecognized:
    """A row whose type label is not one we know. Passed through and ignored."""

    label: str

    transaction_type = TransactionType.UNRECOGNIZED


# Only Deposit and Withdrawal carry an amount.
Transaction = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback, Unrecognized]


@dataclass
class ClientAccount:
    client_id: int
    held: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    locked: bool = False

    @property
    def available(self) -> Decimal:
        return LEDGER_CONTEXT.subtract(self.total, self.held)

    def credit(self, amount: Decimal) -> None:
        self.total = LEDGER_CONTEXT.add(self.total, amount)

    def debit(self, amount: Decimal) -> None:
        self.total = LEDGER_CONTEXT.subtract(self.total, amount)

    def hold(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)

    def remove_held(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)
        self.total = LEDGER_CONTEXT.subtract(self.total, amount)


class ProcessedTransactionKind(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


@dataclass
class ProcessedTransaction:
    """
    A deposit or withdrawal that has been applied to an account.

    Kept separate from the input Transaction types: only the two money-moving
    kinds are ever stored, and a stored record carries the mutable disputed
    flag that incoming rows never have.
    """

    kind: ProcessedTransactionKind
    client_id: int
    amount: Decimal
    disputed: bool = False

    @classmethod
    def deposit(cls, client_id: int, amount: Decimal) -> "ProcessedTransaction":
        return cls(ProcessedTransactionKind.DEPOSIT, client_id, amount)

    @classmethod
    def withdrawal(cls, client_id: int, amount: Decimal) -> "ProcessedTransaction":
        return cls(ProcessedTransactionKind.WITHDRAWAL, client_id, amount)

    @property
    def is_deposit(self) -> bool:
        return self.kind is ProcessedTransactionKind.DEPOSIT


class ProcessingStats:
    """Thread-safe counters for tracking processing statistics."""

    def __init__(self):
        self._lock = threading.Lock()
        self.rows_decoded = 0
        self.rows_skipped = 0
        self.applied = 0
        self.unrecognized = 0

    def record_decoded(self):
        with self._lock:
            self.rows_decoded += 1

    def record_skipped(self):
        with self._lock:
            self.rows_skipped += 1

    def record_applied(self, transaction: Transaction):
        with self._lock:
            self.applied += 1
            if isinstance(transaction, Unrecognized):
                self.unrecognized += 1

    def __repr__(self) -> str:
        return (
            f"ProcessingStats(decoded={self.rows_decoded}, skipped={self.rows_skipped}, "
            f"applied={self.applied}, unrecognized={self.unrecognized})"
        )
