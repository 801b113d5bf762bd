import logging
from typing import Optional

from models import (
    Chargeback,
    ClientAccount,
    Deposit,
    Dispute,
    ProcessedTransaction,
    Resolve,
    Transaction,
    Unrecognized,
    Withdrawal,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to the ledger, one at a time, in the order given.

    Transactions come from untrusted input. A reference to an unknown
    transaction, a client id that does not own the referenced transaction,
    a chargeback without an open dispute or a deposit/withdrawal on a locked
    account is ignored. Nothing is raised or returned for these; ignoring
    them is a normal outcome of processing.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> None:
        """Apply a single transaction to the ledger."""
        match transaction:
            case Deposit():
                self._handle_deposit(transaction)
            case Withdrawal():
                self._handle_withdrawal(transaction)
            case Dispute():
                self._handle_dispute(transaction)
            case Resolve():
                self._handle_resolve(transaction)
            case Chargeback():
                self._handle_chargeback(transaction)
            case Unrecognized():
                logger.debug(f"Ignoring unrecognized transaction type {transaction.label!r}")

    def _handle_deposit(self, transaction: Deposit) -> None:
        account = self._state.get_or_create_account(transaction.client_id)
        if account.locked:
            logger.debug(f"Deposit tx {transaction.transaction_id}: client {account.client_id} is locked, ignoring")
            return

        account.credit(transaction.amount)
        self._state.store_transaction(
            transaction.transaction_id,
            ProcessedTransaction.deposit(transaction.client_id, transaction.amount),
        )

    def _handle_withdrawal(self, transaction: Withdrawal) -> None:
        account = self._state.get_or_create_account(transaction.client_id)
        if account.locked:
            logger.debug(f"Withdrawal tx {transaction.transaction_id}: client {account.client_id} is locked, ignoring")
            return

        # Available funds are not checked; total may go negative.
        account.debit(transaction.amount)
        self._state.store_transaction(
            transaction.transaction_id,
            ProcessedTransaction.withdrawal(transaction.client_id, transaction.amount),
        )

    def _handle_dispute(self, transaction: Dispute) -> None:
        original = self._find_original("Dispute", transaction)
        if original is None:
            return

        original.disputed = True

        # A withdrawal's funds have already left the account, so there is
        # nothing to hold. It is only reversed if charged back.
        if original.is_deposit:
            self._account_for(transaction).hold(original.amount)

    def _handle_resolve(self, transaction: Resolve) -> None:
        original = self._find_original("Resolve", transaction)
        if original is None:
            return

        original.disputed = False
        if original.is_deposit:
            self._account_for(transaction).release_hold(original.amount)

    def _handle_chargeback(self, transaction: Chargeback) -> None:
        original = self._find_original("Chargeback", transaction)
        if original is None:
            return

        if not original.disputed:
            logger.debug(f"Chargeback for tx {transaction.transaction_id}: transaction is not disputed, ignoring")
            return

        account = self._account_for(transaction)
        account.locked = True
        if original.is_deposit:
            account.remove_held(original.amount)
        else:
            account.credit(original.amount)

    def _find_original(self, label: str, transaction: Transaction) -> Optional[ProcessedTransaction]:
        """Look up the referenced transaction, or None if the reference is not valid for this client."""
        original = self._state.get_transaction(transaction.transaction_id)

        if original is None:
            logger.debug(f"{label} for tx {transaction.transaction_id}: transaction not found, ignoring")
            return None

        if original.client_id != transaction.client_id:
            logger.debug(
                f"{label} for tx {transaction.transaction_id}: client mismatch "
                f"(expected {original.client_id}, got {transaction.client_id}), ignoring"
            )
            return None

        return original

    def _account_for(self, transaction: Transaction) -> ClientAccount:
        return self._state.get_or_create_account(transaction.client_id)
