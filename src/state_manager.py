from typing import Dict, Optional

from models import ClientAccount, ProcessedTransaction


class StateManager:
    """
    Owns the ledger: client accounts and the processed transaction history
    used for dispute lookups.

    Not thread-safe. Exactly one TransactionProcessor writes to it.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        # Keyed by transaction id, which is unique across all clients.
        self._transactions: Dict[int, ProcessedTransaction] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        account = self._accounts.get(client_id)
        if account is None:
            account = self._accounts[client_id] = ClientAccount(client_id=client_id)
        return account

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def store_transaction(self, transaction_id: int, record: ProcessedTransaction) -> None:
        """Store a processed deposit or withdrawal, replacing any record with the same id."""
        self._transactions[transaction_id] = record

    def get_transaction(self, transaction_id: int) -> Optional[ProcessedTransaction]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def transaction_count(self) -> int:
        return len(self._transactions)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
