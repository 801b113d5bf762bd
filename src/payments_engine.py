import logging
import threading
from typing import Dict, Iterable, Optional

from config import EngineConfig
from message_queue import InMemoryQueue
from models import ClientAccount, ProcessingStats, Transaction
from state_manager import StateManager
from summary import render_summary
from transaction_decoder import read_transactions
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds decoded transactions through the ledger state machine.

    Decoding can run on a publisher thread, but transactions are always
    applied by a single consumer in input order: disputes, resolves and
    chargebacks depend on what came before them.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def apply(self, transaction: Transaction) -> None:
        """Apply one transaction to the ledger. Never raises for bad references."""
        self._processor.process_transaction(transaction)
        self._stats.record_applied(transaction)

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        # Opened here so a missing file fails before any worker starts.
        with open(filepath, "r", newline="", encoding="utf-8", errors="surrogateescape") as f:
            self.process_stream(f)
        return self.get_accounts()

    def process_stream(self, lines: Iterable[str]) -> None:
        """Decode CSV text and apply every transaction in order."""
        logger.info("Starting processing")

        if self._config.decode_in_background:
            self._process_with_publisher(lines)
        else:
            for transaction in self._decode(lines):
                self.apply(transaction)

        logger.info(
            f"Processing complete. Decoded: {self._stats.rows_decoded}, "
            f"Skipped: {self._stats.rows_skipped}, "
            f"Applied: {self._stats.applied}, "
            f"Unrecognized: {self._stats.unrecognized}"
        )

    def get_accounts(self) -> Dict[int, ClientAccount]:
        return self._state.get_all_accounts()

    def serialize_to_csv(self) -> str:
        """Render the final per-client summary."""
        return render_summary(self._state.get_all_accounts())

    def _decode(self, lines: Iterable[str]) -> Iterable[Transaction]:
        for transaction in read_transactions(lines, on_skip=lambda line_num: self._stats.record_skipped()):
            self._stats.record_decoded()
            yield transaction

    def _process_with_publisher(self, lines: Iterable[str]) -> None:
        queue = InMemoryQueue(maxsize=self._config.queue_maxsize, timeout=self._config.queue_timeout)
        errors = []

        def publish() -> None:
            try:
                for transaction in self._decode(lines):
                    queue.publish_message(transaction)
            except Exception as e:
                errors.append(e)
            finally:
                queue.shutdown()

        publisher_thread = threading.Thread(target=publish, name="transaction-decoder", daemon=True)
        publisher_thread.start()

        while True:
            transaction = queue.consume_message()
            if transaction is None:
                if queue.is_shutdown() and queue.is_empty():
                    break
                continue
            self.apply(transaction)

        publisher_thread.join()

        if errors:
            raise errors[0]
