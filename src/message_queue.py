import threading
from queue import Queue, Empty
from typing import Optional

from models import Transaction


class InMemoryQueue:
    """
    Thread-safe FIFO between the decoding thread and the consumer that
    applies transactions. All synchronization is internal - callers never need to lock.
    """

    DEFAULT_TIMEOUT = 0.1

    def __init__(self, maxsize: int = 0, timeout: float = DEFAULT_TIMEOUT):
        self._main_queue: Queue[Transaction] = Queue(maxsize=maxsize)
        self._timeout = timeout
        self._shutdown_event = threading.Event()

    def publish_message(self, message: Transaction) -> None:
        """Add message to main queue, blocking while the queue is full. Thread-safe."""
        self._main_queue.put(message)

    def consume_message(self) -> Optional[Transaction]:
        """
        Get next message from main queue.
        Returns None if queue is empty after timeout.
        Thread-safe.
        """
        try:
            return self._main_queue.get(timeout=self._timeout)
        except Empty:
            return None

    def is_empty(self) -> bool:
        """Check if main queue is empty."""
        return self._main_queue.empty()

    def shutdown(self) -> None:
        """Signal no more messages will be published."""
        self._shutdown_event.set()

    def is_shutdown(self) -> bool:
        """Check if shutdown has been signaled."""
        return self._shutdown_event.is_set()
