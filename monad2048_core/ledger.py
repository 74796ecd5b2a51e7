"""
Boundary to the external ledger that records games.

The session never talks to the ledger directly. A LedgerForwarder is attached
as a session listener and hands each event to a LedgerClient on a background
thread, so a slow or failing ledger never blocks or rolls back local play.
"""
from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, List, Optional, Protocol, Tuple

from .board import Board
from .direction import Direction

logger = logging.getLogger(__name__)


class LedgerClient(Protocol):
    def start_new_game(self) -> Any: ...

    def submit_move(self, direction: str) -> Any: ...

    def end_game(self, score: int) -> Any: ...


class LoggingLedgerClient:
    """Ledger client that only logs calls and keeps them in an in-memory journal."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.journal: List[Tuple[str, Any]] = []

    def _record(self, call: str, arg: Any = None) -> None:
        with self._lock:
            self.journal.append((call, arg))
        logger.info('ledger %s %s', call, '' if arg is None else arg)

    def start_new_game(self) -> None:
        self._record('start_new_game')

    def submit_move(self, direction: str) -> None:
        self._record('submit_move', direction)

    def end_game(self, score: int) -> None:
        self._record('end_game', score)


_STOP = object()


class LedgerForwarder:
    """
    Session listener that forwards new games, committed moves and game-over
    events to a LedgerClient, fire-and-forget, on a daemon worker thread.
    """

    def __init__(self, client: LedgerClient) -> None:
        self.client = client
        self.failures = 0
        self.delivered = 0
        self._queue: 'queue.Queue[Any]' = queue.Queue()
        self._closed = False
        self._worker = threading.Thread(target=self._run, name='ledger-forwarder', daemon=True)
        self._worker.start()

    # Session listener hooks

    def on_new_game(self, board: Board) -> None:
        self._submit('start_new_game', self.client.start_new_game)

    def on_move(self, direction: Direction, outcome: Any) -> None:
        if not outcome.committed:
            return
        self._submit('submit_move', self.client.submit_move, direction.value)

    def on_game_over(self, score: int) -> None:
        self._submit('end_game', self.client.end_game, score)

    def _submit(self, name: str, fn: Callable[..., Any], *args: Any) -> None:
        if self._closed:
            logger.warning('Ledger forwarder closed; dropping %s', name)
            return
        self._queue.put((name, fn, args))

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                name, fn, args = item
                try:
                    fn(*args)
                    self.delivered += 1
                    logger.debug('Delivered %s%r to ledger', name, args)
                except Exception as e:
                    self.failures += 1
                    logger.warning('Ledger call %s failed: %s', name, e)
            finally:
                self._queue.task_done()

    def flush(self) -> None:
        """Blocks until every queued call has been attempted."""
        self._queue.join()

    def close(self, timeout: Optional[float] = None) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(_STOP)
        self._worker.join(timeout)
