"""Main-context dispatcher.

Provider callbacks and key presses arrive on background threads; everything
that touches the display is queued here and run by the screen loop.
"""

import queue
import logging
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)


class MainThreadDispatcher:
    """Runs queued callables on the thread that calls run_pending()."""

    def __init__(self):
        self._queue: "queue.Queue[Tuple[Callable[..., Any], tuple]]" = queue.Queue()

    def dispatch(self, fn: Callable[..., Any], *args: Any) -> None:
        """Queue ``fn(*args)`` for the main context. Safe from any thread."""
        self._queue.put((fn, args))

    def run_pending(self, timeout: Optional[float] = None) -> int:
        """Run everything queued so far.

        Args:
            timeout: Seconds to wait for the first item when the queue is empty

        Returns:
            Number of callables executed. Exceptions raised by a callable propagate.
        """
        executed = 0
        block = timeout is not None and timeout > 0
        while True:
            try:
                fn, args = self._queue.get(block=block and executed == 0, timeout=timeout if block else None)
            except queue.Empty:
                return executed
            fn(*args)
            executed += 1
