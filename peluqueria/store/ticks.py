"""A next-tick queue: callbacks scheduled now run when the current pass drains."""

from collections import deque
from typing import Any, Callable, Deque, Tuple

import logging

logger = logging.getLogger(__name__)

Task = Tuple[Callable[..., Any], Tuple[Any, ...]]


class NextTick(object):
    """
    Single-shot deferred tasks.

    :meth:`call_soon` never runs the callback inline. Callbacks run, in the
    order they were scheduled, the next time :meth:`run_pending` is called.
    Callbacks scheduled while draining run in the same drain.
    """

    def __init__(self) -> None:
        self._pending: Deque[Task] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        self._pending.append((callback, args))

    def run_pending(self) -> int:
        """Run queued callbacks until the queue is empty; return how many ran."""
        count = 0
        while self._pending:
            callback, args = self._pending.popleft()
            callback(*args)
            count += 1
        if count:
            logger.debug('Ran %i deferred task(s)', count)
        return count
