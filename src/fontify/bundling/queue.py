"""Sequential task queue with a fixed inter-task delay.

The delay is the only throttling applied to catalog traffic: tasks never run
concurrently and there is no retry or backoff.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import Generic, TypeVar

from fontify.core.exceptions import OperationCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class SequentialTaskQueue(Generic[T, R]):
    """Run one task at a time, sleeping ``delay_seconds`` between tasks."""

    def __init__(
        self,
        delay_seconds: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be non-negative")
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def run(
        self,
        items: Iterable[T],
        worker: Callable[[T], R],
        cancel_event: threading.Event | None = None,
    ) -> list[R]:
        """
        Apply ``worker`` to every item in order.

        Args:
            items: Work items
            worker: Callable producing one result per item
            cancel_event: Optional event checked before each task

        Returns:
            Results in item order

        Raises:
            OperationCancelledError: If ``cancel_event`` is set between tasks
        """
        results: list[R] = []

        for index, item in enumerate(items):
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError("sequential task queue")

            if index > 0 and self.delay_seconds:
                self._sleep(self.delay_seconds)

            results.append(worker(item))

        logger.debug(f"Task queue finished {len(results)} tasks")
        return results
