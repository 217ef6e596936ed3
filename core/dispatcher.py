import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

from core.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class DispatchReport:
    succeeded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


class RateLimitedDispatcher:
    """
    Runs a callable over items with bounded concurrency and a minimum gap
    between consecutive starts.

    Admission happens on the calling thread, in the order items are supplied:
    a slot must be free and `min_interval_ms` must have passed since the
    previous start before the next item is handed to the pool. Completion
    order is not guaranteed. A failing item never cancels its siblings.
    """

    def __init__(self, max_concurrent: int = 4, min_interval_ms: float = 500,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        self.max_concurrent = max_concurrent
        self.min_interval = max(0.0, min_interval_ms) / 1000.0
        self.clock = clock
        self.sleep = sleep

    def run_all(self, items: Iterable[T], invoke: Callable[[T], object]) -> DispatchReport:
        items = list(items)
        report = DispatchReport()
        if not items:
            return report

        slots = threading.BoundedSemaphore(self.max_concurrent)
        workers = min(self.max_concurrent, len(items))
        last_start = None

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="xlf-dispatch") as executor:
            futures = []
            for item in items:
                slots.acquire()
                if last_start is not None:
                    wait = self.min_interval - (self.clock() - last_start)
                    if wait > 0:
                        self.sleep(wait)
                last_start = self.clock()
                futures.append(executor.submit(self._run_one, item, invoke, slots))

            # Full join: nothing is returned before every item has settled
            for future in futures:
                if future.result():
                    report.succeeded += 1
                else:
                    report.failed += 1

        logger.debug(f"Dispatch finished: {report.succeeded} ok, {report.failed} failed")
        return report

    @staticmethod
    def _run_one(item, invoke, slots) -> bool:
        try:
            invoke(item)
            return True
        except Exception as e:
            logger.error(f"Dispatched call failed: {e}", exc_info=True)
            return False
        finally:
            slots.release()
