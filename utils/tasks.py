"""
Background task runner for remote calls whose latest submission wins.

Recipe searches and unit classification are issued from user input. A newer
request supersedes an older one: pending work is cancelled, and finished work
can be checked with is_current() before its result is applied.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from .logger import get_logger

logger = get_logger(__name__)


class LatestTaskRunner:
    """Thread pool wrapper tracking which submitted call is the latest."""
    
    def __init__(self, name: str, max_workers: int = 2):
        self.name = name
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Future = None
    
    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> Future:
        """Submit a call, superseding any earlier one"""
        with self._lock:
            previous = self._latest
            if previous is not None and not previous.done():
                if previous.cancel():
                    logger.debug(f"[{self.name}] cancelled pending call")
                else:
                    logger.debug(f"[{self.name}] earlier call still running, result will be stale")
            
            self._generation += 1
            future = self._executor.submit(fn, *args, **kwargs)
            future.generation = self._generation
            self._latest = future
            return future
    
    def is_current(self, future: Future) -> bool:
        """True if the future belongs to the most recent submission"""
        with self._lock:
            return getattr(future, "generation", None) == self._generation
    
    def shutdown(self, wait: bool = False):
        self._executor.shutdown(wait=wait, cancel_futures=True)
