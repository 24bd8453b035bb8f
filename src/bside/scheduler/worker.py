"""Bounded worker pool that runs renders off the request thread."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from bside.errors import ParameterError, RenderCancelled
from bside.scheduler.control import RunControl

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PoolState:
    """Counters reported by the status endpoint."""

    submitted: int = 0
    running: int = 0
    completed: int = 0
    failed: int = 0
    cancelled: int = 0


class RenderPool:
    """Runs render callables on a fixed number of threads.

    Every job receives its own ``RunControl`` (keyword ``control``) whose
    deadline is ``timeout`` seconds after submission, so a long render stops
    itself at its next scanline check instead of holding a worker forever.
    """

    def __init__(self, max_workers: int = 2, timeout: Optional[float] = 30.0) -> None:
        if max_workers < 1:
            raise ParameterError(f"max_workers must be >= 1, got {max_workers}")
        self.max_workers = max_workers
        self.timeout = timeout
        self.lock = threading.Lock()
        self.state = PoolState()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="bside-render")

    def _wrap(self, fn: Callable[..., T], control: RunControl) -> Callable[..., T]:
        def _run(*args: Any, **kwargs: Any) -> T:
            with self.lock:
                self.state.running += 1
            try:
                result = fn(*args, control=control, **kwargs)
            except RenderCancelled:
                with self.lock:
                    self.state.cancelled += 1
                raise
            except Exception:
                with self.lock:
                    self.state.failed += 1
                raise
            else:
                with self.lock:
                    self.state.completed += 1
                return result
            finally:
                with self.lock:
                    self.state.running -= 1

        return _run

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Tuple[Future[T], RunControl]:
        control = RunControl.with_timeout(self.timeout)
        with self.lock:
            self.state.submitted += 1
        future = self._executor.submit(self._wrap(fn, control), *args, **kwargs)
        return future, control

    def run(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Submit a job and block until it finishes, is cancelled or times out."""

        future, control = self.submit(fn, *args, **kwargs)
        wait = None if self.timeout is None or self.timeout <= 0 else self.timeout + 5.0
        try:
            return future.result(timeout=wait)
        except FutureTimeout as exc:
            # Still queued behind other jobs; make sure it never starts.
            control.stop()
            future.cancel()
            logger.warning("Render did not finish within %.1fs", wait)
            raise RenderCancelled("Render did not finish in time.") from exc

    def stats(self) -> Dict[str, int]:
        with self.lock:
            payload = asdict(self.state)
        payload["max_workers"] = self.max_workers
        return payload

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
