"""Execution control for long-running renders."""

from __future__ import annotations

import threading
import time
from typing import Optional

from bside.errors import RenderCancelled


class RunControl:
    """Thread-safe stop flag with an optional monotonic deadline.

    Render loops call ``check()`` between scanlines; it raises
    ``RenderCancelled`` once the control was stopped or the deadline passed.
    """

    def __init__(self, deadline: Optional[float] = None) -> None:
        self._stop = threading.Event()
        self.deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: Optional[float]) -> "RunControl":
        if seconds is None or seconds <= 0:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    def stop(self) -> None:
        self._stop.set()

    def should_stop(self) -> bool:
        return self._stop.is_set()

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self) -> None:
        if self._stop.is_set():
            raise RenderCancelled("Render was stopped.")
        if self.expired():
            raise RenderCancelled("Render exceeded its deadline.")
