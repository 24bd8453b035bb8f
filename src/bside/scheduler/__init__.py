"""Render scheduling: cancellation control and the worker pool."""

from bside.scheduler.control import RunControl
from bside.scheduler.worker import PoolState, RenderPool

__all__ = ["PoolState", "RenderPool", "RunControl"]
