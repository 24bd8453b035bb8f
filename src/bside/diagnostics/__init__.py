"""Profiling helpers."""

from bside.diagnostics.tracker import DiagnosticsTracker, Timer, TimingRecord

__all__ = ["DiagnosticsTracker", "Timer", "TimingRecord"]
