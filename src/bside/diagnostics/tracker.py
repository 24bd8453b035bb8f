"""Render timing collection and export."""

from __future__ import annotations

import csv
import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

from bside.data import Bitmap


@dataclass
class TimingRecord:
    """Timing of a single render variant."""

    label: str
    elapsed_ms: float
    width: int
    height: int


@dataclass
class DiagnosticsTracker:
    """Collects per-render timings and writes them to JSON/CSV."""

    profile_output: Optional[Path] = None
    records: List[TimingRecord] = field(default_factory=list)

    def track(self, label: str, elapsed_s: float, output: Bitmap) -> TimingRecord:
        record = TimingRecord(
            label=label,
            elapsed_ms=elapsed_s * 1000.0,
            width=output.width,
            height=output.height,
        )
        self.records.append(record)
        return record

    def export(self) -> None:
        """Export timing records to JSON and a sibling CSV if configured."""

        if not self.records or not self.profile_output:
            return

        self.profile_output.parent.mkdir(parents=True, exist_ok=True)
        payload = [asdict(record) for record in self.records]
        self.profile_output.write_text(json.dumps(payload, indent=2))

        csv_path = self.profile_output.with_suffix(".csv")
        with csv_path.open("w", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(payload[0].keys()))
            writer.writeheader()
            for row in payload:
                writer.writerow(row)


class Timer:
    """Simple context timer for profiling blocks."""

    def __init__(self) -> None:
        self.start = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> "Timer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, *_exc: object) -> None:
        self.elapsed = time.perf_counter() - self.start
