"""Running totals over per-meter results."""

from __future__ import annotations

import asyncio
from typing import List, Tuple

from ..data_models import MeterCaptureResult


class ResultAggregator:
    def __init__(self) -> None:
        self._results: List[MeterCaptureResult] = []
        self._lock = asyncio.Lock()
        self.total_success = 0
        self.total_failed = 0

    async def add(self, result: MeterCaptureResult) -> None:
        async with self._lock:
            self._results.append(result)
            self.total_success += result.charts_successful
            self.total_failed += result.charts_failed

    @property
    def results(self) -> Tuple[MeterCaptureResult, ...]:
        return tuple(self._results)


__all__ = ["ResultAggregator"]
