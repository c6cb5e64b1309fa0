"""Append-only capture log with full-snapshot notifications."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from ..data_models import CaptureLogEntry, CaptureStatus
from .observer import ObserverNotifier

logger = logging.getLogger(__name__)

_LEVELS = {
    CaptureStatus.FAILED: logging.WARNING,
    CaptureStatus.RETRYING: logging.WARNING,
    CaptureStatus.SUCCESS: logging.INFO,
    CaptureStatus.METER_COMPLETE: logging.INFO,
}


class CaptureLogger:
    """Shared by every meter routine of a run; appends are serialized."""

    def __init__(self, notifier: ObserverNotifier):
        self._notifier = notifier
        self._entries: List[CaptureLogEntry] = []
        self._lock = asyncio.Lock()

    def snapshot(self) -> Tuple[CaptureLogEntry, ...]:
        return tuple(self._entries)

    async def append(self, entry: CaptureLogEntry) -> None:
        async with self._lock:
            self._entries.append(entry)
            snapshot = tuple(self._entries)
            _mirror(entry)
            self._notifier.log_update(snapshot)

    async def record(
        self,
        meter_number: str,
        metric_key: str,
        metric_label: str,
        status: CaptureStatus,
        *,
        attempt: int = 1,
        error: Optional[str] = None,
        duration_ms: Optional[int] = None,
        meter_index: Optional[int] = None,
        total_meters: Optional[int] = None,
    ) -> CaptureLogEntry:
        entry = CaptureLogEntry(
            meter_number=meter_number,
            metric_key=metric_key,
            metric_label=metric_label,
            status=status,
            attempt=attempt,
            error=error,
            duration_ms=duration_ms,
            meter_index=meter_index,
            total_meters=total_meters,
        )
        await self.append(entry)
        return entry


def _mirror(entry: CaptureLogEntry) -> None:
    level = _LEVELS.get(entry.status, logging.DEBUG)
    if entry.error:
        logger.log(
            level,
            "%s %s %s (attempt %d): %s",
            entry.meter_number,
            entry.metric_label,
            entry.status.value,
            entry.attempt,
            entry.error,
        )
    else:
        logger.log(level, "%s %s %s (attempt %d)", entry.meter_number, entry.metric_label, entry.status.value, entry.attempt)


__all__ = ["CaptureLogger"]
