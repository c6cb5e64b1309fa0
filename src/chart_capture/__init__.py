"""Batch capture of meter reconciliation charts."""

from .capture import (
    BatchScheduler,
    CancellationToken,
    CaptureObserver,
    CaptureQueueBuilder,
    CaptureRunner,
    PauseToken,
    create_site_runner,
)
from .chart_generator import ChartRenderer
from .data_models import CaptureLogEntry, CaptureQueueItem, CaptureRunSummary, CaptureStatus, MeterCaptureResult

__all__ = [
    "BatchScheduler",
    "CancellationToken",
    "CaptureLogEntry",
    "CaptureObserver",
    "CaptureQueueBuilder",
    "CaptureQueueItem",
    "CaptureRunSummary",
    "CaptureRunner",
    "CaptureStatus",
    "ChartRenderer",
    "MeterCaptureResult",
    "PauseToken",
    "create_site_runner",
]
