"""Batch capture of reconciliation charts."""

from .exceptions import (
    CaptureItemError,
    DataUnavailableError,
    ObserverNotificationError,
    RenderFailureError,
    StorageFailureError,
)
from .grouping import group_by_meter, partition_batches
from .item_processor import ChartItemProcessor, ItemOutcome
from .observer import CaptureObserver, LoggingCaptureObserver, NullCaptureObserver, ObserverNotifier
from .queue_builder import CaptureQueueBuilder
from .runner import CaptureRunner, create_site_runner
from .scheduler import BatchScheduler
from .tokens import CancellationToken, PauseToken

__all__ = [
    "BatchScheduler",
    "CancellationToken",
    "CaptureItemError",
    "CaptureObserver",
    "CaptureQueueBuilder",
    "CaptureRunner",
    "ChartItemProcessor",
    "DataUnavailableError",
    "ItemOutcome",
    "LoggingCaptureObserver",
    "NullCaptureObserver",
    "ObserverNotificationError",
    "ObserverNotifier",
    "PauseToken",
    "RenderFailureError",
    "StorageFailureError",
    "create_site_runner",
    "group_by_meter",
    "partition_batches",
]
