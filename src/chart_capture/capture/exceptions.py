"""Item-level failures of a chart capture run."""

from __future__ import annotations


class CaptureItemError(Exception):
    """Base class for failures confined to a single queue item."""

    retryable = False


class DataUnavailableError(CaptureItemError):
    """No chart data could be assembled for the item."""

    def __init__(self, message: str = "No chart data available"):
        super().__init__(message)


class RenderFailureError(CaptureItemError):
    """The renderer produced no image."""

    retryable = True

    def __init__(self, message: str = "Chart renderer returned no image"):
        super().__init__(message)


class StorageFailureError(CaptureItemError):
    """The artifact store did not persist the image."""

    retryable = True

    def __init__(self, message: str = "Failed to save chart to storage"):
        super().__init__(message)


class ObserverNotificationError(RuntimeError):
    """Raised when an observer callback fails."""


__all__ = [
    "CaptureItemError",
    "DataUnavailableError",
    "ObserverNotificationError",
    "RenderFailureError",
    "StorageFailureError",
]
