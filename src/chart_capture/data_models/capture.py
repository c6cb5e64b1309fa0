"""Records produced and consumed by a chart capture run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .billing import BillingDocument, Meter


class CaptureStatus(str, Enum):
    """Status vocabulary of the capture log."""

    PENDING = "pending"
    RENDERING = "rendering"
    CAPTURING = "capturing"
    SUCCESS = "success"
    FAILED = "failed"
    RETRYING = "retrying"
    METER_COMPLETE = "meter_complete"


@dataclass(frozen=True)
class ChartMetric:
    """Catalog entry describing one chartable metric."""

    key: str
    title: str
    unit: str
    filename: str

    @property
    def is_consumption(self) -> bool:
        return "consumption" in self.key


@dataclass(frozen=True)
class CaptureQueueItem:
    """One unit of chart work: a single metric chart for a single meter."""

    meter: Meter
    documents: Tuple[BillingDocument, ...]
    metric_key: str
    metric_info: ChartMetric


@dataclass(frozen=True)
class MeterGroup:
    """All queue items sharing a meter id, in original queue order."""

    meter: Meter
    items: Tuple[CaptureQueueItem, ...]


@dataclass(frozen=True)
class ChartDataPoint:
    period_label: str
    document_amount: Optional[float]
    reconciled_amount: Optional[float]
    meter_reading: Optional[float]


@dataclass(frozen=True)
class MeterReadings:
    previous: Optional[float]
    current: Optional[float]


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class CaptureLogEntry:
    """One append-only record of the capture log."""

    meter_number: str
    metric_key: str
    metric_label: str
    status: CaptureStatus
    attempt: int
    error: Optional[str] = None
    duration_ms: Optional[int] = None
    meter_index: Optional[int] = None
    total_meters: Optional[int] = None
    timestamp: str = field(default_factory=_utc_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "meterNumber": self.meter_number,
            "metricKey": self.metric_key,
            "metricLabel": self.metric_label,
            "status": self.status.value,
            "attempt": self.attempt,
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.duration_ms is not None:
            payload["durationMs"] = self.duration_ms
        if self.meter_index is not None:
            payload["meterIndex"] = self.meter_index
        if self.total_meters is not None:
            payload["totalMeters"] = self.total_meters
        return payload


@dataclass(frozen=True)
class MeterCaptureResult:
    """Per-meter outcome; emitted once per meter group per run."""

    meter_number: str
    meter_id: str
    charts_attempted: int
    charts_successful: int
    charts_failed: int
    failed_metrics: Tuple[str, ...]
    duration_ms: int

    def __post_init__(self):
        if self.charts_attempted != self.charts_successful + self.charts_failed:
            raise ValueError(
                f"charts_attempted ({self.charts_attempted}) must equal successes "
                f"({self.charts_successful}) plus failures ({self.charts_failed})"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meterNumber": self.meter_number,
            "meterId": self.meter_id,
            "chartsAttempted": self.charts_attempted,
            "chartsSuccessful": self.charts_successful,
            "chartsFailed": self.charts_failed,
            "failedMetrics": list(self.failed_metrics),
            "durationMs": self.duration_ms,
        }


@dataclass(frozen=True)
class CaptureRunSummary:
    """Final outcome of a run, mirrored to the observer's completion callback."""

    total_success: int
    total_failed: int
    was_cancelled: bool
    log: Tuple[CaptureLogEntry, ...]
    meter_results: Tuple[MeterCaptureResult, ...]
    fatal_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalSuccess": self.total_success,
            "totalFailed": self.total_failed,
            "wasCancelled": self.was_cancelled,
            "fatalError": self.fatal_error,
            "meterResults": [result.to_dict() for result in self.meter_results],
            "log": [entry.to_dict() for entry in self.log],
        }
