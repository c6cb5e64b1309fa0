"""Dataclasses shared across the capture engine."""

from .billing import (
    SUPPLY_EMERGENCY,
    SUPPLY_NORMAL,
    UNIT_KVA,
    UNIT_KWH,
    UNIT_MONTHLY,
    BillingDocument,
    LineItem,
    Meter,
    ReconciliationAggregate,
    parse_iso_date,
)
from .capture import (
    CaptureLogEntry,
    CaptureQueueItem,
    CaptureRunSummary,
    CaptureStatus,
    ChartDataPoint,
    ChartMetric,
    MeterCaptureResult,
    MeterGroup,
    MeterReadings,
)

__all__ = [
    "SUPPLY_EMERGENCY",
    "SUPPLY_NORMAL",
    "UNIT_KVA",
    "UNIT_KWH",
    "UNIT_MONTHLY",
    "BillingDocument",
    "CaptureLogEntry",
    "CaptureQueueItem",
    "CaptureRunSummary",
    "CaptureStatus",
    "ChartDataPoint",
    "ChartMetric",
    "LineItem",
    "Meter",
    "MeterCaptureResult",
    "MeterGroup",
    "MeterReadings",
    "ReconciliationAggregate",
    "parse_iso_date",
]
