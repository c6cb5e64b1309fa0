"""
Pure extraction of metric values and meter readings from billing documents.

``None`` means "no data" and is kept distinct from a genuine zero so that the
chart data assembler can tell an empty series from a series of zero charges.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from .data_models import (
    SUPPLY_EMERGENCY,
    SUPPLY_NORMAL,
    UNIT_KVA,
    UNIT_KWH,
    UNIT_MONTHLY,
    BillingDocument,
    LineItem,
    MeterReadings,
)
from .metric_catalog import (
    METRIC_BASIC,
    METRIC_KVA_CHARGE,
    METRIC_KVA_CONSUMPTION,
    METRIC_KWH_CHARGE,
    METRIC_KWH_CONSUMPTION,
    METRIC_TOTAL,
)


def _first(items: Iterable[LineItem], predicate: Callable[[LineItem], bool]) -> Optional[LineItem]:
    for item in items:
        if predicate(item):
            return item
    return None


def _is_kva(item: LineItem) -> bool:
    return item.unit == UNIT_KVA


def _is_normal_kwh(item: LineItem) -> bool:
    return item.unit == UNIT_KWH and item.supply == SUPPLY_NORMAL


def _is_monthly(item: LineItem) -> bool:
    return item.unit == UNIT_MONTHLY


def _total_excluding_emergency(line_items: tuple[LineItem, ...]) -> Optional[float]:
    qualifying = [item for item in line_items if item.supply != SUPPLY_EMERGENCY]
    if not qualifying:
        return None
    return sum(item.amount or 0.0 for item in qualifying)


def extract_metric_value(document: BillingDocument, metric_key: str) -> Optional[float]:
    """
    Return the document-side value of a metric.

    Args:
        document: Billing document whose line items are inspected
        metric_key: Key from the metric catalog

    Returns:
        The extracted amount or quantity, or None when the document has no
        matching line item or the key is unknown
    """
    line_items = document.line_items or ()

    if metric_key == METRIC_TOTAL:
        return _total_excluding_emergency(line_items)

    if metric_key == METRIC_BASIC:
        item = _first(line_items, _is_monthly)
        return item.amount if item else None
    if metric_key == METRIC_KVA_CHARGE:
        item = _first(line_items, _is_kva)
        return item.amount if item else None
    if metric_key == METRIC_KWH_CHARGE:
        item = _first(line_items, _is_normal_kwh)
        return item.amount if item else None
    if metric_key == METRIC_KVA_CONSUMPTION:
        item = _first(line_items, _is_kva)
        return item.consumption if item else None
    if metric_key == METRIC_KWH_CONSUMPTION:
        item = _first(line_items, _is_normal_kwh)
        return item.consumption if item else None

    return document.total_amount


def extract_meter_readings(document: BillingDocument, metric_key: str) -> MeterReadings:
    """Return the previous/current readings backing ``metric_key``."""
    line_items = document.line_items or ()
    predicate = _is_kva if metric_key.startswith("kva-") else _is_normal_kwh
    item = _first(line_items, predicate)
    if item is None:
        return MeterReadings(previous=None, current=None)
    return MeterReadings(previous=item.previous_reading, current=item.current_reading)


__all__ = ["extract_meter_readings", "extract_metric_value"]
