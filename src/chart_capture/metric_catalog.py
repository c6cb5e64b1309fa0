"""Catalog of the metrics charted for every meter."""

from __future__ import annotations

from typing import Dict, Tuple

from .data_models import ChartMetric

METRIC_TOTAL = "total"
METRIC_BASIC = "basic"
METRIC_KVA_CHARGE = "kva-charge"
METRIC_KWH_CHARGE = "kwh-charge"
METRIC_KVA_CONSUMPTION = "kva-consumption"
METRIC_KWH_CONSUMPTION = "kwh-consumption"

CHART_METRICS: Tuple[ChartMetric, ...] = (
    ChartMetric(key=METRIC_TOTAL, title="Total Amount", unit="R", filename="total"),
    ChartMetric(key=METRIC_BASIC, title="Basic Charge", unit="R", filename="basic"),
    ChartMetric(key=METRIC_KVA_CHARGE, title="kVA Charge", unit="R", filename="kva-charge"),
    ChartMetric(key=METRIC_KWH_CHARGE, title="kWh Charge", unit="R", filename="kwh-charge"),
    ChartMetric(key=METRIC_KVA_CONSUMPTION, title="kVA Consumption", unit="kVA", filename="kva-consumption"),
    ChartMetric(key=METRIC_KWH_CONSUMPTION, title="kWh Consumption", unit="kWh", filename="kwh-consumption"),
)

_METRICS_BY_KEY: Dict[str, ChartMetric] = {metric.key: metric for metric in CHART_METRICS}


def get_metric(key: str) -> ChartMetric:
    """Return the catalog entry for ``key``."""
    try:
        return _METRICS_BY_KEY[key]
    except KeyError as exc:
        raise KeyError(f"Unknown chart metric: {key}") from exc


__all__ = [
    "CHART_METRICS",
    "METRIC_BASIC",
    "METRIC_KVA_CHARGE",
    "METRIC_KVA_CONSUMPTION",
    "METRIC_KWH_CHARGE",
    "METRIC_KWH_CONSUMPTION",
    "METRIC_TOTAL",
    "get_metric",
]
