"""Assemble chart series from billing documents and reconciliation runs."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Sequence, Tuple

from ..backend.errors import BackendError
from ..backend.protocols import ReconciliationSource
from ..data_models import BillingDocument, ChartDataPoint, Meter, ReconciliationAggregate
from ..metric_extractor import extract_meter_readings, extract_metric_value
from .reconciliation_values import reconciled_value

logger = logging.getLogger(__name__)


def format_period_label(period_end: date) -> str:
    """Short month and year, e.g. ``Mar 2024``."""
    return period_end.strftime("%b %Y")


def _year_month(value: date) -> Tuple[int, int]:
    return value.year, value.month


def match_reconciled_values(
    documents: Sequence[BillingDocument],
    aggregates: Sequence[ReconciliationAggregate],
    metric_key: str,
) -> Dict[str, float]:
    """Map document id to the reconciled value of the run ending in the same month."""
    matched: Dict[str, float] = {}
    for aggregate in aggregates:
        run_month = _year_month(aggregate.date_to)
        value = reconciled_value(aggregate, metric_key)
        if value is None:
            continue
        for document in documents:
            if _year_month(document.period_end) == run_month:
                matched[document.document_id] = value
    return matched


def build_series(
    documents: Sequence[BillingDocument],
    aggregates: Sequence[ReconciliationAggregate],
    metric_key: str,
) -> List[ChartDataPoint]:
    """Pure part of assembly: join, sort and emit points; empty when no document has a value."""
    reconciled = match_reconciled_values(documents, aggregates, metric_key)
    ordered = sorted(documents, key=lambda document: document.period_end)

    points: List[ChartDataPoint] = []
    has_document_value = False
    for document in ordered:
        document_value = extract_metric_value(document, metric_key)
        if document_value is not None:
            has_document_value = True
        points.append(
            ChartDataPoint(
                period_label=format_period_label(document.period_end),
                document_amount=document_value,
                reconciled_amount=reconciled.get(document.document_id),
                meter_reading=extract_meter_readings(document, metric_key).current,
            )
        )

    if not has_document_value:
        return []
    return points


class ChartDataAssembler:
    """Fetches reconciliation aggregates and builds the ordered chart series."""

    def __init__(self, reconciliation_source: ReconciliationSource):
        self._reconciliation_source = reconciliation_source

    async def assemble(
        self,
        meter: Meter,
        documents: Sequence[BillingDocument],
        metric_key: str,
    ) -> List[ChartDataPoint]:
        """
        Build the chart series for one meter and metric.

        Args:
            meter: Meter whose reconciliation runs are fetched
            documents: Billing documents for the meter, in any order
            metric_key: Key from the metric catalog

        Returns:
            Points ordered by billing period, or an empty list when no document
            carries a value for the metric. A reconciliation fetch failure is
            logged and the series falls back to document values only.
        """
        aggregates = await self._fetch_aggregates(meter)
        series = build_series(documents, aggregates, metric_key)
        logger.debug(
            "Assembled %d points for meter %s metric %s (%d reconciliation runs)",
            len(series),
            meter.meter_number,
            metric_key,
            len(aggregates),
        )
        return series

    async def _fetch_aggregates(self, meter: Meter) -> List[ReconciliationAggregate]:
        try:
            return list(await self._reconciliation_source.get_reconciliation_aggregates(meter.id))
        except BackendError as exc:
            logger.warning(
                "Reconciliation data unavailable for meter %s, charting documents only: %s",
                meter.meter_number,
                exc,
            )
            return []


__all__ = [
    "ChartDataAssembler",
    "build_series",
    "format_period_label",
    "match_reconciled_values",
]
