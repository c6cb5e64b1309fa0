"""Build the capture queue for a site."""

from __future__ import annotations

import logging
from typing import List, Sequence

from ..backend import DocumentSource, MeterDirectory
from ..data_models import CaptureQueueItem, ChartMetric
from ..metric_catalog import CHART_METRICS

logger = logging.getLogger(__name__)


class CaptureQueueBuilder:
    """One item per (meter, metric), meters in schematic order, metrics in catalog order."""

    def __init__(
        self,
        meter_directory: MeterDirectory,
        document_source: DocumentSource,
        metrics: Sequence[ChartMetric] = CHART_METRICS,
    ):
        self._meter_directory = meter_directory
        self._document_source = document_source
        self._metrics = tuple(metrics)

    async def build(self, site_id: str) -> List[CaptureQueueItem]:
        meters = await self._meter_directory.get_meters_on_schematic(site_id)
        queue: List[CaptureQueueItem] = []
        for meter in meters:
            documents = tuple(await self._document_source.get_documents(meter.id))
            if not documents:
                logger.info("Meter %s has no billing documents", meter.meter_number)
            queue.extend(
                CaptureQueueItem(meter=meter, documents=documents, metric_key=metric.key, metric_info=metric)
                for metric in self._metrics
            )
        logger.info("Built capture queue for site %s: %d meters, %d items", site_id, len(meters), len(queue))
        return queue


__all__ = ["CaptureQueueBuilder"]
