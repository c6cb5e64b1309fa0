"""Reconciliation aggregates backed by ``reconciliation_meter_results``."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..data_models import ReconciliationAggregate
from .client import BackendClient, eq

logger = logging.getLogger(__name__)

_RESULT_COLUMNS = (
    "meter_id,total_cost,energy_cost,fixed_charges,demand_charges,total_kwh,column_max_values,"
    "reconciliation_runs!inner(site_id,date_from,date_to)"
)


class SupabaseReconciliationSource:
    def __init__(self, client: BackendClient, site_id: Optional[str] = None):
        self._client = client
        self._site_id = site_id

    async def get_reconciliation_aggregates(self, meter_id: str) -> List[ReconciliationAggregate]:
        filters = {"meter_id": eq(meter_id)}
        if self._site_id:
            filters["reconciliation_runs.site_id"] = eq(self._site_id)
        rows = await self._client.select("reconciliation_meter_results", columns=_RESULT_COLUMNS, filters=filters)

        aggregates: List[ReconciliationAggregate] = []
        for row in rows:
            try:
                aggregates.append(ReconciliationAggregate.from_row(row))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed reconciliation result for meter %s: %s", meter_id, exc)
        return aggregates
