"""Helper for reading a metric out of a reconciliation aggregate"""

from __future__ import annotations

from typing import Optional

from ..data_models import ReconciliationAggregate
from ..metric_catalog import (
    METRIC_BASIC,
    METRIC_KVA_CHARGE,
    METRIC_KVA_CONSUMPTION,
    METRIC_KWH_CHARGE,
    METRIC_KWH_CONSUMPTION,
    METRIC_TOTAL,
)

# Column names of the max-demand reading, in lookup order
_DEMAND_COLUMNS = ("S", "kVA")


def _max_demand(aggregate: ReconciliationAggregate) -> Optional[float]:
    for column in _DEMAND_COLUMNS:
        value = aggregate.column_max_values.get(column)
        if value:
            return value
    return None


def reconciled_value(aggregate: ReconciliationAggregate, metric_key: str) -> Optional[float]:
    """Map ``metric_key`` to the matching reconciliation field."""
    if metric_key == METRIC_TOTAL:
        return aggregate.total_cost
    if metric_key == METRIC_BASIC:
        return aggregate.fixed_charges
    if metric_key == METRIC_KVA_CHARGE:
        return aggregate.demand_charges
    if metric_key == METRIC_KWH_CHARGE:
        return aggregate.energy_cost
    if metric_key == METRIC_KVA_CONSUMPTION:
        return _max_demand(aggregate)
    if metric_key == METRIC_KWH_CONSUMPTION:
        return aggregate.total_kwh
    return None
