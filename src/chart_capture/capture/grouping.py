"""Partition the capture queue into meter groups and batches."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..data_models import CaptureQueueItem, Meter, MeterGroup


def group_by_meter(queue: Sequence[CaptureQueueItem]) -> List[MeterGroup]:
    """
    Group queue items by meter id.

    Groups follow the order in which each meter first appears; items keep
    their queue order within a group.
    """
    meters: Dict[str, Meter] = {}
    items: Dict[str, List[CaptureQueueItem]] = {}
    for item in queue:
        meter_id = item.meter.id
        if meter_id not in meters:
            meters[meter_id] = item.meter
            items[meter_id] = []
        items[meter_id].append(item)
    return [MeterGroup(meter=meters[meter_id], items=tuple(items[meter_id])) for meter_id in meters]


def partition_batches(groups: Sequence[MeterGroup], batch_size: int) -> List[List[MeterGroup]]:
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [list(groups[start : start + batch_size]) for start in range(0, len(groups), batch_size)]


__all__ = ["group_by_meter", "partition_batches"]
