"""Interfaces of the external collaborators consumed by the capture engine."""

from __future__ import annotations

from typing import List, Protocol

from ..data_models import BillingDocument, Meter, ReconciliationAggregate


class DocumentSource(Protocol):
    async def get_documents(self, meter_id: str) -> List[BillingDocument]: ...


class ReconciliationSource(Protocol):
    async def get_reconciliation_aggregates(self, meter_id: str) -> List[ReconciliationAggregate]: ...


class ArtifactStore(Protocol):
    async def save(self, site_id: str, meter_number: str, metric_filename: str, image_data: bytes) -> bool: ...


class MeterDirectory(Protocol):
    async def get_meters_on_schematic(self, site_id: str) -> List[Meter]: ...
