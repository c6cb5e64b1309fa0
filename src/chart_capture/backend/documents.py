"""Tenant-bill document source backed by the ``site_documents`` table."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..data_models import BillingDocument, LineItem, parse_iso_date
from .client import BackendClient, eq
from .errors import BackendError

logger = logging.getLogger(__name__)

_DOCUMENT_COLUMNS = "id,file_name,document_extractions(period_start,period_end,total_amount,extracted_data)"


def _line_items_for_meter(raw_items: Sequence[Mapping[str, Any]], meter_number: str) -> List[LineItem]:
    # unassigned items belong to every meter on the bill
    return [
        LineItem.from_row(item)
        for item in raw_items
        if not item.get("meter_number") or item.get("meter_number") == meter_number
    ]


def documents_for_meter(rows: Sequence[Mapping[str, Any]], meter_number: str) -> List[BillingDocument]:
    """Turn ``site_documents`` rows into the meter's billing documents, sorted by period end."""
    documents: List[BillingDocument] = []
    for row in rows:
        for extraction in row.get("document_extractions") or []:
            if not extraction.get("period_start") or not extraction.get("period_end"):
                continue
            extracted = extraction.get("extracted_data") or {}
            line_items = _line_items_for_meter(extracted.get("line_items") or [], meter_number)
            if not line_items and extracted.get("shop_number") != meter_number:
                continue
            total_amount = extraction.get("total_amount")
            documents.append(
                BillingDocument(
                    document_id=str(row["id"]),
                    period_start=parse_iso_date(extraction["period_start"]),
                    period_end=parse_iso_date(extraction["period_end"]),
                    total_amount=float(total_amount) if total_amount is not None else None,
                    line_items=tuple(line_items),
                )
            )
    documents.sort(key=lambda document: document.period_end)
    return documents


class SupabaseDocumentSource:
    """Reads a site's tenant bills once and filters them per meter."""

    def __init__(self, client: BackendClient, site_id: str):
        self._client = client
        self._site_id = site_id
        self._rows: Optional[List[Dict[str, Any]]] = None
        self._rows_lock = asyncio.Lock()
        self._meter_numbers: Dict[str, str] = {}

    def remember_meter(self, meter_id: str, meter_number: str) -> None:
        """Seed the meter-number cache to skip a lookup."""
        self._meter_numbers[meter_id] = meter_number

    async def get_documents(self, meter_id: str) -> List[BillingDocument]:
        meter_number = await self._meter_number(meter_id)
        rows = await self._site_rows()
        documents = documents_for_meter(rows, meter_number)
        logger.debug("Meter %s has %d billing documents", meter_number, len(documents))
        return documents

    async def _meter_number(self, meter_id: str) -> str:
        cached = self._meter_numbers.get(meter_id)
        if cached is not None:
            return cached
        rows = await self._client.select("meters", columns="meter_number", filters={"id": eq(meter_id)})
        if not rows:
            raise BackendError(f"Meter {meter_id} not found")
        meter_number = str(rows[0]["meter_number"])
        self._meter_numbers[meter_id] = meter_number
        return meter_number

    async def _site_rows(self) -> List[Dict[str, Any]]:
        async with self._rows_lock:
            if self._rows is None:
                self._rows = await self._client.select(
                    "site_documents",
                    columns=_DOCUMENT_COLUMNS,
                    filters={"site_id": eq(self._site_id), "document_type": eq("tenant_bill")},
                )
            return self._rows
