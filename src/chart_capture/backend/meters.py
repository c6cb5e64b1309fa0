"""Meter enumeration for a site's schematics."""

from __future__ import annotations

import logging
from typing import Dict, List

from ..data_models import Meter
from .client import BackendClient, eq, in_

logger = logging.getLogger(__name__)

_METER_COLUMNS = "meter_id,meters(id,meter_number,name,meter_type,tariff,rating)"


class SupabaseMeterDirectory:
    """Lists the meters placed on any schematic of a site."""

    def __init__(self, client: BackendClient):
        self._client = client

    async def get_meters_on_schematic(self, site_id: str) -> List[Meter]:
        schematics = await self._client.select("schematics", columns="id", filters={"site_id": eq(site_id)})
        if not schematics:
            logger.info("Site %s has no schematics", site_id)
            return []

        positions = await self._client.select(
            "meter_positions",
            columns=_METER_COLUMNS,
            filters={"schematic_id": in_(row["id"] for row in schematics)},
        )

        # a meter may sit on several schematics; keep first occurrence
        unique: Dict[str, Meter] = {}
        for position in positions:
            meter_row = position.get("meters")
            if not meter_row:
                continue
            meter = Meter.from_row(meter_row)
            unique.setdefault(meter.id, meter)
        return list(unique.values())
