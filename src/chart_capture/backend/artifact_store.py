"""Chart artifact stores: hosted bucket storage and a local directory."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Tuple

from .client import BackendClient, eq
from .errors import BackendError
from .storage_paths import CHARTS_SECTION, CHARTS_SUBPATH, chart_file_name, chart_storage_path, sanitize_name

logger = logging.getLogger(__name__)


class SupabaseArtifactStore:
    """Uploads PNG charts into the site's folder of the client-files bucket."""

    def __init__(self, client: BackendClient, bucket: str):
        self._client = client
        self._bucket = bucket
        self._site_names: Dict[str, Tuple[str, str]] = {}

    async def save(self, site_id: str, meter_number: str, metric_filename: str, image_data: bytes) -> bool:
        try:
            client_name, site_name = await self._site_folder(site_id)
            path = chart_storage_path(client_name, site_name, meter_number, metric_filename)
            await self._client.upload(self._bucket, path, image_data, content_type="image/png", upsert=True)
        except BackendError as exc:
            logger.error("Failed to save chart %s-%s: %s", meter_number, metric_filename, exc)
            return False
        logger.debug("Saved chart to %s/%s", self._bucket, path)
        return True

    async def _site_folder(self, site_id: str) -> Tuple[str, str]:
        cached = self._site_names.get(site_id)
        if cached is not None:
            return cached
        rows = await self._client.select("sites", columns="name,clients(name)", filters={"id": eq(site_id)})
        if not rows:
            raise BackendError(f"Site {site_id} not found")
        row = rows[0]
        client = row.get("clients") or {}
        names = (str(client.get("name") or ""), str(row.get("name") or ""))
        self._site_names[site_id] = names
        return names


class LocalArtifactStore:
    """Writes charts below ``root/<site>/Metering/Reconciliations/Graphs``."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, site_id: str, meter_number: str, metric_filename: str) -> Path:
        return (
            self.root
            / sanitize_name(site_id)
            / CHARTS_SECTION
            / CHARTS_SUBPATH
            / chart_file_name(meter_number, metric_filename)
        )

    async def save(self, site_id: str, meter_number: str, metric_filename: str, image_data: bytes) -> bool:
        target = self.path_for(site_id, meter_number, metric_filename)
        try:
            await asyncio.to_thread(self._write, target, image_data)
        except OSError as exc:
            logger.error("Failed to write chart %s: %s", target, exc)
            return False
        return True

    @staticmethod
    def _write(target: Path, image_data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(image_data)
