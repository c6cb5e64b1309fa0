"""Async REST adapter for the hosted backend's table and storage APIs."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import quote

import aiohttp

from ..config.settings import BackendSettings
from .errors import BackendError

logger = logging.getLogger(__name__)

_HTTP_CLIENT_ERROR_MIN = 400


def eq(value: Any) -> str:
    """PostgREST equality filter."""
    return f"eq.{value}"


def in_(values: Iterable[Any]) -> str:
    """PostgREST membership filter."""
    return "in.(" + ",".join(str(value) for value in values) + ")"


class BackendClient:
    """Thin wrapper around the ``/rest/v1`` and ``/storage/v1`` endpoints.

    One ``aiohttp.ClientSession`` is opened lazily and shared by every request
    until ``close`` is called; use the client as an async context manager.
    """

    def __init__(self, settings: BackendSettings, *, session: Optional[aiohttp.ClientSession] = None) -> None:
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)

    @property
    def base_url(self) -> str:
        return self._settings.url

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout, headers=self._auth_headers())
            self._owns_session = True
        return self._session

    def _auth_headers(self) -> Dict[str, str]:
        key = self._settings.service_key
        return {"apikey": key, "Authorization": f"Bearer {key}"}

    async def close(self) -> None:
        if self._session is None or not self._owns_session:
            return
        if not self._session.closed:
            await self._session.close()
        self._session = None

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Optional[Mapping[str, str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Read rows from a table.

        Args:
            table: Table name under /rest/v1
            columns: PostgREST select expression
            filters: Column filters in PostgREST operator syntax, e.g. ``eq("id", ...)``

        Returns:
            Decoded rows

        Raises:
            BackendError: On transport failure, an HTTP error status, or a
                payload that is not a list
        """
        url = f"{self.base_url}/rest/v1/{table}"
        params = {"select": columns}
        if filters:
            params.update(filters)

        try:
            async with self._get_session().get(url, params=params, headers={"Accept": "application/json"}) as response:
                if response.status >= _HTTP_CLIENT_ERROR_MIN:
                    raise BackendError.http_status("GET", url, response.status, await response.text())
                payload = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise BackendError(f"GET {url} failed: {exc}") from exc

        if not isinstance(payload, list):
            raise BackendError(f"GET {url} returned {type(payload).__name__}, expected a list of rows")
        logger.debug("Fetched %d rows from %s", len(payload), table)
        return payload

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        *,
        content_type: str = "image/png",
        upsert: bool = True,
    ) -> None:
        """
        Upload an object to storage.

        Args:
            bucket: Storage bucket name
            path: Object path inside the bucket
            data: Object bytes
            content_type: MIME type sent with the object
            upsert: Overwrite an existing object at the same path

        Raises:
            BackendError: On transport failure or an HTTP error status
        """
        url = f"{self.base_url}/storage/v1/object/{bucket}/{quote(path)}"
        headers = {"Content-Type": content_type, "x-upsert": "true" if upsert else "false"}

        try:
            async with self._get_session().post(url, data=data, headers=headers) as response:
                if response.status >= _HTTP_CLIENT_ERROR_MIN:
                    raise BackendError.http_status("POST", url, response.status, await response.text())
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise BackendError(f"POST {url} failed: {exc}") from exc
        logger.debug("Uploaded %d bytes to %s/%s", len(data), bucket, path)


__all__ = ["BackendClient", "eq", "in_"]
