"""Error raised by the hosted backend adapters."""

from __future__ import annotations

from typing import Optional


class BackendError(RuntimeError):
    """Raised when a backend request fails at the transport or HTTP level."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status

    @classmethod
    def http_status(cls, method: str, url: str, status: int, body: str) -> "BackendError":
        snippet = body[:200] if body else ""
        return cls(f"{method} {url} returned HTTP {status}: {snippet}", status=status)
