"""Caller-owned control flags observed cooperatively by the scheduler."""

from __future__ import annotations


class _Flag:
    def __init__(self) -> None:
        self._value = False

    def set(self) -> None:
        self._value = True

    def clear(self) -> None:
        self._value = False

    def is_set(self) -> bool:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(is_set={self._value})"


class CancellationToken(_Flag):
    """Once set, no further items or batches are started."""


class PauseToken(_Flag):
    """While set, meter routines suspend before their next item."""


__all__ = ["CancellationToken", "PauseToken"]
