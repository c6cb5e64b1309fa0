"""
Environment lookups for capture settings.

A variable set in the process environment wins; otherwise the first
``.env``-style file in ``_DOTENV_CANDIDATES`` that defines it supplies the
value. Blank values count as unset.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")

_BOOLEAN_WORDS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}

_DOTENV_CANDIDATES = (Path(".env"), Path.home() / ".chart_capture.env")

# populated on first lookup; tests reset it to control dotenv fallbacks
_DEFAULT_VALUES: Optional[dict[str, str]] = None


def _load_default_values() -> dict[str, str]:
    from .runtime_helpers import DotenvLoader

    global _DEFAULT_VALUES
    if _DEFAULT_VALUES is None:
        merged: dict[str, str] = {}
        for candidate in _DOTENV_CANDIDATES:
            for key, value in DotenvLoader.load_from_file(candidate).items():
                merged.setdefault(key, value)
        _DEFAULT_VALUES = merged
    return _DEFAULT_VALUES


def _lookup(name: str, *, strip: bool, allow_blank: bool) -> Optional[str]:
    for source in (os.environ.get(name), _load_default_values().get(name)):
        if source is None:
            continue
        value = source.strip() if strip else source
        if value or allow_blank:
            return value
    return None


def _parsed(name: str, or_value: Optional[T], required: bool, parse: Callable[[str], T], expected: str) -> Optional[T]:
    raw = _lookup(name, strip=True, allow_blank=False)
    if raw is None:
        if required and or_value is None:
            raise ConfigurationError.missing_value(name)
        return or_value
    try:
        return parse(raw)
    except ValueError as exc:
        raise ConfigurationError.invalid_value(name, raw, f"expected {expected}") from exc


def env_str(
    name: str,
    or_value: Optional[str] = None,
    *,
    required: bool = False,
    strip: bool = True,
    allow_blank: bool = False,
) -> Optional[str]:
    value = _lookup(name, strip=strip, allow_blank=allow_blank)
    if value is not None:
        return value
    if required:
        raise ConfigurationError.missing_value(name)
    return or_value


def env_int(name: str, or_value: Optional[int] = None, *, required: bool = False) -> Optional[int]:
    return _parsed(name, or_value, required, int, "an integer")


def env_float(name: str, or_value: Optional[float] = None, *, required: bool = False) -> Optional[float]:
    return _parsed(name, or_value, required, float, "a number")


def _parse_bool(raw: str) -> bool:
    try:
        return _BOOLEAN_WORDS[raw.lower()]
    except KeyError as exc:
        raise ValueError(raw) from exc


def env_bool(name: str, or_value: Optional[bool] = None, *, required: bool = False) -> Optional[bool]:
    return _parsed(name, or_value, required, _parse_bool, "a boolean")


def env_seconds(name: str, or_value: Optional[float] = None, *, required: bool = False) -> Optional[float]:
    """Duration in seconds; negative values are rejected."""
    value = env_float(name, or_value, required=required)
    if value is not None and value < 0:
        raise ConfigurationError.invalid_value(name, value, "must not be negative")
    return value
