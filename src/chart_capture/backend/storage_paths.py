"""Storage path conventions for chart artifacts."""

from __future__ import annotations

import re

CHARTS_SECTION = "Metering"
CHARTS_SUBPATH = "Reconciliations/Graphs"

_DISALLOWED_CHARS = re.compile(r"[^a-zA-Z0-9\s\-_]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_name(name: str) -> str:
    """Strip characters unsafe for storage folders and collapse whitespace."""
    cleaned = _DISALLOWED_CHARS.sub("", name.strip())
    return _WHITESPACE.sub(" ", cleaned)


def chart_file_name(meter_number: str, metric_filename: str) -> str:
    return f"{meter_number}-{metric_filename}.png"


def chart_storage_path(client_name: str, site_name: str, meter_number: str, metric_filename: str) -> str:
    """``{Client}/{Site}/Metering/Reconciliations/Graphs/{meter}-{metric}.png``"""
    return "/".join(
        (
            sanitize_name(client_name),
            sanitize_name(site_name),
            CHARTS_SECTION,
            CHARTS_SUBPATH,
            chart_file_name(meter_number, metric_filename),
        )
    )
