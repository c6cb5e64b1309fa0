"""Y-axis tick formatting for currency and consumption charts"""

from __future__ import annotations

from typing import Callable


def _format_consumption(value: float) -> str:
    return f"{value:,.0f}"


def _format_currency_thousands(value: float) -> str:
    return f"R{value / 1000:.0f}k"


def build_value_formatter(*, is_consumption: bool) -> Callable[[float], str]:
    """Return the tick label function for a metric family"""
    if is_consumption:
        return _format_consumption
    return _format_currency_thousands
