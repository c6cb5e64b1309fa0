"""Chart rendering on matplotlib's Agg backend."""

from .exceptions import InsufficientDataError
from .renderer import CURRENCY_UNIT, EMPTY_IMAGE, ChartRenderer, render_chart

__all__ = [
    "CURRENCY_UNIT",
    "EMPTY_IMAGE",
    "ChartRenderer",
    "InsufficientDataError",
    "render_chart",
]
