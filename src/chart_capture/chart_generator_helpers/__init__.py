"""Helpers used by the chart renderer."""

from .chart_figure import figure_to_png, open_chart_figure
from .chart_styler import ChartStyler
from .value_formatter import build_value_formatter

__all__ = ["ChartStyler", "build_value_formatter", "figure_to_png", "open_chart_figure"]
