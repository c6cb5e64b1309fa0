"""Chart series assembly."""

from .assembler import ChartDataAssembler, build_series, format_period_label, match_reconciled_values
from .reconciliation_values import reconciled_value

__all__ = [
    "ChartDataAssembler",
    "build_series",
    "format_period_label",
    "match_reconciled_values",
    "reconciled_value",
]
