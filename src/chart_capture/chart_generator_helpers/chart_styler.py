"""Helper for chart styling and configuration"""

from __future__ import annotations


class ChartStyler:
    """Provides chart styling configuration"""

    def __init__(self):
        # 900x500 px at 100 dpi, rendered at 2x scale
        self.chart_width_inches = 9
        self.chart_height_inches = 5
        self.dpi = 200

        self.background_color = "#ffffff"
        self.grid_color = "#e5e7eb"
        self.document_color = "#9ca3af"  # Grey bars for billed amounts
        self.reconciled_color = "#2563eb"  # Blue line for reconciliation
        self.text_color = "#111827"
