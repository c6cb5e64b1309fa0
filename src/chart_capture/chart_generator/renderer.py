"""Render a reconciliation chart series into PNG bytes."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Sequence

from ..chart_generator_helpers import ChartStyler, build_value_formatter, figure_to_png, open_chart_figure
from ..data_models import ChartDataPoint
from .dependencies import np, plt, ticker
from .exceptions import InsufficientDataError

logger = logging.getLogger(__name__)

EMPTY_IMAGE = b""
CURRENCY_UNIT = "R"

# pyplot keeps global figure state; renders may arrive from worker threads
_PYPLOT_LOCK = threading.Lock()


def _as_array(values: Sequence[Optional[float]]):
    return np.array([np.nan if value is None else float(value) for value in values], dtype=float)


class ChartRenderer:
    """
    Deterministic chart renderer.

    ``render`` never raises: empty or all-null input, and any failure inside
    matplotlib, produce ``EMPTY_IMAGE`` which callers treat as a render failure.
    """

    def __init__(self, styler: Optional[ChartStyler] = None):
        self.styler = styler or ChartStyler()

    def render(self, title: str, unit: str, series: Sequence[ChartDataPoint]) -> bytes:
        """
        Draw the document and reconciled bars for a series.

        Args:
            title: Chart title, usually ``"<meter number> - <metric title>"``
            unit: Unit shown on the y axis
            series: Points ordered by billing period

        Returns:
            PNG bytes, or ``EMPTY_IMAGE`` when nothing could be drawn
        """
        try:
            with _PYPLOT_LOCK:
                return self._render(title, unit, series)
        except InsufficientDataError as exc:
            logger.info("Skipping chart %r: %s", title, exc)
            return EMPTY_IMAGE
        except Exception:  # contract: rendering failures surface as the empty sentinel
            logger.exception("Chart rendering failed for %r", title)
            return EMPTY_IMAGE

    def _render(self, title: str, unit: str, series: Sequence[ChartDataPoint]) -> bytes:
        if not series:
            raise InsufficientDataError("series is empty")

        document_values = _as_array([point.document_amount for point in series])
        reconciled_values = _as_array([point.reconciled_amount for point in series])
        if np.all(np.isnan(document_values)) and np.all(np.isnan(reconciled_values)):
            raise InsufficientDataError("series has no values")

        labels = [point.period_label for point in series]
        positions = np.arange(len(series))
        formatter = build_value_formatter(is_consumption=unit != CURRENCY_UNIT)

        with open_chart_figure(plt, self.styler) as (fig, ax):
            self._draw(ax, positions, labels, document_values, reconciled_values)
            ax.yaxis.set_major_formatter(ticker.FuncFormatter(lambda value, _pos: formatter(value)))
            heading = f"{title} ({unit})" if unit else title
            ax.set_title(heading, color=self.styler.text_color, fontsize=12, fontweight="bold")
            return figure_to_png(fig, self.styler)

    def _draw(self, ax, positions, labels, document_values, reconciled_values) -> None:
        ax.set_facecolor(self.styler.background_color)
        ax.grid(True, linestyle="--", color=self.styler.grid_color, zorder=0)

        document_mask = ~np.isnan(document_values)
        ax.bar(
            positions[document_mask],
            document_values[document_mask],
            color=self.styler.document_color,
            width=0.6,
            label="Document Billed",
            zorder=2,
        )
        # NaN gaps break the line so missing reconciliations are not bridged
        ax.plot(
            positions,
            reconciled_values,
            color=self.styler.reconciled_color,
            linewidth=2,
            marker="o",
            label="Reconciliation",
            zorder=3,
        )

        ax.set_xticks(positions)
        ax.set_xticklabels(labels, rotation=45, ha="right", fontsize=9)
        ax.tick_params(axis="y", labelsize=9)
        ax.legend(loc="upper center", bbox_to_anchor=(0.5, 1.12), ncol=2, frameon=False)


_default_renderer: Optional[ChartRenderer] = None


def render_chart(title: str, unit: str, series: Sequence[ChartDataPoint]) -> bytes:
    """Render with a shared default renderer."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = ChartRenderer()
    return _default_renderer.render(title, unit, series)


__all__ = ["CURRENCY_UNIT", "EMPTY_IMAGE", "ChartRenderer", "render_chart"]
