"""Figure lifecycle for a single chart: open sized axes, encode PNG, always close."""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Tuple

from .chart_styler import ChartStyler

if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure

logger = logging.getLogger(__name__)


@contextmanager
def open_chart_figure(plt, styler: ChartStyler) -> Iterator[Tuple[Figure, Axes]]:
    """Yield ``(fig, ax)`` sized by ``styler``; the figure is closed on exit."""
    fig, ax = plt.subplots(
        figsize=(styler.chart_width_inches, styler.chart_height_inches),
        dpi=styler.dpi,
        facecolor=styler.background_color,
    )
    try:
        yield fig, ax
    finally:
        try:
            plt.close(fig)
        except (RuntimeError, ValueError, TypeError) as close_error:
            logger.warning("Failed to close chart figure: %s", close_error)


def figure_to_png(fig: Figure, styler: ChartStyler) -> bytes:
    buffer = io.BytesIO()
    fig.savefig(
        buffer,
        format="png",
        dpi=styler.dpi,
        bbox_inches="tight",
        facecolor=styler.background_color,
        edgecolor="none",
    )
    return buffer.getvalue()
