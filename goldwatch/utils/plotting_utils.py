"""
Plotting utility functions for GoldWatch.

Renders the price trend shown on the dashboard.
"""

import io
from typing import Optional, Tuple

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter

from .formatting import format_idr_short

# Dashboard palette
PRICE_COLOR = "#f59e0b"
GRID_COLOR = "#334155"
AXIS_COLOR = "#64748b"
BACKGROUND_COLOR = "#0f172a"
THRESHOLD_COLOR = "#ef4444"


def set_plotting_style():
    """Set consistent plotting style for the dark dashboard."""
    plt.rcParams.update({
        "figure.dpi": 100,
        "axes.titlesize": 13,
        "axes.labelsize": 11,
        "xtick.labelsize": 9,
        "ytick.labelsize": 9,
        "legend.fontsize": 9,
        "axes.facecolor": BACKGROUND_COLOR,
        "figure.facecolor": BACKGROUND_COLOR,
        "axes.edgecolor": GRID_COLOR,
        "xtick.color": AXIS_COLOR,
        "ytick.color": AXIS_COLOR,
        "text.color": AXIS_COLOR,
    })


def plot_price_history(
    history,
    threshold: Optional[float] = None,
    title: str = "Historical Trend",
    figsize: Tuple[int, int] = (10, 4),
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Plot the price history as a filled area chart.

    Args:
        history: PriceHistory instance
        threshold: Optional alert threshold drawn as a dashed line
        title: Plot title
        figsize: Figure size
        save_path: Optional path to save figure

    Returns:
        Matplotlib figure object
    """
    set_plotting_style()
    fig, ax = plt.subplots(figsize=figsize)

    points = history.points()

    if not points:
        ax.text(
            0.5, 0.5, "Start monitoring to see price movement chart...",
            ha="center", va="center", transform=ax.transAxes,
            fontstyle="italic", color=AXIS_COLOR,
        )
        ax.set_xticks([])
        ax.set_yticks([])
    else:
        x = list(range(len(points)))
        prices = [p.price for p in points]
        labels = [p.time for p in points]

        ax.plot(x, prices, color=PRICE_COLOR, linewidth=2.5, label="Price")
        ax.fill_between(x, prices, min(prices), color=PRICE_COLOR, alpha=0.15)

        if threshold and threshold > 0:
            ax.axhline(
                y=threshold, color=THRESHOLD_COLOR, linestyle="--",
                linewidth=1, label="Threshold",
            )

        # Thin out x labels so they stay readable at 30 points
        step = max(1, len(x) // 8)
        ax.set_xticks(x[::step])
        ax.set_xticklabels(labels[::step])

        ax.yaxis.set_major_formatter(FuncFormatter(lambda val, _pos: format_idr_short(val)))
        ax.grid(axis="y", color=GRID_COLOR, linestyle="--", linewidth=0.5)
        ax.legend(loc="upper left", frameon=False)

    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)

    ax.set_title(title, loc="left")

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def render_price_chart_png(history, threshold: Optional[float] = None) -> bytes:
    """
    Render the price history to PNG bytes for the dashboard.

    Args:
        history: PriceHistory instance
        threshold: Optional alert threshold

    Returns:
        PNG image bytes
    """
    fig = plot_price_history(history, threshold=threshold)
    try:
        buf = io.BytesIO()
        fig.savefig(buf, format="png", facecolor=fig.get_facecolor())
        return buf.getvalue()
    finally:
        plt.close(fig)
