"""Visualization utilities for drink builds.

This module provides functions to render the volume layers of a drink and its
price breakdown.
"""

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from drink_builder.models.drink import Mode, VolumeBreakdown
from drink_builder.pricing import PriceBreakdown, price_breakdown_items
from drink_builder.volume_calculator import TARGET_TOTAL_ML

# Bottom-to-top pour order of the liquid layers
LAYER_ORDER = ("base", "flavors", "carrier", "foam")

LAYER_COLORS = {
    "base": "#8B4513",
    "flavors": "#D2691E",
    "carrier": "#F5F5DC",
    "foam": "#FFFACD",
    "ice": "#B3D9FF",
}


def _layer_volumes(volumes: VolumeBreakdown) -> np.ndarray:
    return np.array(
        [volumes.base_ml, volumes.flavors_ml, volumes.carrier_ml, volumes.foam_ml],
        dtype=float,
    )


def plot_cup(
    volumes: VolumeBreakdown,
    mode: Optional[Mode] = None,
    title: Optional[str] = None,
    target_ml: int = TARGET_TOTAL_ML,
    show: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Plot the drink as stacked cup layers.

    The liquid layers (base, flavors, carrier, foam) are stacked bottom to
    top in one bar; ice gets its own hatched bar next to it. A dashed line
    marks the cup target.

    Args:
        volumes: Volume breakdown to render
        mode: Drink mode, shown in the auto-generated title
        title: Optional custom title (default: auto-generated)
        target_ml: Cup target line (default: 250 ml)
        show: Whether to display the plot (default: True)
        save_path: Optional path to save the figure

    Returns:
        matplotlib Figure object

    Example:
        >>> from drink_builder import DrinkBuilder
        >>> builder = DrinkBuilder()
        >>> plot_cup(builder.volumes, builder.configuration.mode)
    """
    if volumes.total_ml <= 0:
        raise ValueError("Cannot plot an empty cup")

    layers = _layer_volumes(volumes)
    bottoms = np.concatenate(([0.0], np.cumsum(layers)[:-1]))

    fig, ax = plt.subplots(figsize=(6, 7))

    if title is None:
        mode_label = f"{mode.value} " if mode is not None else ""
        title = f"{mode_label}Drink Layers\nTotal: {volumes.total_ml} ml"
    fig.suptitle(title, fontsize=14, fontweight="bold")

    for name, height, bottom in zip(LAYER_ORDER, layers, bottoms):
        if height <= 0:
            continue
        ax.bar(
            0,
            height,
            bottom=bottom,
            width=0.6,
            color=LAYER_COLORS[name],
            edgecolor="black",
            label=f"{name.capitalize()} ({height:.0f} ml)",
        )

    if volumes.ice_ml > 0:
        ax.bar(
            1,
            volumes.ice_ml,
            width=0.6,
            color=LAYER_COLORS["ice"],
            edgecolor="black",
            hatch="//",
            label=f"Ice ({volumes.ice_ml} ml)",
        )

    ax.axhline(
        target_ml,
        color="red",
        linestyle="--",
        linewidth=2,
        label=f"Cup Target ({target_ml} ml)",
    )
    ax.set_xticks([0, 1])
    ax.set_xticklabels(["Liquid", "Ice"])
    ax.set_xlim(-0.6, 1.6)
    ax.set_ylim(0, max(float(layers.sum()), volumes.ice_ml, target_ml) * 1.1)
    ax.set_ylabel("Volume (ml)")
    ax.legend(loc="upper right")
    ax.grid(True, axis="y", alpha=0.3)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    if show:
        plt.show()

    return fig


def plot_price_breakdown(
    breakdown: PriceBreakdown,
    title: Optional[str] = None,
    show: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Plot the nonzero price line items as horizontal bars.

    Args:
        breakdown: Price breakdown to render
        title: Optional custom title (default: shows the total)
        show: Whether to display the plot
        save_path: Optional path to save the figure

    Returns:
        matplotlib Figure object
    """
    items = price_breakdown_items(breakdown)
    if not items:
        raise ValueError("Cannot plot a price breakdown without line items")

    labels = [item.label for item in items]
    values = np.array([item.value for item in items], dtype=float)
    positions = np.arange(len(items))

    fig, ax = plt.subplots(figsize=(8, 1 + 0.5 * len(items)))
    ax.barh(positions, values, color="#A0522D")
    ax.set_yticks(positions)
    ax.set_yticklabels(labels)
    ax.invert_yaxis()
    ax.set_xlabel("Price")
    ax.set_title(title if title is not None else f"Price Breakdown (total {breakdown.total})")
    ax.grid(True, axis="x", alpha=0.3)

    for position, value in zip(positions, values):
        ax.text(value, position, f" {value:g}", va="center")

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    if show:
        plt.show()

    return fig
