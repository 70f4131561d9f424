"""Helper functions for creating matplotlib plots in examples."""

import inspect
import os
from typing import Optional

import matplotlib.pyplot as plt

from drink_builder import DrinkBuilder
from drink_builder.visualize import plot_cup, plot_price_breakdown


def generate_example_plots(
    name: str, builder: DrinkBuilder, output_dir: Optional[str] = None
) -> None:
    """Save the cup layers and the price breakdown of the current drink.

    Args:
        name: Base name for the plots (e.g., "basic_usage")
        builder: Builder holding the drink to render
        output_dir: Optional output directory (defaults to caller's directory)
    """
    if output_dir is None:
        caller_file = inspect.stack()[1].filename
        output_dir = os.path.dirname(os.path.abspath(caller_file))

    title = name.replace("_", " ").title()
    cup_file = os.path.join(output_dir, f"{name}_cup.png")
    price_file = os.path.join(output_dir, f"{name}_price.png")

    fig = plot_cup(
        builder.volumes,
        builder.configuration.mode,
        title=f"{title}: {builder.configuration.mode.value}",
        target_ml=builder.catalog.settings.volume_target,
        show=False,
        save_path=cup_file,
    )
    plt.close(fig)
    print(f"  Plot saved: {cup_file}")

    fig = plot_price_breakdown(builder.price_breakdown(), show=False, save_path=price_file)
    plt.close(fig)
    print(f"  Plot saved: {price_file}")
