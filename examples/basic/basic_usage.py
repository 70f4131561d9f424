"""Basic usage example.

This example demonstrates:
- Starting from the default drink
- Changing mode, carrier and flavors one step at a time
- Reading the derived volumes, price and warnings after every step

This is the simplest way to use the drink builder.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from plot_helper import generate_example_plots

from drink_builder import DrinkBuilder, Mode
from drink_builder.logging_utils import configure_logging


def print_state(builder: DrinkBuilder, step: str) -> None:
    volumes = builder.volumes
    print(f"\n{step}")
    print("  " + "-" * 70)
    print(
        f"  base {volumes.base_ml} | flavors {volumes.flavors_ml} | "
        f"carrier {volumes.carrier_ml} | foam {volumes.foam_ml} | ice {volumes.ice_ml} "
        f"-> total {volumes.total_ml} ml"
    )
    print(f"  price: {builder.price}")
    for warning in builder.warnings:
        print(f"  ! {warning}")
    for option in builder.disabled_options:
        print(f"  x {option} is unavailable")


def main():
    """Build an iced vanilla oat latte step by step."""
    configure_logging()

    print("=" * 80)
    print("BASIC DRINK BUILDER USAGE")
    print("=" * 80)

    builder = DrinkBuilder()
    print_state(builder, "Default drink")

    builder.add_flavor("VANILLA", ml=15)
    print_state(builder, "Added 15 ml vanilla")

    builder.set_carrier("MILK_OAT")
    print_state(builder, "Switched to oat milk")

    # Ice stays at 0 here, so the builder tops up the carrier
    builder.set_foam_level(0)
    builder.set_mode(Mode.ICED)
    print_state(builder, "Switched to ICED")

    builder.set_ice_level(1)
    print_state(builder, "Added ice")

    print("\nRecommendations:")
    recommendations = builder.volume_recommendations() + builder.compatibility_recommendations()
    for recommendation in recommendations or ["None - the drink is balanced"]:
        print(f"  - {recommendation}")

    print("\n" + "=" * 80)
    print("GENERATING PLOTS")
    print("=" * 80)
    generate_example_plots("basic_usage", builder)
    print()


if __name__ == "__main__":
    main()
