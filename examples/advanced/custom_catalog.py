"""Custom catalog and preset example.

This example demonstrates:
- Loading every preset and seeing how the builder corrects them
- Checking options before selecting them
- Updating catalog pricing at runtime, and what a rejected update does
- Saving and restoring a drink

Shows how to adapt the builder to your own menu.
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from plot_helper import generate_example_plots

from drink_builder import CatalogStore, CatalogValidationError, DrinkBuilder, Mode
from drink_builder.logging_utils import configure_logging


def compare_presets(builder: DrinkBuilder) -> None:
    print("\nPresets:")
    print(f"  {'Preset':<22} {'Mode':<8} {'Total':<8} {'Price':<8} {'Corrections'}")
    print("  " + "-" * 70)

    for preset in builder.catalog.presets:
        snapshot = builder.load_preset(preset)
        config = snapshot.configuration
        corrections = []
        if config.ice_level != preset.ice_level:
            corrections.append(f"ice {preset.ice_level}->{config.ice_level}")
        if config.foam_level != preset.foam_level:
            corrections.append(f"foam {preset.foam_level}->{config.foam_level}")
        print(
            f"  {preset.id:<22} {config.mode.value:<8} {snapshot.volumes.total_ml:<8} "
            f"{snapshot.price:<8} {', '.join(corrections) or '-'}"
        )


def check_carriers(builder: DrinkBuilder) -> None:
    print("\nCarriers for a hot drink:")
    builder.set_mode(Mode.HOT)
    for carrier in builder.catalog.carriers:
        result = builder.is_option_compatible("carrier", carrier.id)
        status = "ok" if result.compatible else f"unavailable ({result.reason})"
        print(f"  {carrier.id:<14} {status}")


def update_pricing(store: CatalogStore, builder: DrinkBuilder) -> None:
    print("\nCatalog updates:")
    pricing = store.raw["pricing"]
    pricing["base_price"] = 210
    store.update({"pricing": pricing})

    # The new price applies on the next commit
    builder.load_preset("classic_cappuccino")
    print(f"  base price raised to 210 -> cappuccino costs {builder.price}")

    try:
        store.update({"presets": []})
    except CatalogValidationError as e:
        print(f"  rejected: {'; '.join(e.errors)}")
    print(f"  presets still available: {len(store.get().presets)}")


def main():
    configure_logging()
    print("=" * 80)
    print("CUSTOM CATALOG EXAMPLE")
    print("=" * 80)

    builder = DrinkBuilder.from_config()
    store = builder.catalog_store

    compare_presets(builder)
    check_carriers(builder)
    update_pricing(store, builder)

    builder.load_preset("caramel_frappe")
    saved = json.dumps(builder.export_snapshot(), indent=2)
    print("\nSaved drink:")
    print(saved)

    restored = DrinkBuilder(catalog_store=store)
    restored.restore_snapshot(json.loads(saved))
    print(f"\nRestored: {restored!r}")

    print("\n" + "=" * 80)
    print("GENERATING PLOTS")
    print("=" * 80)
    generate_example_plots("caramel_frappe", restored)
    print()


if __name__ == "__main__":
    main()
