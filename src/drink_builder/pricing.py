"""Price composition for drink configurations.

The price is a sum of independently computed line items. Each line item has
its own function so it can be checked in isolation; compute_price() sums them
and rounds the total to whole currency units.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from drink_builder.models.catalog import Catalog, CarrierKind, PricingConfig
from drink_builder.models.drink import Base, Booster, DrinkConfiguration, FlavorPortion, Mode

WHIPPED_FINISH_ID = "WHIPPED"
FLAVOR_PORTION_ML = 10
MAX_REASONABLE_PRICE = 10000

# Recommendation thresholds
HIGH_PRICE_THRESHOLD = 500
HIGH_EXTRA_FLAVORS_THRESHOLD = 100


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class PriceBreakdown:
    """Line items of a drink price; total is the rounded sum."""

    base_price: float
    extra_shots: float
    extra_flavors: float
    carrier_surcharge: float
    foam_surcharge: float
    frappe_surcharge: float
    premium_plant_surcharge: float
    boosters: float
    total: int


@dataclass(frozen=True)
class PriceLineItem:
    """Labeled line item for display."""

    label: str
    value: float


@dataclass(frozen=True)
class PriceValidation:
    """Result of the price sanity check."""

    is_valid: bool
    message: Optional[str] = None


def calculate_base_price(base: Base, pricing: PricingConfig) -> float:
    """Base price: included for one or more shots or any coffee-free base."""
    if base.is_coffee:
        return pricing.base_price if base.shots > 0 else 0
    return pricing.base_price


def calculate_extra_shots_price(base: Base, pricing: PricingConfig) -> float:
    """Every coffee shot beyond the first is charged separately."""
    if base.is_coffee and base.shots > 1:
        return (base.shots - 1) * pricing.extra_shot
    return 0


def calculate_extra_flavors_price(
    flavors: Sequence[FlavorPortion], pricing: PricingConfig, default_flavor_ml: int
) -> float:
    """
    Charge flavor volume above the included default, per flavor.

    Each flavor gets its own allowance of ``default_flavor_ml``; the excess is
    charged per started 10 ml portion.

    Examples:
        25 ml with a 10 ml default -> 15 ml excess -> 2 portions
        15 ml with a 10 ml default -> 5 ml excess -> 1 portion
    """
    extra_price = 0.0
    for portion in flavors:
        if portion.ml > default_flavor_ml:
            extra_ml = portion.ml - default_flavor_ml
            extra_portions = math.ceil(extra_ml / FLAVOR_PORTION_ML)
            extra_price += extra_portions * pricing.extra_flavor_per_10ml
    return extra_price


def calculate_carrier_surcharge(carrier_id: str, catalog: Catalog) -> float:
    """Surcharge configured on the carrier entry, 0 for unknown carriers."""
    carrier = catalog.find_carrier(carrier_id)
    if carrier is None:
        return 0
    return carrier.surcharge or 0


def calculate_foam_surcharge(
    foam_level: int, finishes: Sequence[str], pricing: PricingConfig
) -> float:
    """Whipped cream surcharge.

    Only the WHIPPED finish is charged; the numeric foam level is free.
    """
    if WHIPPED_FINISH_ID in finishes:
        return pricing.whipped_surcharge
    return 0


def calculate_frappe_surcharge(mode: Mode, pricing: PricingConfig) -> float:
    return pricing.frappe_blend_surcharge if mode == Mode.FRAPPE else 0


def calculate_premium_plant_surcharge(carrier_id: str, catalog: Catalog) -> float:
    """Premium surcharge for plant carriers that already carry a surcharge.

    Stacks with calculate_carrier_surcharge rather than replacing it.
    """
    carrier = catalog.find_carrier(carrier_id)
    if carrier is not None and carrier.kind == CarrierKind.PLANT and carrier.surcharge:
        return catalog.pricing.premium_plant_surcharge
    return 0


def calculate_boosters_price(boosters: Sequence[Booster]) -> float:
    return sum(booster.surcharge or 0 for booster in boosters)


def compute_price(configuration: DrinkConfiguration, catalog: Catalog) -> PriceBreakdown:
    """
    Calculate the price breakdown of a configuration.

    Args:
        configuration: Drink configuration
        catalog: Reference catalog with pricing constants, settings and carriers

    Returns:
        PriceBreakdown with every line item and the total rounded half-up to
        whole currency units

    Example:
        >>> config = DrinkConfiguration(flavors=(FlavorPortion("VANILLA", 15),))
        >>> compute_price(config, catalog).total
        210
    """
    pricing = catalog.pricing

    base_price = calculate_base_price(configuration.base, pricing)
    extra_shots = calculate_extra_shots_price(configuration.base, pricing)
    extra_flavors = calculate_extra_flavors_price(
        configuration.flavors, pricing, catalog.settings.default_flavor_ml
    )
    carrier_surcharge = calculate_carrier_surcharge(configuration.carrier, catalog)
    foam_surcharge = calculate_foam_surcharge(
        configuration.foam_level, configuration.finishes, pricing
    )
    frappe_surcharge = calculate_frappe_surcharge(configuration.mode, pricing)
    premium_plant_surcharge = calculate_premium_plant_surcharge(configuration.carrier, catalog)
    boosters = calculate_boosters_price(configuration.boosters)

    total = (
        base_price
        + extra_shots
        + extra_flavors
        + carrier_surcharge
        + foam_surcharge
        + frappe_surcharge
        + premium_plant_surcharge
        + boosters
    )

    return PriceBreakdown(
        base_price=base_price,
        extra_shots=extra_shots,
        extra_flavors=extra_flavors,
        carrier_surcharge=carrier_surcharge,
        foam_surcharge=foam_surcharge,
        frappe_surcharge=frappe_surcharge,
        premium_plant_surcharge=premium_plant_surcharge,
        boosters=boosters,
        total=_round_half_up(total),
    )


# Display order of the breakdown line items
_LINE_ITEM_LABELS = (
    ("base_price", "Base price"),
    ("extra_shots", "Extra shots"),
    ("extra_flavors", "Extra flavors"),
    ("carrier_surcharge", "Carrier surcharge"),
    ("foam_surcharge", "Whipped cream"),
    ("frappe_surcharge", "FRAPPE blend"),
    ("premium_plant_surcharge", "Premium plant milk"),
    ("boosters", "Boosters"),
)


def price_breakdown_items(breakdown: PriceBreakdown) -> List[PriceLineItem]:
    """Nonzero line items in display order."""
    items = []
    for attribute, label in _LINE_ITEM_LABELS:
        value = getattr(breakdown, attribute)
        if value > 0:
            items.append(PriceLineItem(label=label, value=value))
    return items


def calculate_discount(price: float, discount_percent: float) -> int:
    return _round_half_up(price * (discount_percent / 100))


def apply_discount(price: float, discount_percent: float) -> float:
    """Apply a percentage discount; the result never goes below 0."""
    return max(0, price - calculate_discount(price, discount_percent))


def validate_price(price: float) -> PriceValidation:
    """Sanity check: prices must be non-negative and at most 10,000."""
    if price < 0:
        return PriceValidation(is_valid=False, message="Price cannot be negative")
    if price > MAX_REASONABLE_PRICE:
        return PriceValidation(is_valid=False, message="Price is too high")
    return PriceValidation(is_valid=True)


def price_recommendations(breakdown: PriceBreakdown) -> List[str]:
    recommendations: List[str] = []

    if breakdown.total > HIGH_PRICE_THRESHOLD:
        recommendations.append("High price - consider simplifying the recipe")

    if breakdown.extra_flavors > HIGH_EXTRA_FLAVORS_THRESHOLD:
        recommendations.append("Many extra flavors - consider picking one main flavor")

    if breakdown.frappe_surcharge > 0 and breakdown.extra_shots > 0:
        recommendations.append("FRAPPE with extra shots - a very strong drink")

    return recommendations
