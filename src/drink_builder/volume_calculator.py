"""Volume calculation and balancing for drink configurations.

Every drink targets a 250 ml cup. The carrier liquid is the balancing
component: it fills whatever the base and flavors leave free in the mode's
liquid target. FRAPPE uses a fixed recipe instead of balancing.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from drink_builder.logging_utils import get_logger
from drink_builder.models.drink import Base, DrinkConfiguration, Mode, VolumeBreakdown

logger = get_logger(__name__)

SHOT_ML = 30
NON_COFFEE_BASE_ML = 55  # Matcha, cocoa, chai, fruit, tonic
FOAM_ML_PER_LEVEL = 10

TARGET_TOTAL_ML = 250
VOLUME_TOLERANCE_ML = 10

HOT_LIQUID_TARGET_ML = 230
ICED_LIQUID_TARGET_ML = 180
ICED_ICE_ML = {0: 0, 1: 70, 2: 90}

FRAPPE_CARRIER_ML = 120
FRAPPE_FLAVOR_CAP_ML = 20
FRAPPE_ICE_ML = 100
FRAPPE_TOTAL_ML = 240

# Recommendation thresholds
FRAPPE_MAX_FLAVOR_ML = 25
MAX_FLAVOR_ML = 30


@dataclass(frozen=True)
class VolumeValidation:
    """Result of comparing a volume breakdown against the cup target.

    Attributes:
        is_valid: True when the total is within tolerance of the target
        deviation_ml: Absolute difference between total and target
        message: Excess/deficit description when invalid
    """

    is_valid: bool
    deviation_ml: int
    message: Optional[str] = None


def calculate_base_volume(base: Optional[Base]) -> int:
    """
    Calculate the base volume.

    Args:
        base: Drink base, or None when unspecified

    Returns:
        shots x 30 ml for coffee, 55 ml for any other base, 0 when unspecified

    Examples:
        >>> calculate_base_volume(Base.coffee(2))
        60
    """
    if base is None:
        return 0
    if base.is_coffee:
        return base.shots * SHOT_ML
    return NON_COFFEE_BASE_ML


def calculate_ice_volume(ice_level: int) -> int:
    """Ice volume for an ICED drink: 0, 70 or 90 ml."""
    return ICED_ICE_ML[ice_level]


def calculate_foam_volume(foam_level: int) -> int:
    """Foam volume: 10 ml per level."""
    return foam_level * FOAM_ML_PER_LEVEL


def calculate_carrier_volume(mode: Mode, base_ml: int, flavors_ml: int) -> int:
    """
    Calculate the carrier volume that balances the liquid target.

    Foam sits on top of the liquid and ice is not part of the liquid target,
    so neither is subtracted here.

    Args:
        mode: Drink mode
        base_ml: Base volume
        flavors_ml: Combined flavor volume

    Returns:
        Carrier volume in ml, never negative. Always 120 ml for FRAPPE.
    """
    if mode == Mode.HOT:
        return max(0, HOT_LIQUID_TARGET_ML - base_ml - flavors_ml)
    elif mode == Mode.ICED:
        return max(0, ICED_LIQUID_TARGET_ML - base_ml - flavors_ml)
    elif mode == Mode.FRAPPE:
        return FRAPPE_CARRIER_ML
    else:
        raise ValueError(f"Unknown mode: {mode}")


def calculate_frappe_volumes(configuration: DrinkConfiguration) -> VolumeBreakdown:
    """
    Calculate volumes for a FRAPPE drink.

    FRAPPE is a fixed blend: flavors are silently capped at 20 ml, the
    carrier is 120 ml, ice is 100 ml, foam is dropped and the total is always
    240 ml.
    """
    base_ml = calculate_base_volume(configuration.base)
    flavors_ml = min(configuration.total_flavor_ml, FRAPPE_FLAVOR_CAP_ML)
    carrier_ml = FRAPPE_CARRIER_ML

    return VolumeBreakdown(
        base_ml=base_ml,
        flavors_ml=flavors_ml,
        carrier_ml=carrier_ml,
        foam_ml=0,
        ice_ml=FRAPPE_ICE_ML,
        total_ml=FRAPPE_TOTAL_ML,
        liquid_ml=base_ml + flavors_ml + carrier_ml,
    )


def compute_volumes(configuration: DrinkConfiguration) -> VolumeBreakdown:
    """
    Calculate the per-component volume breakdown of a configuration.

    Args:
        configuration: Drink configuration

    Returns:
        VolumeBreakdown with liquid = base + flavors + carrier + foam and
        total = liquid + ice (FRAPPE follows calculate_frappe_volumes)

    Example:
        >>> config = DrinkConfiguration(flavors=(FlavorPortion("VANILLA", 15),))
        >>> compute_volumes(config).carrier_ml
        185
    """
    if configuration.mode == Mode.FRAPPE:
        return calculate_frappe_volumes(configuration)

    base_ml = calculate_base_volume(configuration.base)
    flavors_ml = configuration.total_flavor_ml
    foam_ml = calculate_foam_volume(configuration.foam_level)
    ice_ml = calculate_ice_volume(configuration.ice_level) if configuration.mode == Mode.ICED else 0

    carrier_ml = calculate_carrier_volume(configuration.mode, base_ml, flavors_ml)

    liquid_ml = base_ml + flavors_ml + carrier_ml + foam_ml
    return VolumeBreakdown(
        base_ml=base_ml,
        flavors_ml=flavors_ml,
        carrier_ml=carrier_ml,
        foam_ml=foam_ml,
        ice_ml=ice_ml,
        total_ml=liquid_ml + ice_ml,
        liquid_ml=liquid_ml,
    )


def validate_volumes(
    volumes: VolumeBreakdown, mode: Mode, target_ml: int = TARGET_TOTAL_ML
) -> VolumeValidation:
    """
    Check the total volume against the cup target with a ±10 ml tolerance.

    This is advisory: an invalid result feeds recommendations and balancing,
    it never blocks a configuration.

    Args:
        volumes: Volume breakdown to check
        mode: Drink mode the breakdown was computed for
        target_ml: Cup target (default: 250 ml)

    Returns:
        VolumeValidation with the absolute deviation and, when invalid, an
        excess or deficit message
    """
    deviation = abs(volumes.total_ml - target_ml)

    if deviation <= VOLUME_TOLERANCE_ML:
        return VolumeValidation(is_valid=True, deviation_ml=deviation)

    if volumes.total_ml > target_ml:
        message = f"Volume excess of {deviation} ml"
    else:
        message = f"Volume deficit of {deviation} ml"

    logger.debug("%s drink off target: %s", mode.value, message)
    return VolumeValidation(is_valid=False, deviation_ml=deviation, message=message)


def balance_volumes(
    configuration: DrinkConfiguration, target_ml: int = TARGET_TOTAL_ML
) -> VolumeBreakdown:
    """
    Compute volumes and correct the carrier if the total misses the target.

    This is a single corrective step: only the carrier is adjusted, by
    exactly the deviation, floored at 0 ml. Liquid and total are recomputed
    from the adjusted carrier.

    Args:
        configuration: Drink configuration
        target_ml: Cup target (default: 250 ml)

    Returns:
        Balanced VolumeBreakdown (unchanged when already within tolerance)
    """
    volumes = compute_volumes(configuration)
    validation = validate_volumes(volumes, configuration.mode, target_ml)

    if validation.is_valid:
        return volumes

    adjustment = target_ml - volumes.total_ml
    carrier_ml = max(0, volumes.carrier_ml + adjustment)
    liquid_ml = volumes.base_ml + volumes.flavors_ml + carrier_ml + volumes.foam_ml

    logger.debug(
        "Balanced carrier %d -> %d ml (target %d ml)", volumes.carrier_ml, carrier_ml, target_ml
    )
    return VolumeBreakdown(
        base_ml=volumes.base_ml,
        flavors_ml=volumes.flavors_ml,
        carrier_ml=carrier_ml,
        foam_ml=volumes.foam_ml,
        ice_ml=volumes.ice_ml,
        total_ml=liquid_ml + volumes.ice_ml,
        liquid_ml=liquid_ml,
    )


def volumes_to_percentages(volumes: VolumeBreakdown) -> Dict[str, float]:
    """
    Express each component as a percentage of the total volume.

    Args:
        volumes: Volume breakdown

    Returns:
        Mapping with keys base, flavors, carrier, foam and ice

    Raises:
        ZeroDivisionError: If the total volume is 0
    """
    total = volumes.total_ml
    return {
        "base": volumes.base_ml / total * 100,
        "flavors": volumes.flavors_ml / total * 100,
        "carrier": volumes.carrier_ml / total * 100,
        "foam": volumes.foam_ml / total * 100,
        "ice": volumes.ice_ml / total * 100,
    }


def volume_recommendations(configuration: DrinkConfiguration) -> List[str]:
    """
    Collect advisory volume recommendations for a configuration.

    Recommendations are computed from the raw (unbalanced) volumes. Syrup
    advice judges the requested amounts, since FRAPPE volumes cap them.
    """
    recommendations: List[str] = []
    volumes = compute_volumes(configuration)
    validation = validate_volumes(volumes, configuration.mode)

    if not validation.is_valid and validation.message:
        recommendations.append(validation.message)

    if configuration.mode == Mode.ICED:
        if volumes.ice_ml == 0:
            recommendations.append("Add ice to a cold drink")
    elif configuration.mode == Mode.FRAPPE:
        if configuration.total_flavor_ml > FRAPPE_MAX_FLAVOR_ML:
            recommendations.append(f"Keep FRAPPE syrups at or under {FRAPPE_MAX_FLAVOR_ML} ml")

    if configuration.total_flavor_ml > MAX_FLAVOR_ML:
        recommendations.append("Too much syrup may overpower the base flavor")

    if volumes.flavors_ml == 0 and configuration.sweetness_level > 0:
        recommendations.append("Add a syrup to reach the selected sweetness")

    return recommendations
