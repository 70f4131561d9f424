"""Compatibility rules for drink configurations.

Rules are declarative records evaluated uniformly against a configuration and
the reference catalog. Each rule either warns, requests an auto-fix of a
field, or signals that a field's current option should be disabled.

The auto-fix value is never stored on the rule. It is derived at apply time
by correction_for(), because the same rule can call for different values
depending on the drink mode.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from drink_builder.logging_utils import get_logger
from drink_builder.models.catalog import Catalog, CarrierKind, CarrierOption, FlavorCategory
from drink_builder.models.drink import PERSISTED_FIELDS, BaseType, DrinkConfiguration, Mode

logger = get_logger(__name__)

ALMOND_MILK_CARRIER_ID = "MILK_ALMOND"
RAF_BASE_CARRIER_ID = "RAF_BASE"
EXCESSIVE_FLAVOR_ML = 30

# Ice level enforced for FRAPPE drinks
FRAPPE_ICE_LEVEL = 2

_MILK_KINDS = (CarrierKind.DAIRY, CarrierKind.RAF)


class RuleAction(Enum):
    """What happens when a rule's condition holds."""

    WARN = "warn"  # Advisory message only
    AUTO_FIX = "auto-fix"  # Force-correct the target field
    DISABLE = "disable"  # Signal that the target option is unavailable


@dataclass(frozen=True)
class CompatibilityRule:
    """
    A single compatibility rule.

    Attributes:
        id: Stable rule identifier
        condition: Predicate over (configuration, catalog)
        action: Action taken when the condition holds
        message: Human-readable explanation
        target: Configuration field the action refers to (auto-fix/disable)
    """

    id: str
    condition: Callable[[DrinkConfiguration, Catalog], bool]
    action: RuleAction
    message: str
    target: Optional[str] = None


@dataclass(frozen=True)
class AutoFix:
    """Correction requested by an auto-fix rule."""

    target: str
    value: Any
    message: str


@dataclass(frozen=True)
class RuleEvaluation:
    """Rule results partitioned by action."""

    warnings: List[str]
    auto_fixes: List[AutoFix]
    disabled_options: List[str]


@dataclass(frozen=True)
class OptionCompatibility:
    """Whether a prospective option passes the disable rules."""

    compatible: bool
    reason: Optional[str] = None


def _carrier(configuration: DrinkConfiguration, catalog: Catalog) -> Optional[CarrierOption]:
    carrier = catalog.find_carrier(configuration.carrier)
    if carrier is None:
        logger.debug("Unknown carrier %r treated as having no effect", configuration.carrier)
    return carrier


def _carrier_kind_is(configuration: DrinkConfiguration, catalog: Catalog, *kinds: CarrierKind) -> bool:
    carrier = _carrier(configuration, catalog)
    return carrier is not None and carrier.kind in kinds


def _has_flavor_category(
    configuration: DrinkConfiguration, catalog: Catalog, category: FlavorCategory
) -> bool:
    for portion in configuration.flavors:
        flavor = catalog.find_flavor(portion.flavor_id)
        if flavor is not None and flavor.category == category:
            return True
    return False


def _contains_nuts(configuration: DrinkConfiguration, catalog: Catalog) -> bool:
    if configuration.carrier == ALMOND_MILK_CARRIER_ID:
        return True
    for portion in configuration.flavors:
        flavor = catalog.find_flavor(portion.flavor_id)
        if flavor is not None and "nuts" in flavor.allergens:
            return True
    return False


def _contains_lactose(configuration: DrinkConfiguration, catalog: Catalog) -> bool:
    if configuration.carrier == RAF_BASE_CARRIER_ID:
        return True
    carrier = _carrier(configuration, catalog)
    return carrier is not None and "lactose" in carrier.allergens


def hot_mode_rules() -> List[CompatibilityRule]:
    return [
        CompatibilityRule(
            id="hot_carbonated_carrier",
            condition=lambda c, cat: c.mode == Mode.HOT
            and _carrier_kind_is(c, cat, CarrierKind.CARBONATED),
            action=RuleAction.DISABLE,
            message="Carbonated drinks cannot be heated",
            target="carrier",
        ),
        CompatibilityRule(
            id="hot_juice_carrier",
            condition=lambda c, cat: c.mode == Mode.HOT
            and _carrier_kind_is(c, cat, CarrierKind.JUICE),
            action=RuleAction.DISABLE,
            message="Juices cannot be heated",
            target="carrier",
        ),
        CompatibilityRule(
            id="hot_ice_level",
            condition=lambda c, cat: c.mode == Mode.HOT and c.ice_level > 0,
            action=RuleAction.AUTO_FIX,
            message="Ice is unavailable in hot mode",
            target="ice_level",
        ),
    ]


def iced_mode_rules() -> List[CompatibilityRule]:
    return [
        CompatibilityRule(
            id="iced_foam_level",
            condition=lambda c, cat: c.mode == Mode.ICED and c.foam_level > 0,
            action=RuleAction.WARN,
            message="Foam in a cold drink may collapse quickly",
        ),
        CompatibilityRule(
            id="iced_no_ice",
            condition=lambda c, cat: c.mode == Mode.ICED and c.ice_level == 0,
            action=RuleAction.WARN,
            message="Ice is recommended for cold drinks",
        ),
    ]


def frappe_mode_rules() -> List[CompatibilityRule]:
    return [
        CompatibilityRule(
            id="frappe_foam_level",
            condition=lambda c, cat: c.mode == Mode.FRAPPE and c.foam_level > 0,
            action=RuleAction.AUTO_FIX,
            message="Foam is not needed in FRAPPE mode",
            target="foam_level",
        ),
        CompatibilityRule(
            id="frappe_ice_level",
            condition=lambda c, cat: c.mode == Mode.FRAPPE and c.ice_level == 0,
            action=RuleAction.AUTO_FIX,
            message="FRAPPE requires ice",
            target="ice_level",
        ),
    ]


def flavor_carrier_rules() -> List[CompatibilityRule]:
    return [
        CompatibilityRule(
            id="citrus_dairy_conflict",
            condition=lambda c, cat: c.mode == Mode.HOT
            and _has_flavor_category(c, cat, FlavorCategory.CITRUS)
            and _carrier_kind_is(c, cat, *_MILK_KINDS),
            action=RuleAction.WARN,
            message="Citrus flavors with hot milk may curdle",
        ),
        CompatibilityRule(
            id="fruit_dairy_hot_conflict",
            condition=lambda c, cat: c.mode == Mode.HOT
            and _has_flavor_category(c, cat, FlavorCategory.FRUIT)
            and _carrier_kind_is(c, cat, *_MILK_KINDS),
            action=RuleAction.WARN,
            message="Fruit flavors with hot milk may give unexpected results",
        ),
    ]


def allergen_rules() -> List[CompatibilityRule]:
    return [
        CompatibilityRule(
            id="nuts_allergen_warning",
            condition=_contains_nuts,
            action=RuleAction.WARN,
            message="Contains nuts - disclose the allergen to the customer",
        ),
        CompatibilityRule(
            id="lactose_allergen_warning",
            condition=_contains_lactose,
            action=RuleAction.WARN,
            message="Contains lactose - disclose the allergen to the customer",
        ),
    ]


def volume_rules() -> List[CompatibilityRule]:
    # Evaluated on the requested flavor list, not on FRAPPE-capped volumes
    return [
        CompatibilityRule(
            id="excessive_flavors",
            condition=lambda c, cat: c.total_flavor_ml > EXCESSIVE_FLAVOR_ML,
            action=RuleAction.WARN,
            message="Too much syrup may overpower the base flavor",
        ),
        CompatibilityRule(
            id="no_flavors_but_sweet",
            condition=lambda c, cat: not c.flavors and c.sweetness_level > 0,
            action=RuleAction.WARN,
            message="Sweetness is set but no syrup is added",
        ),
    ]


def all_compatibility_rules() -> List[CompatibilityRule]:
    """Every rule, in evaluation order."""
    return [
        *hot_mode_rules(),
        *iced_mode_rules(),
        *frappe_mode_rules(),
        *flavor_carrier_rules(),
        *allergen_rules(),
        *volume_rules(),
    ]


def correction_for(target: str, mode: Mode, current: Any) -> Optional[Any]:
    """
    Derive the corrective value for an auto-fix target.

    Args:
        target: Configuration field requested by the rule
        mode: Current drink mode
        current: Current value of the field

    Returns:
        The corrected value, or None when the target has no correction
    """
    if target == "ice_level":
        return FRAPPE_ICE_LEVEL if mode == Mode.FRAPPE else 0
    elif target == "foam_level":
        return 0 if mode == Mode.FRAPPE else current
    return None


def apply_compatibility_rules(
    configuration: DrinkConfiguration, catalog: Catalog
) -> RuleEvaluation:
    """
    Evaluate every rule once and partition the results by action.

    Rules are independent: a firing rule never prevents later rules from
    being evaluated. Disable results only report the target field name; they
    do not change the configuration.
    """
    warnings: List[str] = []
    auto_fixes: List[AutoFix] = []
    disabled_options: List[str] = []

    for rule in all_compatibility_rules():
        if not rule.condition(configuration, catalog):
            continue

        if rule.action == RuleAction.WARN:
            warnings.append(rule.message)
        elif rule.action == RuleAction.AUTO_FIX and rule.target:
            value = correction_for(rule.target, configuration.mode, getattr(configuration, rule.target))
            if value is None:
                logger.debug("Rule %s has no correction for %s", rule.id, rule.target)
                continue
            auto_fixes.append(AutoFix(target=rule.target, value=value, message=rule.message))
        elif rule.action == RuleAction.DISABLE and rule.target:
            disabled_options.append(rule.target)

    return RuleEvaluation(
        warnings=warnings, auto_fixes=auto_fixes, disabled_options=disabled_options
    )


def is_option_compatible(
    configuration: DrinkConfiguration, field: str, value: Any, catalog: Catalog
) -> OptionCompatibility:
    """
    Pre-validate a prospective option against the disable rules.

    Args:
        configuration: Current configuration
        field: Configuration field to replace (e.g., "carrier")
        value: Candidate value for the field
        catalog: Reference catalog

    Returns:
        OptionCompatibility; when incompatible, reason is the message of the
        first disable rule that fires

    Raises:
        ValueError: If field is not a configuration field
    """
    if field not in PERSISTED_FIELDS:
        raise ValueError(f"Unknown configuration field: {field}")

    candidate = configuration.with_changes(**{field: value})
    for rule in all_compatibility_rules():
        if rule.action == RuleAction.DISABLE and rule.condition(candidate, catalog):
            return OptionCompatibility(compatible=False, reason=rule.message)

    return OptionCompatibility(compatible=True)


def auto_fix_incompatibilities(
    configuration: DrinkConfiguration, catalog: Catalog
) -> DrinkConfiguration:
    """
    Apply every auto-fix requested by the rules.

    Idempotent: the corrected values are fixed points, so a second pass
    requests no further changes.
    """
    evaluation = apply_compatibility_rules(configuration, catalog)
    if not evaluation.auto_fixes:
        return configuration

    fixed = configuration
    for fix in evaluation.auto_fixes:
        logger.debug("Auto-fix %s -> %r: %s", fix.target, fix.value, fix.message)
        fixed = fixed.with_changes(**{fix.target: fix.value})
    return fixed


def compatibility_recommendations(
    configuration: DrinkConfiguration, catalog: Catalog
) -> List[str]:
    """Pairing suggestions that go beyond the rule warnings."""
    recommendations: List[str] = []

    if _has_flavor_category(configuration, catalog, FlavorCategory.NUT):
        recommendations.append("Nut flavors pair well with oat or almond milk")

    if configuration.mode == Mode.ICED and _has_flavor_category(
        configuration, catalog, FlavorCategory.CITRUS
    ):
        recommendations.append("Citrus flavors pair well with tonic or soda")

    if _has_flavor_category(configuration, catalog, FlavorCategory.CHOCOLATE):
        recommendations.append("Chocolate flavors are ideal with cow or oat milk")

    base = configuration.base
    if configuration.mode == Mode.HOT and base.type == BaseType.COFFEE and base.shots == 0:
        recommendations.append("Add at least one shot to a hot coffee")

    if configuration.mode == Mode.ICED and configuration.ice_level == 0:
        recommendations.append("Add ice to a cold drink")

    return recommendations
