"""Tests for the compatibility rule engine."""

import pytest

from drink_builder.models import Base, DrinkConfiguration, FlavorPortion, Mode
from drink_builder.rules import (
    AutoFix,
    RuleAction,
    all_compatibility_rules,
    apply_compatibility_rules,
    auto_fix_incompatibilities,
    compatibility_recommendations,
    correction_for,
    is_option_compatible,
)

LACTOSE_WARNING = "Contains lactose - disclose the allergen to the customer"
NUTS_WARNING = "Contains nuts - disclose the allergen to the customer"


class TestRuleSet:
    """Tests for the declared rules."""

    def test_rule_ids_are_unique(self):
        ids = [rule.id for rule in all_compatibility_rules()]
        assert len(ids) == len(set(ids))

    def test_targeted_actions_have_targets(self):
        for rule in all_compatibility_rules():
            if rule.action in (RuleAction.AUTO_FIX, RuleAction.DISABLE):
                assert rule.target is not None, rule.id


class TestCorrectionFor:
    """Tests for mode-dependent auto-fix values."""

    def test_ice_outside_frappe(self):
        assert correction_for("ice_level", Mode.HOT, 2) == 0

    def test_ice_in_frappe(self):
        assert correction_for("ice_level", Mode.FRAPPE, 0) == 2

    def test_foam_in_frappe(self):
        assert correction_for("foam_level", Mode.FRAPPE, 2) == 0

    def test_foam_outside_frappe_unchanged(self):
        assert correction_for("foam_level", Mode.ICED, 1) == 1

    def test_unknown_target_has_no_correction(self):
        assert correction_for("carrier", Mode.HOT, "TONIC") is None


class TestApplyCompatibilityRules:
    """Tests for apply_compatibility_rules."""

    def test_default_drink(self, catalog):
        evaluation = apply_compatibility_rules(DrinkConfiguration(), catalog)
        assert evaluation.warnings == [LACTOSE_WARNING, "Sweetness is set but no syrup is added"]
        assert evaluation.auto_fixes == []
        assert evaluation.disabled_options == []

    def test_hot_tonic_is_disabled(self, catalog):
        config = DrinkConfiguration(carrier="TONIC")
        assert apply_compatibility_rules(config, catalog).disabled_options == ["carrier"]

    def test_hot_juice_is_disabled(self, catalog):
        config = DrinkConfiguration(carrier="JUICE_APPLE")
        assert apply_compatibility_rules(config, catalog).disabled_options == ["carrier"]

    def test_iced_tonic_is_allowed(self, catalog):
        config = DrinkConfiguration(mode=Mode.ICED, carrier="TONIC", ice_level=2)
        assert apply_compatibility_rules(config, catalog).disabled_options == []

    def test_hot_ice_is_fixed(self, catalog):
        config = DrinkConfiguration(ice_level=1)
        assert apply_compatibility_rules(config, catalog).auto_fixes == [
            AutoFix(target="ice_level", value=0, message="Ice is unavailable in hot mode")
        ]

    def test_frappe_fixes_foam_then_ice(self, catalog):
        config = DrinkConfiguration(mode=Mode.FRAPPE, foam_level=1, ice_level=0)
        fixes = apply_compatibility_rules(config, catalog).auto_fixes
        assert [(fix.target, fix.value) for fix in fixes] == [("foam_level", 0), ("ice_level", 2)]

    def test_iced_warnings(self, catalog):
        config = DrinkConfiguration(mode=Mode.ICED, ice_level=0, foam_level=1, carrier="WATER")
        warnings = apply_compatibility_rules(config, catalog).warnings
        assert "Foam in a cold drink may collapse quickly" in warnings
        assert "Ice is recommended for cold drinks" in warnings

    def test_citrus_with_hot_milk(self, catalog):
        config = DrinkConfiguration(flavors=(FlavorPortion("CITRUS", 10),))
        assert "Citrus flavors with hot milk may curdle" in apply_compatibility_rules(
            config, catalog
        ).warnings

    def test_fruit_with_hot_raf(self, catalog):
        config = DrinkConfiguration(carrier="RAF_BASE", flavors=(FlavorPortion("MANGO", 10),))
        assert "Fruit flavors with hot milk may give unexpected results" in (
            apply_compatibility_rules(config, catalog).warnings
        )

    def test_fruit_with_plant_milk_is_fine(self, catalog):
        config = DrinkConfiguration(carrier="MILK_OAT", flavors=(FlavorPortion("MANGO", 10),))
        assert apply_compatibility_rules(config, catalog).warnings == []

    def test_almond_milk_contains_nuts(self, catalog):
        config = DrinkConfiguration(carrier="MILK_ALMOND", sweetness_level=0)
        assert apply_compatibility_rules(config, catalog).warnings == [NUTS_WARNING]

    def test_nut_flavor_contains_nuts(self, catalog):
        config = DrinkConfiguration(carrier="WATER", flavors=(FlavorPortion("HAZELNUT", 10),))
        assert apply_compatibility_rules(config, catalog).warnings == [NUTS_WARNING]

    def test_excessive_flavors_use_requested_amounts(self, catalog):
        """FRAPPE caps volumes at 20 ml but the warning sees the 35 ml asked for."""
        config = DrinkConfiguration(
            mode=Mode.FRAPPE,
            ice_level=2,
            foam_level=0,
            carrier="WATER",
            flavors=(FlavorPortion("VANILLA", 35),),
        )
        assert apply_compatibility_rules(config, catalog).warnings == [
            "Too much syrup may overpower the base flavor"
        ]

    def test_unknown_carrier_has_no_effect(self, catalog):
        config = DrinkConfiguration(carrier="MILK_CAMEL", sweetness_level=0)
        evaluation = apply_compatibility_rules(config, catalog)
        assert evaluation.warnings == []
        assert evaluation.disabled_options == []

    def test_disable_does_not_change_configuration(self, catalog):
        config = DrinkConfiguration(carrier="TONIC")
        assert auto_fix_incompatibilities(config, catalog).carrier == "TONIC"


class TestAutoFix:
    """Tests for auto_fix_incompatibilities."""

    def test_compatible_drink_is_returned_unchanged(self, catalog):
        config = DrinkConfiguration()
        assert auto_fix_incompatibilities(config, catalog) is config

    def test_frappe_fixes(self, catalog):
        config = DrinkConfiguration(mode=Mode.FRAPPE, foam_level=2, ice_level=0)
        fixed = auto_fix_incompatibilities(config, catalog)
        assert fixed.foam_level == 0
        assert fixed.ice_level == 2

    def test_hot_ice_removed(self, catalog):
        fixed = auto_fix_incompatibilities(DrinkConfiguration(ice_level=2), catalog)
        assert fixed.ice_level == 0

    @pytest.mark.parametrize(
        "config",
        [
            DrinkConfiguration(mode=Mode.FRAPPE, foam_level=1, ice_level=0),
            DrinkConfiguration(ice_level=2),
            DrinkConfiguration(mode=Mode.ICED, foam_level=2, ice_level=0),
        ],
    )
    def test_idempotent(self, catalog, config):
        once = auto_fix_incompatibilities(config, catalog)
        assert auto_fix_incompatibilities(once, catalog) == once
        assert apply_compatibility_rules(once, catalog).auto_fixes == []


class TestIsOptionCompatible:
    """Tests for is_option_compatible."""

    def test_tonic_in_hot_mode(self, catalog):
        result = is_option_compatible(DrinkConfiguration(), "carrier", "TONIC", catalog)
        assert not result.compatible
        assert result.reason == "Carbonated drinks cannot be heated"

    @pytest.mark.parametrize("mode", [Mode.ICED, Mode.FRAPPE])
    def test_tonic_in_cold_modes(self, catalog, mode):
        config = DrinkConfiguration(mode=mode)
        result = is_option_compatible(config, "carrier", "TONIC", catalog)
        assert result.compatible
        assert result.reason is None

    def test_switching_mode_is_checked(self, catalog):
        config = DrinkConfiguration(mode=Mode.ICED, carrier="JUICE_ORANGE")
        result = is_option_compatible(config, "mode", Mode.HOT, catalog)
        assert result.reason == "Juices cannot be heated"

    def test_switching_mode_by_value_is_checked(self, catalog):
        config = DrinkConfiguration(mode=Mode.ICED, carrier="JUICE_ORANGE")
        result = is_option_compatible(config, "mode", "HOT", catalog)
        assert not result.compatible
        assert result.reason == "Juices cannot be heated"

    def test_auto_fix_targets_stay_selectable(self, catalog):
        """Only disable rules block an option; auto-fixes correct it later."""
        assert is_option_compatible(DrinkConfiguration(), "ice_level", 1, catalog).compatible

    def test_unknown_field_raises_error(self, catalog):
        with pytest.raises(ValueError, match="Unknown configuration field: temperature"):
            is_option_compatible(DrinkConfiguration(), "temperature", 65, catalog)


class TestCompatibilityRecommendations:
    """Tests for compatibility_recommendations."""

    def test_nut_pairing(self, catalog):
        config = DrinkConfiguration(flavors=(FlavorPortion("HAZELNUT", 10),))
        assert compatibility_recommendations(config, catalog) == [
            "Nut flavors pair well with oat or almond milk"
        ]

    def test_iced_citrus_pairing(self, catalog):
        config = DrinkConfiguration(
            mode=Mode.ICED, ice_level=2, flavors=(FlavorPortion("CITRUS", 10),)
        )
        assert compatibility_recommendations(config, catalog) == [
            "Citrus flavors pair well with tonic or soda"
        ]

    def test_chocolate_pairing(self, catalog):
        config = DrinkConfiguration(flavors=(FlavorPortion("WHITE_CHOCOLATE", 10),))
        assert "Chocolate flavors are ideal with cow or oat milk" in (
            compatibility_recommendations(config, catalog)
        )

    def test_hot_coffee_without_shots(self, catalog):
        config = DrinkConfiguration(base=Base.coffee(0))
        assert compatibility_recommendations(config, catalog) == [
            "Add at least one shot to a hot coffee"
        ]

    def test_iced_without_ice(self, catalog):
        config = DrinkConfiguration(mode=Mode.ICED, ice_level=0)
        assert compatibility_recommendations(config, catalog) == ["Add ice to a cold drink"]
