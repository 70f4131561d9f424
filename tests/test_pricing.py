"""Tests for price composition."""

import pytest

from drink_builder.models import Base, BaseType, Booster, DrinkConfiguration, FlavorPortion, Mode
from drink_builder.pricing import (
    PriceBreakdown,
    apply_discount,
    calculate_base_price,
    calculate_boosters_price,
    calculate_carrier_surcharge,
    calculate_discount,
    calculate_extra_flavors_price,
    calculate_extra_shots_price,
    calculate_foam_surcharge,
    calculate_frappe_surcharge,
    calculate_premium_plant_surcharge,
    compute_price,
    price_breakdown_items,
    price_recommendations,
    validate_price,
)


def latte(**changes):
    """HOT single shot latte with 15 ml vanilla."""
    return DrinkConfiguration(flavors=(FlavorPortion("VANILLA", 15),)).with_changes(**changes)


class TestLineItems:
    """Tests for the individual line item functions."""

    def test_base_price_for_coffee(self, catalog):
        assert calculate_base_price(Base.coffee(1), catalog.pricing) == 190

    def test_base_price_without_shots(self, catalog):
        assert calculate_base_price(Base.coffee(0), catalog.pricing) == 0

    def test_base_price_for_non_coffee(self, catalog):
        assert calculate_base_price(Base(type=BaseType.MATCHA), catalog.pricing) == 190

    @pytest.mark.parametrize("shots, expected", [(0, 0), (1, 0), (2, 60)])
    def test_extra_shots(self, catalog, shots, expected):
        assert calculate_extra_shots_price(Base.coffee(shots), catalog.pricing) == expected

    @pytest.mark.parametrize("ml, expected", [(0, 0), (10, 0), (15, 20), (20, 20), (25, 40)])
    def test_extra_flavors_per_started_portion(self, catalog, ml, expected):
        flavors = (FlavorPortion("VANILLA", ml),)
        assert calculate_extra_flavors_price(flavors, catalog.pricing, 10) == expected

    def test_extra_flavors_allowance_per_flavor(self, catalog):
        """Each flavor gets its own 10 ml allowance."""
        flavors = (FlavorPortion("VANILLA", 15), FlavorPortion("CARAMEL", 10))
        assert calculate_extra_flavors_price(flavors, catalog.pricing, 10) == 20

    def test_carrier_surcharge(self, catalog):
        assert calculate_carrier_surcharge("MILK_OAT", catalog) == 20
        assert calculate_carrier_surcharge("RAF_BASE", catalog) == 40
        assert calculate_carrier_surcharge("MILK_COW", catalog) == 0

    def test_unknown_carrier_has_no_surcharge(self, catalog):
        assert calculate_carrier_surcharge("MILK_CAMEL", catalog) == 0

    def test_whipped_surcharge(self, catalog):
        assert calculate_foam_surcharge(0, ("WHIPPED",), catalog.pricing) == 25

    def test_foam_level_is_free(self, catalog):
        assert calculate_foam_surcharge(2, ("CINNAMON_DUST",), catalog.pricing) == 0

    def test_frappe_surcharge(self, catalog):
        assert calculate_frappe_surcharge(Mode.FRAPPE, catalog.pricing) == 30
        assert calculate_frappe_surcharge(Mode.ICED, catalog.pricing) == 0

    def test_premium_plant_surcharge(self, catalog):
        assert calculate_premium_plant_surcharge("MILK_ALMOND", catalog) == 20

    def test_premium_surcharge_skips_non_plant(self, catalog):
        assert calculate_premium_plant_surcharge("RAF_BASE", catalog) == 0
        assert calculate_premium_plant_surcharge("JUICE_ORANGE", catalog) == 0

    def test_boosters_price(self):
        boosters = (
            Booster(id="protein", name="Protein", grams=10, surcharge=35),
            Booster(id="collagen", name="Collagen", grams=5),
        )
        assert calculate_boosters_price(boosters) == 35


class TestComputePrice:
    """Tests for compute_price."""

    def test_default_drink(self, catalog):
        assert compute_price(DrinkConfiguration(), catalog).total == 190

    def test_latte(self, catalog):
        """190 base + one started 10 ml portion of extra vanilla."""
        breakdown = compute_price(latte(), catalog)
        assert breakdown.base_price == 190
        assert breakdown.extra_flavors == 20
        assert breakdown.total == 210

    def test_oat_latte_stacks_plant_surcharges(self, catalog):
        """Carrier surcharge and premium plant surcharge both apply."""
        breakdown = compute_price(latte(carrier="MILK_OAT"), catalog)
        assert breakdown.carrier_surcharge == 20
        assert breakdown.premium_plant_surcharge == 20
        assert breakdown.total == 250

    def test_whipped_latte(self, catalog):
        assert compute_price(latte(finishes=("WHIPPED",)), catalog).total == 235

    def test_frappe_latte(self, catalog):
        assert compute_price(latte(mode=Mode.FRAPPE), catalog).total == 240

    def test_double_shot(self, catalog):
        assert compute_price(latte(base=Base.coffee(2)), catalog).total == 270

    def test_chai_raf(self, catalog):
        config = DrinkConfiguration(
            base=Base(type=BaseType.CHAI),
            carrier="RAF_BASE",
            flavors=(FlavorPortion("CARDAMOM", 10),),
        )
        assert compute_price(config, catalog).total == 230

    def test_total_rounds_half_up(self, catalog):
        booster = Booster(id="maca", name="Maca", grams=3, surcharge=12.5)
        assert compute_price(latte(boosters=(booster,)), catalog).total == 223

    def test_total_rounds_down_below_half(self, catalog):
        booster = Booster(id="maca", name="Maca", grams=3, surcharge=12.4)
        assert compute_price(latte(boosters=(booster,)), catalog).total == 222


class TestBreakdownItems:
    """Tests for price_breakdown_items."""

    def test_only_nonzero_items(self, catalog):
        items = price_breakdown_items(compute_price(latte(carrier="MILK_OAT"), catalog))
        assert [(item.label, item.value) for item in items] == [
            ("Base price", 190),
            ("Extra flavors", 20),
            ("Carrier surcharge", 20),
            ("Premium plant milk", 20),
        ]

    def test_display_order(self, catalog):
        config = latte(mode=Mode.FRAPPE, base=Base.coffee(2), finishes=("WHIPPED",))
        labels = [item.label for item in price_breakdown_items(compute_price(config, catalog))]
        assert labels == ["Base price", "Extra shots", "Extra flavors", "Whipped cream", "FRAPPE blend"]


class TestPricePolicies:
    """Tests for discounts, validation and recommendations."""

    def test_calculate_discount(self):
        assert calculate_discount(210, 10) == 21

    def test_calculate_discount_rounds_half_up(self):
        assert calculate_discount(25, 10) == 3

    def test_apply_discount(self):
        assert apply_discount(210, 10) == 189

    def test_apply_discount_never_negative(self):
        assert apply_discount(100, 150) == 0

    def test_validate_price(self):
        assert validate_price(250).is_valid
        assert validate_price(10000).is_valid

    def test_negative_price_is_invalid(self):
        validation = validate_price(-1)
        assert not validation.is_valid
        assert validation.message == "Price cannot be negative"

    def test_huge_price_is_invalid(self):
        assert validate_price(10001).message == "Price is too high"

    def test_no_recommendations_for_simple_drink(self, catalog):
        assert price_recommendations(compute_price(latte(), catalog)) == []

    def test_strong_frappe_recommendation(self, catalog):
        breakdown = compute_price(latte(mode=Mode.FRAPPE, base=Base.coffee(2)), catalog)
        assert price_recommendations(breakdown) == ["FRAPPE with extra shots - a very strong drink"]

    def test_expensive_drink_recommendations(self):
        breakdown = PriceBreakdown(
            base_price=190,
            extra_shots=0,
            extra_flavors=120,
            carrier_surcharge=40,
            foam_surcharge=25,
            frappe_surcharge=0,
            premium_plant_surcharge=0,
            boosters=200,
            total=575,
        )
        assert price_recommendations(breakdown) == [
            "High price - consider simplifying the recipe",
            "Many extra flavors - consider picking one main flavor",
        ]
