"""Tests for visualization utilities."""

import matplotlib
import pytest

# Use non-interactive backend for testing
matplotlib.use("Agg")

import matplotlib.pyplot as plt

from drink_builder.models import DrinkConfiguration, FlavorPortion, Mode, VolumeBreakdown
from drink_builder.pricing import PriceBreakdown, compute_price
from drink_builder.visualize import plot_cup, plot_price_breakdown
from drink_builder.volume_calculator import balance_volumes


class TestPlotCup:
    """Test plot_cup function."""

    @pytest.fixture
    def hot_volumes(self):
        """Default hot drink: base, carrier and foam layers."""
        return balance_volumes(DrinkConfiguration())

    @pytest.fixture
    def iced_volumes(self):
        """Iced latte with vanilla and medium ice."""
        config = DrinkConfiguration(
            mode=Mode.ICED, ice_level=1, foam_level=0, flavors=(FlavorPortion("VANILLA", 15),)
        )
        return balance_volumes(config)

    def test_creates_figure(self, hot_volumes):
        fig = plot_cup(hot_volumes, Mode.HOT, show=False)
        assert isinstance(fig, plt.Figure)
        plt.close(fig)

    def test_skips_empty_layers(self, hot_volumes):
        """No flavors and no ice: base, carrier and foam bars only."""
        fig = plot_cup(hot_volumes, show=False)
        assert len(fig.axes[0].patches) == 3
        plt.close(fig)

    def test_ice_gets_own_bar(self, iced_volumes):
        fig = plot_cup(iced_volumes, Mode.ICED, show=False)
        ax = fig.axes[0]
        assert len(ax.patches) == 4
        assert ax.patches[-1].get_height() == pytest.approx(70)
        plt.close(fig)

    def test_liquid_layers_are_stacked(self, iced_volumes):
        fig = plot_cup(iced_volumes, show=False)
        base, flavors, carrier = fig.axes[0].patches[:3]
        assert flavors.get_y() == pytest.approx(base.get_height())
        assert carrier.get_y() == pytest.approx(base.get_height() + flavors.get_height())
        plt.close(fig)

    def test_default_title(self, hot_volumes):
        fig = plot_cup(hot_volumes, Mode.HOT, show=False)
        assert fig._suptitle.get_text() == "HOT Drink Layers\nTotal: 250 ml"
        plt.close(fig)

    def test_custom_title(self, hot_volumes):
        fig = plot_cup(hot_volumes, title="Flat white", show=False)
        assert fig._suptitle.get_text() == "Flat white"
        plt.close(fig)

    def test_empty_cup_raises_error(self):
        empty = VolumeBreakdown(
            base_ml=0, flavors_ml=0, carrier_ml=0, foam_ml=0, ice_ml=0, total_ml=0, liquid_ml=0
        )
        with pytest.raises(ValueError, match="Cannot plot an empty cup"):
            plot_cup(empty, show=False)

    def test_save_path(self, hot_volumes, tmp_path):
        path = tmp_path / "cup.png"
        fig = plot_cup(hot_volumes, show=False, save_path=str(path))
        assert path.exists()
        plt.close(fig)


class TestPlotPriceBreakdown:
    """Test plot_price_breakdown function."""

    @pytest.fixture
    def breakdown(self, catalog):
        config = DrinkConfiguration(carrier="MILK_OAT", flavors=(FlavorPortion("VANILLA", 15),))
        return compute_price(config, catalog)

    def test_one_bar_per_line_item(self, breakdown):
        fig = plot_price_breakdown(breakdown, show=False)
        ax = fig.axes[0]
        assert len(ax.patches) == 4
        assert [label.get_text() for label in ax.get_yticklabels()] == [
            "Base price",
            "Extra flavors",
            "Carrier surcharge",
            "Premium plant milk",
        ]
        plt.close(fig)

    def test_default_title_shows_total(self, breakdown):
        fig = plot_price_breakdown(breakdown, show=False)
        assert fig.axes[0].get_title() == "Price Breakdown (total 250)"
        plt.close(fig)

    def test_empty_breakdown_raises_error(self):
        breakdown = PriceBreakdown(
            base_price=0,
            extra_shots=0,
            extra_flavors=0,
            carrier_surcharge=0,
            foam_surcharge=0,
            frappe_surcharge=0,
            premium_plant_surcharge=0,
            boosters=0,
            total=0,
        )
        with pytest.raises(ValueError, match="without line items"):
            plot_price_breakdown(breakdown, show=False)

    def test_save_path(self, breakdown, tmp_path):
        path = tmp_path / "price.png"
        fig = plot_price_breakdown(breakdown, show=False, save_path=str(path))
        assert path.exists()
        plt.close(fig)
