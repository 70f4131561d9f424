"""Configuration state manager.

This module provides the DrinkBuilder class that owns the current drink and
ties the components together. Every mutation commits a new snapshot through
the same pipeline:
- Rule auto-fixes (forced corrections)
- Volume calculation and balancing
- Price calculation
- Rule warnings

Example:
    >>> from drink_builder import DrinkBuilder, Mode
    >>>
    >>> builder = DrinkBuilder()
    >>> builder.add_flavor("VANILLA", ml=15)
    >>> builder.set_mode(Mode.ICED)
    >>> builder.price
    210
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from drink_builder.catalog import CatalogStore
from drink_builder.config import EngineConfig, load_config
from drink_builder.logging_utils import get_logger, set_level
from drink_builder.models.catalog import Catalog, Preset
from drink_builder.models.drink import (
    Base,
    Booster,
    DrinkConfiguration,
    FlavorPortion,
    Mode,
    VolumeBreakdown,
    default_configuration,
)
from drink_builder.pricing import PriceBreakdown, compute_price
from drink_builder.rules import (
    OptionCompatibility,
    apply_compatibility_rules,
    auto_fix_incompatibilities,
    compatibility_recommendations,
    is_option_compatible,
)
from drink_builder.volume_calculator import (
    balance_volumes,
    compute_volumes,
    volume_recommendations,
)

logger = get_logger(__name__)

DEFAULT_ADDED_FLAVOR_ML = 15
SWEETNESS_FLAVOR_ID = "VANILLA"
SWEETNESS_ML_PER_LEVEL = 4


@dataclass(frozen=True)
class BuilderSnapshot:
    """Fully derived, internally consistent drink state.

    Attributes:
        configuration: Corrected configuration (after auto-fixes)
        volumes: Balanced volume breakdown
        price: Total price in whole currency units
        warnings: Rule warnings for the corrected configuration
        disabled_options: Fields whose current option the rules disable
    """

    configuration: DrinkConfiguration
    volumes: VolumeBreakdown
    price: int
    warnings: Tuple[str, ...]
    disabled_options: Tuple[str, ...]


class DrinkBuilder:
    """Owns the single current drink configuration.

    Mutations are applied one field at a time and each one is committed
    through the full pipeline before the method returns, so the snapshot seen
    by callers is never partially derived.

    Args:
        catalog_store: Source of the reference catalog. The catalog is read
            on every commit, so validated catalog updates take effect on the
            next mutation. Default: the bundled catalog.
        configuration: Starting configuration (default: the standard drink)
    """

    def __init__(
        self,
        catalog_store: Optional[CatalogStore] = None,
        configuration: Optional[DrinkConfiguration] = None,
    ):
        self.catalog_store = catalog_store if catalog_store is not None else CatalogStore()
        self._snapshot = self._derive(configuration or default_configuration())

    @classmethod
    def from_config(cls, config: Optional[EngineConfig] = None) -> "DrinkBuilder":
        """
        Create a builder from engine configuration.

        Applies the configured log level and reads the configured catalog.

        Args:
            config: Engine configuration (default: load_config())
        """
        if config is None:
            config = load_config()
        set_level(config.logging_level)
        return cls(catalog_store=CatalogStore.from_config(config))

    @property
    def catalog(self) -> Catalog:
        return self.catalog_store.get()

    @property
    def snapshot(self) -> BuilderSnapshot:
        return self._snapshot

    @property
    def configuration(self) -> DrinkConfiguration:
        return self._snapshot.configuration

    @property
    def volumes(self) -> VolumeBreakdown:
        return self._snapshot.volumes

    @property
    def price(self) -> int:
        return self._snapshot.price

    @property
    def warnings(self) -> List[str]:
        return list(self._snapshot.warnings)

    @property
    def disabled_options(self) -> List[str]:
        return list(self._snapshot.disabled_options)

    def _derive(self, configuration: DrinkConfiguration) -> BuilderSnapshot:
        """Run the commit pipeline over a raw configuration."""
        catalog = self.catalog
        settings = catalog.settings

        # Stage 1: forced corrections, so volumes and price see the fixed drink
        fixed = auto_fix_incompatibilities(configuration, catalog)

        # Stage 2: volumes, balanced towards the cup target
        if settings.auto_balance:
            volumes = balance_volumes(fixed, target_ml=settings.volume_target)
        else:
            volumes = compute_volumes(fixed)

        # Stage 3: price
        price = compute_price(fixed, catalog).total

        # Stage 4: warnings against the corrected drink
        evaluation = apply_compatibility_rules(fixed, catalog)
        warnings = evaluation.warnings if settings.show_warnings else []

        logger.debug(
            "Committed %s drink: %d ml, price %d, %d warning(s)",
            fixed.mode.value,
            volumes.total_ml,
            price,
            len(warnings),
        )
        return BuilderSnapshot(
            configuration=fixed,
            volumes=volumes,
            price=price,
            warnings=tuple(warnings),
            disabled_options=tuple(evaluation.disabled_options),
        )

    def _commit(self, configuration: DrinkConfiguration) -> BuilderSnapshot:
        self._snapshot = self._derive(configuration)
        return self._snapshot

    def _update(self, **changes: Any) -> BuilderSnapshot:
        return self._commit(self.configuration.with_changes(**changes))

    def set_mode(self, mode: Mode) -> BuilderSnapshot:
        return self._update(mode=mode)

    def set_base(self, base: Base) -> BuilderSnapshot:
        return self._update(base=base)

    def set_carrier(self, carrier_id: str) -> BuilderSnapshot:
        return self._update(carrier=carrier_id)

    def add_flavor(self, flavor_id: str, ml: int = DEFAULT_ADDED_FLAVOR_ML) -> BuilderSnapshot:
        """Add a flavor; adding a flavor that is already present is a no-op."""
        flavors = self.configuration.flavors
        if any(portion.flavor_id == flavor_id for portion in flavors):
            return self._snapshot
        return self._update(flavors=flavors + (FlavorPortion(flavor_id=flavor_id, ml=ml),))

    def remove_flavor(self, flavor_id: str) -> BuilderSnapshot:
        flavors = tuple(p for p in self.configuration.flavors if p.flavor_id != flavor_id)
        return self._update(flavors=flavors)

    def set_flavor_ml(self, flavor_id: str, ml: int) -> BuilderSnapshot:
        flavors = tuple(
            FlavorPortion(flavor_id=p.flavor_id, ml=ml) if p.flavor_id == flavor_id else p
            for p in self.configuration.flavors
        )
        return self._update(flavors=flavors)

    def set_sweetness_level(self, level: int) -> BuilderSnapshot:
        """
        Set the sweetness level.

        When the drink has no flavor yet, a positive level seeds a vanilla
        syrup of level x 4 ml, capped at the catalog's default flavor volume.
        """
        changes: Dict[str, Any] = {"sweetness_level": level}
        if level > 0 and not self.configuration.flavors:
            default_flavor_ml = self.catalog.settings.default_flavor_ml
            ml = min(level * SWEETNESS_ML_PER_LEVEL, default_flavor_ml)
            changes["flavors"] = (FlavorPortion(flavor_id=SWEETNESS_FLAVOR_ID, ml=ml),)
        return self._update(**changes)

    def set_strength_level(self, level: int) -> BuilderSnapshot:
        """Set the strength level; for coffee it is also the shot count."""
        base = self.configuration.base
        if base.is_coffee:
            base = Base.coffee(shots=level)
        return self._update(base=base, strength_level=level)

    def set_ice_level(self, level: int) -> BuilderSnapshot:
        return self._update(ice_level=level)

    def set_foam_level(self, level: int) -> BuilderSnapshot:
        return self._update(foam_level=level)

    def toggle_finish(self, finish_id: str) -> BuilderSnapshot:
        finishes = self.configuration.finishes
        if finish_id in finishes:
            finishes = tuple(f for f in finishes if f != finish_id)
        else:
            finishes = finishes + (finish_id,)
        return self._update(finishes=finishes)

    def add_booster(self, booster: Booster) -> BuilderSnapshot:
        return self._update(boosters=self.configuration.boosters + (booster,))

    def remove_booster(self, booster_id: str) -> BuilderSnapshot:
        boosters = tuple(b for b in self.configuration.boosters if b.id != booster_id)
        return self._update(boosters=boosters)

    def load_preset(self, preset: Union[Preset, str]) -> BuilderSnapshot:
        """
        Overwrite the drink with a preset in one step.

        Boosters are kept; every other persisted field comes from the preset.
        The preset does not need to satisfy the rules, the pipeline corrects
        it.

        Args:
            preset: Preset or preset id from the catalog

        Raises:
            KeyError: If a preset id is not in the catalog
        """
        if isinstance(preset, str):
            found = self.catalog.find_preset(preset)
            if found is None:
                raise KeyError(f"Unknown preset: {preset}")
            preset = found

        logger.info("Loading preset %s", preset.id)
        return self._update(
            mode=preset.mode,
            base=preset.base,
            carrier=preset.carrier,
            sweetness_level=preset.sweetness_level,
            strength_level=preset.strength_level,
            ice_level=preset.ice_level,
            foam_level=preset.foam_level,
            flavors=preset.flavors,
            finishes=preset.finishes,
        )

    def reset(self) -> BuilderSnapshot:
        logger.info("Resetting drink to defaults")
        return self._commit(default_configuration())

    def export_snapshot(self) -> Dict[str, Any]:
        """Persisted fields of the current drink; derived values are omitted."""
        return self.configuration.to_dict()

    def restore_snapshot(self, data: Mapping[str, Any]) -> BuilderSnapshot:
        """Restore persisted fields and re-derive everything else.

        Stored derived values (volumes, price, warnings) are never trusted.
        """
        return self._commit(DrinkConfiguration.from_dict(data))

    def price_breakdown(self) -> PriceBreakdown:
        return compute_price(self.configuration, self.catalog)

    def volume_recommendations(self) -> List[str]:
        return volume_recommendations(self.configuration)

    def compatibility_recommendations(self) -> List[str]:
        return compatibility_recommendations(self.configuration, self.catalog)

    def is_option_compatible(self, field: str, value: Any) -> OptionCompatibility:
        return is_option_compatible(self.configuration, field, value, self.catalog)

    def __repr__(self) -> str:
        """Return string representation of the builder."""
        config = self.configuration
        return (
            f"DrinkBuilder(mode={config.mode.name}, base={config.base.type.name}, "
            f"carrier={config.carrier}, price={self.price})"
        )
