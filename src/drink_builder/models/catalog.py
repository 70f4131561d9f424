"""Reference catalog models: carriers, flavors, finishes, presets and pricing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from drink_builder.models.drink import Base, FlavorPortion, Mode


class CarrierKind(Enum):
    """Carrier liquid families."""

    DAIRY = "dairy"
    PLANT = "plant"
    WATER = "water"
    CARBONATED = "carbonated"
    JUICE = "juice"
    YOGURT = "yogurt"
    RAF = "raf"  # Milk and cream 60/40


class FlavorCategory(Enum):
    """Flavor families used by the pairing rules."""

    NUT = "nut"
    FRUIT = "fruit"
    SPICE = "spice"
    SWEET = "sweet"
    MINT = "mint"
    CITRUS = "citrus"
    CHOCOLATE = "chocolate"
    FLORAL = "floral"


@dataclass(frozen=True)
class CarrierOption:
    """Carrier liquid catalog entry.

    Attributes:
        id: Carrier identifier (e.g., "MILK_OAT")
        name: Display name
        kind: Carrier family
        is_heatable: Whether the carrier may be served hot
        allergens: Allergen tags (e.g., "lactose", "nuts")
        surcharge: Extra charge for choosing this carrier
    """

    id: str
    name: str
    kind: CarrierKind
    is_heatable: bool
    allergens: Tuple[str, ...] = ()
    surcharge: float = 0


@dataclass(frozen=True)
class FlavorOption:
    """Flavor catalog entry."""

    id: str
    name: str
    category: FlavorCategory
    allergens: Tuple[str, ...] = ()
    is_vegan: bool = True


@dataclass(frozen=True)
class FinishOption:
    """Topping or garnish catalog entry."""

    id: str
    name: str
    category: Optional[str] = None


@dataclass(frozen=True)
class Preset:
    """Named starting configuration.

    Presets do not have to be rule-consistent; the builder pipeline corrects
    them when they are loaded.
    """

    id: str
    name: str
    mode: Mode
    base: Base
    carrier: str
    sweetness_level: int
    strength_level: int
    ice_level: int
    foam_level: int
    flavors: Tuple[FlavorPortion, ...] = ()
    finishes: Tuple[str, ...] = ()
    notes: Optional[str] = None


@dataclass(frozen=True)
class PricingConfig:
    """Pricing constants in whole currency units.

    Attributes:
        base_price: One shot or coffee-free base, one 10 ml flavor, one carrier
        extra_shot: Each shot beyond the first
        extra_flavor_per_10ml: Each started 10 ml of flavor beyond the default
        raf_surcharge: RAF base surcharge (informational, the carrier entry
            carries the charged amount)
        whipped_surcharge: Whipped cream finish
        premium_plant_surcharge: Plant carriers with a configured surcharge
        frappe_blend_surcharge: FRAPPE blending
    """

    base_price: float
    extra_shot: float
    extra_flavor_per_10ml: float
    raf_surcharge: float
    whipped_surcharge: float
    premium_plant_surcharge: float
    frappe_blend_surcharge: float


@dataclass(frozen=True)
class CatalogSettings:
    """Global builder settings."""

    max_flavor_ml: int = 30
    default_flavor_ml: int = 10
    target_temperature: Dict[str, float] = field(
        default_factory=lambda: {"hot": 65.0, "iced": 4.0}
    )
    volume_target: int = 250
    show_warnings: bool = True
    auto_balance: bool = True


@dataclass(frozen=True)
class Catalog:
    """Immutable reference catalog consumed by the calculators and rules.

    Lookups return None for unknown ids so that callers can treat misses as
    zero-effect.
    """

    pricing: PricingConfig
    settings: CatalogSettings
    carriers: Tuple[CarrierOption, ...] = ()
    flavors: Tuple[FlavorOption, ...] = ()
    finishes: Tuple[FinishOption, ...] = ()
    presets: Tuple[Preset, ...] = ()

    def find_carrier(self, carrier_id: str) -> Optional[CarrierOption]:
        return next((c for c in self.carriers if c.id == carrier_id), None)

    def find_flavor(self, flavor_id: str) -> Optional[FlavorOption]:
        return next((f for f in self.flavors if f.id == flavor_id), None)

    def find_finish(self, finish_id: str) -> Optional[FinishOption]:
        return next((f for f in self.finishes if f.id == finish_id), None)

    def find_preset(self, preset_id: str) -> Optional[Preset]:
        return next((p for p in self.presets if p.id == preset_id), None)
