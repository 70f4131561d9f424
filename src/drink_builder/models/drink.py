"""Drink configuration models for the drink builder."""

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

# Coffee strength is expressed in espresso shots
MAX_SHOTS = 2
MAX_SWEETNESS_LEVEL = 5
MAX_STRENGTH_LEVEL = 2
MAX_ICE_LEVEL = 2
MAX_FOAM_LEVEL = 2


class Mode(Enum):
    """Temperature/texture regime of a drink."""

    HOT = "HOT"
    ICED = "ICED"
    FRAPPE = "FRAPPE"


class BaseType(Enum):
    """Primary flavor-bearing ingredient."""

    COFFEE = "COFFEE"  # Espresso shots, 30 ml each
    MATCHA = "MATCHA"  # Matcha concentrate
    COCOA = "COCOA"  # Cocoa base
    CHAI = "CHAI"  # Masala chai concentrate
    FRUIT = "FRUIT"  # Fruit puree
    TONIC = "TONIC"  # Coffee-free tonic base


def _check_level(name: str, value: int, maximum: int) -> None:
    if not 0 <= value <= maximum:
        raise ValueError(f"{name} must be between 0 and {maximum}, got {value}")


@dataclass(frozen=True)
class Base:
    """Drink base.

    Only coffee carries a numeric parameter (the shot count); every other base
    type must keep ``shots`` at 0.

    Attributes:
        type: Base type
        shots: Number of espresso shots (0-2), coffee only
    """

    type: BaseType
    shots: int = 0

    def __post_init__(self) -> None:
        """Validate the shot count against the base type."""
        _check_level("shots", self.shots, MAX_SHOTS)
        if self.type != BaseType.COFFEE and self.shots != 0:
            raise ValueError(f"shots must be 0 for {self.type.value} base, got {self.shots}")

    @classmethod
    def coffee(cls, shots: int = 1) -> "Base":
        """Create a coffee base with the given shot count."""
        return cls(type=BaseType.COFFEE, shots=shots)

    @property
    def is_coffee(self) -> bool:
        return self.type == BaseType.COFFEE

    def to_dict(self) -> Dict[str, Any]:
        if self.is_coffee:
            return {"type": self.type.value, "shots": self.shots}
        return {"type": self.type.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Base":
        return cls(type=BaseType(data["type"]), shots=int(data.get("shots", 0)))


@dataclass(frozen=True)
class FlavorPortion:
    """A syrup, sauce or puree added to the drink.

    Attributes:
        flavor_id: Catalog flavor identifier (e.g., "VANILLA")
        ml: Amount in milliliters
    """

    flavor_id: str
    ml: int

    def __post_init__(self) -> None:
        if self.ml < 0:
            raise ValueError(f"ml must be non-negative, got {self.ml}")


@dataclass(frozen=True)
class Booster:
    """Powder or supplement add-in with an optional surcharge."""

    id: str
    name: str
    grams: float
    surcharge: Optional[float] = None

    def __post_init__(self) -> None:
        if self.grams < 0:
            raise ValueError(f"grams must be non-negative, got {self.grams}")


@dataclass(frozen=True)
class VolumeBreakdown:
    """Per-component drink volumes in milliliters.

    Attributes:
        base_ml: Coffee shots or non-coffee base
        flavors_ml: All flavor portions combined
        carrier_ml: Carrier liquid, the balancing component
        foam_ml: Foam sitting on top of the liquid
        ice_ml: Ice (ICED and FRAPPE only)
        total_ml: Liquid plus ice
        liquid_ml: Everything except ice
    """

    base_ml: int
    flavors_ml: int
    carrier_ml: int
    foam_ml: int
    ice_ml: int
    total_ml: int
    liquid_ml: int


@dataclass(frozen=True)
class DrinkConfiguration:
    """User-editable drink configuration.

    Holds exactly the persisted fields. Volumes, price and warnings are always
    derived from it and never stored here.

    Note:
        ``finishes`` has set semantics (membership only) but keeps insertion
        order so that snapshots are stable.
    """

    mode: Mode = Mode.HOT
    base: Base = field(default_factory=Base.coffee)
    carrier: str = "MILK_COW"
    flavors: Tuple[FlavorPortion, ...] = ()
    sweetness_level: int = 3
    strength_level: int = 1
    ice_level: int = 0
    foam_level: int = 2
    finishes: Tuple[str, ...] = ()
    boosters: Tuple[Booster, ...] = ()

    def __post_init__(self) -> None:
        """Normalize the mode and validate types, level ranges and flavor uniqueness."""
        if not isinstance(self.mode, Mode):
            try:
                mode = Mode(self.mode)
            except ValueError:
                raise ValueError(f"mode must be a Mode, got {self.mode!r}") from None
            object.__setattr__(self, "mode", mode)
        if not isinstance(self.base, Base):
            raise ValueError(f"base must be a Base, got {self.base!r}")

        _check_level("sweetness_level", self.sweetness_level, MAX_SWEETNESS_LEVEL)
        _check_level("strength_level", self.strength_level, MAX_STRENGTH_LEVEL)
        _check_level("ice_level", self.ice_level, MAX_ICE_LEVEL)
        _check_level("foam_level", self.foam_level, MAX_FOAM_LEVEL)

        flavor_ids = [portion.flavor_id for portion in self.flavors]
        if len(set(flavor_ids)) != len(flavor_ids):
            raise ValueError(f"flavors must have unique ids, got {flavor_ids}")

    @property
    def total_flavor_ml(self) -> int:
        """Requested flavor volume, before any mode-specific cap."""
        return sum(portion.ml for portion in self.flavors)

    def has_finish(self, finish_id: str) -> bool:
        return finish_id in self.finishes

    def with_changes(self, **changes: Any) -> "DrinkConfiguration":
        """Return a copy with the given fields replaced.

        Raises:
            ValueError: If a field name is not a configuration field
        """
        unknown = set(changes) - set(PERSISTED_FIELDS)
        if unknown:
            raise ValueError(f"Unknown configuration field(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the persisted fields to plain JSON-compatible types."""
        return {
            "mode": self.mode.value,
            "base": self.base.to_dict(),
            "carrier": self.carrier,
            "flavors": [{"id": p.flavor_id, "ml": p.ml} for p in self.flavors],
            "sweetness_level": self.sweetness_level,
            "strength_level": self.strength_level,
            "ice_level": self.ice_level,
            "foam_level": self.foam_level,
            "finishes": list(self.finishes),
            "boosters": [asdict(booster) for booster in self.boosters],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DrinkConfiguration":
        """Rebuild a configuration from ``to_dict()`` output.

        Missing keys fall back to the defaults; derived keys (volumes, price,
        warnings) are ignored if present.
        """
        default = cls()
        return cls(
            mode=Mode(data["mode"]) if "mode" in data else default.mode,
            base=Base.from_dict(data["base"]) if "base" in data else default.base,
            carrier=data.get("carrier", default.carrier),
            flavors=tuple(
                FlavorPortion(flavor_id=f["id"], ml=int(f["ml"])) for f in data.get("flavors", [])
            ),
            sweetness_level=int(data.get("sweetness_level", default.sweetness_level)),
            strength_level=int(data.get("strength_level", default.strength_level)),
            ice_level=int(data.get("ice_level", default.ice_level)),
            foam_level=int(data.get("foam_level", default.foam_level)),
            finishes=tuple(data.get("finishes", [])),
            boosters=tuple(
                Booster(
                    id=b["id"],
                    name=b["name"],
                    grams=b["grams"],
                    surcharge=b.get("surcharge"),
                )
                for b in data.get("boosters", [])
            ),
        )


PERSISTED_FIELDS = (
    "mode",
    "base",
    "carrier",
    "flavors",
    "sweetness_level",
    "strength_level",
    "ice_level",
    "foam_level",
    "finishes",
    "boosters",
)


def default_configuration() -> DrinkConfiguration:
    """HOT single-shot coffee on cow milk, sweetness 3, full foam, no ice."""
    return DrinkConfiguration()
