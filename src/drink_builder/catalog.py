"""Reference catalog loading, validation and caching.

The catalog is read-only input for the calculators and the rule engine. A
CatalogStore owns the cached copy: it loads it once, hands out the same
immutable Catalog to every reader, and replaces it wholesale on a validated
update.

Example:
    >>> store = CatalogStore()
    >>> catalog = store.get()
    >>> catalog.find_carrier("MILK_OAT").surcharge
    20
"""

import copy
import json
from dataclasses import fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, Union

from drink_builder.config import DEFAULT_CATALOG_PATH, EngineConfig
from drink_builder.logging_utils import get_logger
from drink_builder.models.catalog import (
    Catalog,
    CatalogSettings,
    CarrierKind,
    CarrierOption,
    FinishOption,
    FlavorCategory,
    FlavorOption,
    Preset,
    PricingConfig,
)
from drink_builder.models.drink import Base, FlavorPortion, Mode

logger = get_logger(__name__)

# Sections checked for duplicate ids, with the label used in error messages
_ID_SECTIONS = (
    ("carriers", "carrier"),
    ("flavors", "flavor"),
    ("finishes", "finish"),
    ("presets", "preset"),
)

_PRICING_KEYS = tuple(f.name for f in fields(PricingConfig))
_SETTINGS_KEYS = tuple(f.name for f in fields(CatalogSettings))
_PRESET_KEYS = (
    "id",
    "name",
    "mode",
    "base",
    "carrier",
    "sweetness_level",
    "strength_level",
    "ice_level",
    "foam_level",
)


class CatalogValidationError(ValueError):
    """Raised when catalog data fails validation.

    Attributes:
        errors: Every validation problem found, in check order
    """

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Invalid catalog: {'; '.join(self.errors)}")


def validate_catalog(data: Mapping[str, Any]) -> List[str]:
    """
    Check raw catalog data for missing sections and duplicate ids.

    Entries are checked too: pricing must carry every numeric constant,
    settings may only use known keys, and carriers, flavors, finishes and
    presets need their required keys and known kind/category/mode values.

    Args:
        data: Catalog mapping as read from JSON

    Returns:
        List of error descriptions; empty when the catalog is acceptable
    """
    errors: List[str] = []

    if not data.get("pricing"):
        errors.append("Missing pricing configuration")
    if not data.get("settings"):
        errors.append("Missing settings")
    if not data.get("carriers"):
        errors.append("No carriers defined")
    if not data.get("flavors"):
        errors.append("No flavors defined")
    if not data.get("presets"):
        errors.append("No presets defined")

    for section, label in _ID_SECTIONS:
        entries = data.get(section) or []
        if not isinstance(entries, list):
            errors.append(f"Section {section} must be a list")
            continue
        ids = [entry.get("id") for entry in entries if isinstance(entry, Mapping)]
        duplicates = sorted({i for i in ids if ids.count(i) > 1}, key=str)
        if duplicates:
            errors.append(f"Duplicate {label} ids: {', '.join(map(str, duplicates))}")

    errors.extend(_check_pricing(data.get("pricing")))
    errors.extend(_check_settings(data.get("settings")))
    errors.extend(_check_entries(data, "carriers", "Carrier", ("id", "kind"), "kind", CarrierKind))
    errors.extend(
        _check_entries(data, "flavors", "Flavor", ("id", "category"), "category", FlavorCategory)
    )
    errors.extend(_check_entries(data, "finishes", "Finish", ("id",)))
    errors.extend(_check_entries(data, "presets", "Preset", _PRESET_KEYS, "mode", Mode))
    errors.extend(_check_preset_bases(data.get("presets")))

    return errors


def _check_pricing(pricing: Any) -> List[str]:
    if not pricing:
        return []
    if not isinstance(pricing, Mapping):
        return ["Pricing must be an object"]

    errors = []
    missing = [key for key in _PRICING_KEYS if key not in pricing]
    if missing:
        errors.append(f"Pricing missing keys: {', '.join(missing)}")
    unknown = sorted(set(pricing) - set(_PRICING_KEYS))
    if unknown:
        errors.append(f"Unknown pricing keys: {', '.join(unknown)}")
    for key in _PRICING_KEYS:
        value = pricing.get(key)
        if key in pricing and (isinstance(value, bool) or not isinstance(value, (int, float))):
            errors.append(f"Pricing {key} must be a number, got {value!r}")
    return errors


def _check_settings(settings: Any) -> List[str]:
    if not settings:
        return []
    if not isinstance(settings, Mapping):
        return ["Settings must be an object"]

    unknown = sorted(set(settings) - set(_SETTINGS_KEYS))
    if unknown:
        return [f"Unknown settings keys: {', '.join(unknown)}"]
    return []


def _check_entries(
    data: Mapping[str, Any],
    section: str,
    label: str,
    required: Sequence[str],
    enum_key: Optional[str] = None,
    enum_type: Optional[Type[Enum]] = None,
) -> List[str]:
    """Check every entry of a list section for required keys and enum values."""
    entries = data.get(section)
    if not isinstance(entries, list):
        return []

    errors = []
    allowed = {member.value for member in enum_type} if enum_type else set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            errors.append(f"{label} #{index} must be an object")
            continue
        name = entry.get("id", f"#{index}")
        missing = [key for key in required if key not in entry]
        if missing:
            errors.append(f"{label} {name} missing keys: {', '.join(missing)}")
        if enum_key and enum_key in entry and entry[enum_key] not in allowed:
            errors.append(f"{label} {name} has unknown {enum_key}: {entry[enum_key]}")
    return errors


def _check_preset_bases(presets: Any) -> List[str]:
    if not isinstance(presets, list):
        return []

    errors = []
    for entry in presets:
        if not isinstance(entry, Mapping) or "base" not in entry:
            continue
        try:
            Base.from_dict(entry["base"])
        except (KeyError, TypeError, ValueError) as e:
            errors.append(f"Preset {entry.get('id')} has an invalid base: {e}")
    return errors


def _parse_preset(entry: Mapping[str, Any]) -> Preset:
    return Preset(
        id=entry["id"],
        name=entry["name"],
        mode=Mode(entry["mode"]),
        base=Base.from_dict(entry["base"]),
        carrier=entry["carrier"],
        sweetness_level=entry["sweetness_level"],
        strength_level=entry["strength_level"],
        ice_level=entry["ice_level"],
        foam_level=entry["foam_level"],
        flavors=tuple(FlavorPortion(flavor_id=f["id"], ml=f["ml"]) for f in entry.get("flavors", [])),
        finishes=tuple(entry.get("finishes", [])),
        notes=entry.get("notes"),
    )


def parse_catalog(data: Mapping[str, Any]) -> Catalog:
    """
    Build an immutable Catalog from validated raw data.

    Raises:
        CatalogValidationError: If validate_catalog reports problems or an
            entry is rejected by its model (e.g., a negative flavor amount)
    """
    errors = validate_catalog(data)
    if errors:
        raise CatalogValidationError(errors)

    try:
        return _build_catalog(data)
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogValidationError([f"Invalid catalog entry: {e}"]) from e


def _build_catalog(data: Mapping[str, Any]) -> Catalog:
    return Catalog(
        pricing=PricingConfig(**data["pricing"]),
        settings=CatalogSettings(**data["settings"]),
        carriers=tuple(
            CarrierOption(
                id=c["id"],
                name=c.get("name", c["id"]),
                kind=CarrierKind(c["kind"]),
                is_heatable=c.get("is_heatable", False),
                allergens=tuple(c.get("allergens", [])),
                surcharge=c.get("surcharge", 0) or 0,
            )
            for c in data["carriers"]
        ),
        flavors=tuple(
            FlavorOption(
                id=f["id"],
                name=f.get("name", f["id"]),
                category=FlavorCategory(f["category"]),
                allergens=tuple(f.get("allergens", [])),
                is_vegan=f.get("is_vegan", True),
            )
            for f in data["flavors"]
        ),
        finishes=tuple(
            FinishOption(id=f["id"], name=f.get("name", f["id"]), category=f.get("category"))
            for f in data.get("finishes", [])
        ),
        presets=tuple(_parse_preset(p) for p in data["presets"]),
    )


def read_catalog_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read raw catalog data from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class CatalogStore:
    """
    Process-scoped catalog cache.

    Readers call get(); the first call loads and validates the catalog file.
    update() validates the merged result before swapping it in, so a rejected
    update leaves the previous catalog authoritative.

    Args:
        path: Catalog JSON file (default: bundled catalog)
        data: Raw catalog mapping used instead of a file (handy for tests)
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
        self._source_data = copy.deepcopy(dict(data)) if data is not None else None
        self._raw: Optional[Dict[str, Any]] = None
        self._catalog: Optional[Catalog] = None

    @classmethod
    def from_config(cls, config: EngineConfig) -> "CatalogStore":
        """Create a store reading the catalog file named by the engine config."""
        return cls(path=config.catalog_path)

    def load(self) -> Catalog:
        """
        Load the catalog from its source, replacing any cached copy.

        Raises:
            CatalogValidationError: If the source data is invalid
        """
        if self._source_data is not None:
            raw = copy.deepcopy(self._source_data)
        else:
            raw = read_catalog_file(self.path)

        catalog = parse_catalog(raw)
        self._raw = raw
        self._catalog = catalog
        logger.info(
            "Loaded catalog: %d carriers, %d flavors, %d presets",
            len(catalog.carriers),
            len(catalog.flavors),
            len(catalog.presets),
        )
        return catalog

    def get(self) -> Catalog:
        """Return the cached catalog, loading it on first use."""
        if self._catalog is None:
            return self.load()
        return self._catalog

    def invalidate(self) -> None:
        """Drop the cached catalog; the next get() reloads it."""
        self._raw = None
        self._catalog = None

    @property
    def raw(self) -> Dict[str, Any]:
        """Deep copy of the raw data behind the cached catalog."""
        self.get()
        return copy.deepcopy(self._raw)

    def update(self, updates: Mapping[str, Any]) -> Catalog:
        """
        Replace top-level catalog sections all-or-nothing.

        Args:
            updates: Sections to replace (e.g., {"pricing": {...}})

        Returns:
            The new cached catalog

        Raises:
            CatalogValidationError: If the merged catalog is invalid. The
                previous catalog stays cached.
        """
        merged = self.raw
        merged.update(copy.deepcopy(dict(updates)))

        try:
            catalog = parse_catalog(merged)
        except CatalogValidationError as e:
            logger.warning("Rejected catalog update: %s", "; ".join(e.errors))
            raise

        self._raw = merged
        self._catalog = catalog
        logger.info("Catalog updated: %s", ", ".join(sorted(updates)))
        return catalog
