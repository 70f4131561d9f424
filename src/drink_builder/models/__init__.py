"""Core data models for the drink builder.

This package contains the drink configuration models and the reference
catalog models.
"""

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
from drink_builder.models.drink import (
    PERSISTED_FIELDS,
    Base,
    BaseType,
    Booster,
    DrinkConfiguration,
    FlavorPortion,
    Mode,
    VolumeBreakdown,
    default_configuration,
)

__all__ = [
    "Mode",
    "BaseType",
    "Base",
    "FlavorPortion",
    "Booster",
    "VolumeBreakdown",
    "DrinkConfiguration",
    "PERSISTED_FIELDS",
    "default_configuration",
    "CarrierKind",
    "FlavorCategory",
    "CarrierOption",
    "FlavorOption",
    "FinishOption",
    "Preset",
    "PricingConfig",
    "CatalogSettings",
    "Catalog",
]
