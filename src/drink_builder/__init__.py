"""Drink builder engine: volume balancing, pricing and compatibility rules."""

from .builder import BuilderSnapshot, DrinkBuilder
from .catalog import CatalogStore, CatalogValidationError
from .models import Base, BaseType, Booster, DrinkConfiguration, FlavorPortion, Mode

__all__ = [
    "DrinkBuilder",
    "BuilderSnapshot",
    "CatalogStore",
    "CatalogValidationError",
    "DrinkConfiguration",
    "Base",
    "BaseType",
    "Booster",
    "FlavorPortion",
    "Mode",
]
