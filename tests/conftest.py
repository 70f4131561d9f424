"""
Shared test fixtures for the drink builder tests.

This module provides:
- Raw catalog data read from the bundled catalog file
- Catalog stores and catalogs built from that data
- A builder wired to an isolated catalog store
"""

import copy

import pytest

from drink_builder.builder import DrinkBuilder
from drink_builder.catalog import CatalogStore, read_catalog_file
from drink_builder.config import DEFAULT_CATALOG_PATH

_BUNDLED_CATALOG = read_catalog_file(DEFAULT_CATALOG_PATH)


@pytest.fixture
def catalog_data():
    """Fresh copy of the bundled catalog data, safe to modify."""
    return copy.deepcopy(_BUNDLED_CATALOG)


@pytest.fixture
def catalog_store(catalog_data):
    """Catalog store isolated from the bundled file."""
    return CatalogStore(data=catalog_data)


@pytest.fixture
def catalog(catalog_store):
    return catalog_store.get()


@pytest.fixture
def builder(catalog_store):
    """Builder holding the default drink."""
    return DrinkBuilder(catalog_store=catalog_store)
