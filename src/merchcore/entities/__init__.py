"""Entities module with entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model with business rules and validation
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .collection import EntityCollection, EntityCollectionRepository, EntityType
from .inventory import CatalogInventory, CatalogInventoryRepository, WarehouseCatalog
from .product import (
    Product,
    ProductAttribute,
    ProductOption,
    ProductRepository,
    ProductVariant,
)
from .shipping import (
    RateTableShippingMethod,
    RateTableType,
    ShipCountry,
    ShipCountryRepository,
    ShipMethod,
    ShipMethodRepository,
    ShipRateTier,
)

__all__ = [
    "Product",
    "ProductOption",
    "ProductAttribute",
    "ProductVariant",
    "ProductRepository",
    "CatalogInventory",
    "WarehouseCatalog",
    "CatalogInventoryRepository",
    "EntityCollection",
    "EntityType",
    "EntityCollectionRepository",
    "ShipCountry",
    "ShipMethod",
    "RateTableShippingMethod",
    "RateTableType",
    "ShipRateTier",
    "ShipCountryRepository",
    "ShipMethodRepository",
]
