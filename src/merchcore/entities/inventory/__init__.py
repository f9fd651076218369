"""Entity package: WarehouseCatalog and CatalogInventory."""

from .entity import CatalogInventory, WarehouseCatalog
from .repository import CatalogInventoryRepository
from .table import CatalogInventoryTable

__all__ = [
    "CatalogInventory",
    "WarehouseCatalog",
    "CatalogInventoryRepository",
    "CatalogInventoryTable",
]
