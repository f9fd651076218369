"""Association of product variants with warehouse catalog stock records."""

from __future__ import annotations

from loguru import logger

from merchcore.entities._base import utc_now
from merchcore.entities.inventory.entity import CatalogInventory, WarehouseCatalog
from merchcore.entities.product.entity import Product, ProductVariant
from merchcore.runtime.config.config_data import InventoryConfig
from merchcore.runtime.context import MerchContext, get_config

CatalogRef = str | WarehouseCatalog


def _catalog_key(catalog: CatalogRef) -> str:
    return catalog.key if isinstance(catalog, WarehouseCatalog) else catalog


class CatalogInventoryLedger:
    """Keeps at most one inventory record per (variant, catalog) pair.

    Records live on the variant. Persisting them is the job of the product
    repository when the owning product is saved.
    """

    def __init__(self, config: InventoryConfig | None = None) -> None:
        self._config = config if config is not None else get_config().inventory

    @classmethod
    def for_context(cls, context: MerchContext) -> CatalogInventoryLedger:
        """Ledger using the inventory defaults of an explicit runtime context."""
        return cls(context.config.inventory)

    def associate(
        self,
        variant: ProductVariant,
        catalog: CatalogRef,
        count: int | None = None,
        low_count: int | None = None,
        location: str | None = None,
    ) -> CatalogInventory:
        """Create or update the record tying ``variant`` to ``catalog``.

        An existing record keeps every value not given explicitly. A new one
        starts from the configured defaults.
        """
        catalog_key = _catalog_key(catalog)
        inventory = self.inventory_for(variant, catalog_key)

        if inventory is None:
            inventory = CatalogInventory(
                catalog_key=catalog_key,
                product_variant_key=variant.key,
                count=self._config.default_count if count is None else count,
                low_count=self._config.default_low_count if low_count is None else low_count,
                location=location,
            )
            variant.catalog_inventories.append(inventory)
            logger.info("Variant {} added to catalog {}", variant.key, catalog_key)
            return inventory

        if count is not None:
            inventory.count = count
        if low_count is not None:
            inventory.low_count = low_count
        if location is not None:
            inventory.location = location
        inventory.updated_at = utc_now()
        logger.info("Variant {} inventory in catalog {} updated", variant.key, catalog_key)
        return inventory

    def associate_product(
        self,
        product: Product,
        catalog: CatalogRef,
        count: int | None = None,
        low_count: int | None = None,
        location: str | None = None,
    ) -> CatalogInventory:
        return self.associate(product.master_variant, catalog, count, low_count, location)

    def dissociate(self, variant: ProductVariant, catalog: CatalogRef) -> bool:
        """Remove the record for ``catalog``; returns False when there was none."""
        catalog_key = _catalog_key(catalog)
        inventory = self.inventory_for(variant, catalog_key)
        if inventory is None:
            logger.debug("Variant {} is not in catalog {}; nothing to remove", variant.key, catalog_key)
            return False
        variant.catalog_inventories.remove(inventory)
        logger.info("Variant {} removed from catalog {}", variant.key, catalog_key)
        return True

    def inventory_for(self, variant: ProductVariant, catalog: CatalogRef) -> CatalogInventory | None:
        catalog_key = _catalog_key(catalog)
        return next(
            (inv for inv in variant.catalog_inventories if inv.catalog_key == catalog_key),
            None,
        )

    @staticmethod
    def is_low(inventory: CatalogInventory) -> bool:
        return inventory.is_low
