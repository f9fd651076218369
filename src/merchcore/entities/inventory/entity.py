"""Entities: WarehouseCatalog and CatalogInventory."""

from datetime import datetime

from pydantic import BaseModel, Field

from merchcore.entities._base import Entity, utc_now


class WarehouseCatalog(Entity):
    """A warehouse scoped inventory partition."""

    warehouse_key: str = Field(description="Key of the warehouse owning the catalog")
    name: str = Field(description="Catalog name")
    description: str | None = Field(default=None, description="Catalog description")


class CatalogInventory(BaseModel):
    """Stock of one product variant inside one warehouse catalog.

    Identified by the pair (catalog_key, product_variant_key); a variant holds
    at most one record per catalog.
    """

    catalog_key: str = Field(description="Key of the warehouse catalog")
    product_variant_key: str = Field(description="Key of the product variant")
    count: int = Field(default=0, description="Units in stock")
    low_count: int = Field(default=0, description="Low stock threshold")
    location: str | None = Field(default=None, description="Bin or shelf location")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def identity(self) -> tuple[str, str]:
        return (self.catalog_key, self.product_variant_key)

    @property
    def is_low(self) -> bool:
        return self.count <= self.low_count
