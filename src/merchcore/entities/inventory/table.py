"""Catalog inventory database table model."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from merchcore.entities._base import utc_now
from merchcore.entities.inventory.entity import CatalogInventory


class CatalogInventoryTable(SQLModel, table=True):
    """Database persistence model for catalog inventory.

    Keyed by (catalog_key, product_variant_key) so the storage layer enforces
    the one-record-per-pair rule as well.
    """

    __tablename__ = "catalog_inventory"

    catalog_key: str = Field(primary_key=True)
    product_variant_key: str = Field(primary_key=True, index=True)
    count: int = 0
    low_count: int = 0
    location: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_entity(cls, entity: CatalogInventory) -> "CatalogInventoryTable":
        return cls(**entity.model_dump())

    def to_entity(self) -> CatalogInventory:
        return CatalogInventory.model_validate(self, from_attributes=True)

    def apply(self, entity: CatalogInventory) -> None:
        self.count = entity.count
        self.low_count = entity.low_count
        self.location = entity.location
        self.updated_at = entity.updated_at
