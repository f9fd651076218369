from collections.abc import Iterable

from sqlmodel import Session, col, select

from merchcore.entities.inventory.entity import CatalogInventory
from merchcore.entities.inventory.table import CatalogInventoryTable


class CatalogInventoryRepository:
    """Data-access layer for catalog inventory records."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, catalog_key: str, product_variant_key: str) -> CatalogInventory | None:
        row = self._session.get(CatalogInventoryTable, (catalog_key, product_variant_key))
        if row is None:
            return None
        return row.to_entity()

    def list_by_catalog(self, catalog_key: str) -> list[CatalogInventory]:
        statement = select(CatalogInventoryTable).where(
            CatalogInventoryTable.catalog_key == catalog_key
        )
        return [row.to_entity() for row in self._session.exec(statement)]

    def list_by_variant(self, product_variant_key: str) -> list[CatalogInventory]:
        statement = select(CatalogInventoryTable).where(
            CatalogInventoryTable.product_variant_key == product_variant_key
        )
        return [row.to_entity() for row in self._session.exec(statement)]

    def sync_variant(self, product_variant_key: str, inventories: Iterable[CatalogInventory]) -> None:
        """Make stored rows for a variant match ``inventories`` exactly."""
        wanted = {inv.catalog_key: inv for inv in inventories}
        existing = {
            row.catalog_key: row
            for row in self._session.exec(
                select(CatalogInventoryTable).where(
                    CatalogInventoryTable.product_variant_key == product_variant_key
                )
            )
        }

        for catalog_key, row in existing.items():
            if catalog_key not in wanted:
                self._session.delete(row)

        for catalog_key, inventory in wanted.items():
            row = existing.get(catalog_key)
            if row is None:
                self._session.add(CatalogInventoryTable.from_entity(inventory))
            else:
                row.apply(inventory)
                self._session.add(row)

    def delete_for_variants(self, product_variant_keys: Iterable[str]) -> None:
        keys = list(product_variant_keys)
        if not keys:
            return
        statement = select(CatalogInventoryTable).where(
            col(CatalogInventoryTable.product_variant_key).in_(keys)
        )
        for row in self._session.exec(statement).all():
            self._session.delete(row)
