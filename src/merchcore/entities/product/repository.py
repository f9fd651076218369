from sqlmodel import Session, col, select

from merchcore.entities._base import utc_now
from merchcore.entities.inventory.repository import CatalogInventoryRepository
from merchcore.entities.product.entity import (
    Product,
    ProductAttribute,
    ProductOption,
    ProductVariant,
)
from merchcore.entities.product.table import ProductTable, ProductVariantTable

# Stored in dedicated columns or tables rather than in the details document
_VARIANT_COLUMNS = {
    "key",
    "product_key",
    "name",
    "sku",
    "master",
    "price",
    "attributes",
    "catalog_inventories",
    "created_at",
    "updated_at",
}


class ProductRepository:
    """Data-access layer for the product aggregate (options, variants, inventory)."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._inventory = CatalogInventoryRepository(session)

    def get(self, key: str) -> Product | None:
        row = self._session.get(ProductTable, key)
        if row is None:
            return None

        variant_rows = self._session.exec(
            select(ProductVariantTable)
            .where(ProductVariantTable.product_key == key)
            .order_by(col(ProductVariantTable.created_at), col(ProductVariantTable.key))
        ).all()

        return Product(
            key=row.key,
            name=row.name,
            sku=row.sku,
            price=row.price,
            options=[ProductOption.model_validate(option) for option in row.options],
            variants=[self._to_variant(variant_row) for variant_row in variant_rows],
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _to_variant(self, row: ProductVariantTable) -> ProductVariant:
        return ProductVariant(
            key=row.key,
            product_key=row.product_key,
            name=row.name,
            sku=row.sku,
            master=row.master,
            price=row.price,
            attributes=[ProductAttribute.model_validate(a) for a in row.attributes],
            catalog_inventories=self._inventory.list_by_variant(row.key),
            created_at=row.created_at,
            updated_at=row.updated_at,
            **row.details,
        )

    def save(self, product: Product) -> Product:
        """Insert or update the product with its variants and inventory.

        Variants missing from the aggregate are deleted along with their
        inventory rows. Committing is left to the caller.
        """
        product.touch()
        row = self._session.get(ProductTable, product.key)
        if row is None:
            row = ProductTable(key=product.key, created_at=product.created_at, name=product.name, sku=product.sku)
        row.name = product.name
        row.sku = product.sku
        row.price = product.price
        row.options = [option.model_dump(mode="json") for option in product.options]
        row.updated_at = product.updated_at
        self._session.add(row)

        existing = {
            variant_row.key: variant_row
            for variant_row in self._session.exec(
                select(ProductVariantTable).where(ProductVariantTable.product_key == product.key)
            )
        }
        keep = {variant.key for variant in product.variants}
        removed = [key for key in existing if key not in keep]
        self._inventory.delete_for_variants(removed)
        for key in removed:
            self._session.delete(existing[key])

        for variant in product.variants:
            variant_row = existing.get(variant.key) or ProductVariantTable(
                key=variant.key,
                product_key=product.key,
                sku=variant.sku,
                created_at=variant.created_at,
            )
            variant_row.name = variant.name
            variant_row.sku = variant.sku
            variant_row.master = variant.master
            variant_row.price = variant.price
            variant_row.attributes = [a.model_dump(mode="json") for a in variant.attributes]
            variant_row.details = variant.model_dump(mode="json", exclude=_VARIANT_COLUMNS)
            variant_row.updated_at = utc_now()
            self._session.add(variant_row)
            self._inventory.sync_variant(variant.key, variant.catalog_inventories)

        self._session.flush()
        return product

    def delete(self, key: str) -> bool:
        row = self._session.get(ProductTable, key)
        if row is None:
            return False

        variant_rows = self._session.exec(
            select(ProductVariantTable).where(ProductVariantTable.product_key == key)
        ).all()
        self._inventory.delete_for_variants(variant_row.key for variant_row in variant_rows)
        for variant_row in variant_rows:
            self._session.delete(variant_row)
        self._session.delete(row)
        self._session.flush()
        return True
