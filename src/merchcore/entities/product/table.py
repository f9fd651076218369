"""Product database table models."""

from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import Field

from merchcore.entities._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    Options and their choices are stored as a JSON document; they only ever
    load and save together with the product.
    """

    __tablename__ = "product"

    name: str
    sku: str = Field(index=True)
    price: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    options: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))


class ProductVariantTable(EntityTable, table=True):
    """Database persistence model for product variants.

    The attribute signature is stored as a snapshot of the choices, so a
    variant still loads after one of its choices was removed from the product.
    """

    __tablename__ = "product_variant"

    product_key: str = Field(index=True)
    name: str = ""
    sku: str = Field(index=True)
    master: bool = False
    price: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    attributes: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    details: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
