"""Entity package: Product."""

from .entity import (
    DetachedContent,
    Product,
    ProductAttribute,
    ProductOption,
    ProductVariant,
)
from .repository import ProductRepository
from .table import ProductTable, ProductVariantTable

__all__ = [
    "Product",
    "ProductOption",
    "ProductAttribute",
    "ProductVariant",
    "DetachedContent",
    "ProductRepository",
    "ProductTable",
    "ProductVariantTable",
]
