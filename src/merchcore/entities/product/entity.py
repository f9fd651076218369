"""Entities: Product and its options, choices and variants."""

from collections.abc import Iterator
from decimal import Decimal
from typing import Any

from pydantic import Field, model_validator

from merchcore.entities._base import Entity
from merchcore.entities.inventory.entity import CatalogInventory


class ProductAttribute(Entity):
    """One selectable choice of a product option (e.g. "Red" for "Color")."""

    option_key: str | None = Field(default=None, description="Key of the owning option")
    name: str = Field(description="Choice name")
    sku: str = Field(default="", description="SKU fragment contributed by the choice")
    sort_order: int = Field(default=0, description="Position within the option")

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ProductAttribute):
            return False
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


class ProductOption(Entity):
    """A named axis of product configuration holding an ordered set of choices."""

    name: str = Field(description="Option name")
    choices: list[ProductAttribute] = Field(default_factory=list)
    required: bool = Field(default=True, description="A choice must be selected")
    sort_order: int = Field(default=0, description="Position within the product")

    @model_validator(mode="after")
    def _own_choices(self) -> "ProductOption":
        for choice in self.choices:
            if choice.option_key is None:
                choice.option_key = self.key
            elif choice.option_key != self.key:
                raise ValueError(
                    f"Choice {choice.name!r} belongs to option {choice.option_key}, not {self.key}"
                )
        return self

    def add_choice(self, name: str, sku: str = "") -> ProductAttribute:
        choice = ProductAttribute(
            option_key=self.key, name=name, sku=sku, sort_order=len(self.choices)
        )
        self.choices.append(choice)
        return choice

    def owns(self, attribute_key: str) -> bool:
        return any(choice.key == attribute_key for choice in self.choices)


class DetachedContent(Entity):
    """Culture specific content attached to a variant."""

    product_variant_key: str = Field(description="Key of the owning variant")
    culture_name: str = Field(default="en-US")
    slug: str = Field(default="")
    template_id: int | None = None
    can_be_rendered: bool = True
    values: dict[str, str] = Field(default_factory=dict)


class ProductVariant(Entity):
    """A purchasable SKU identified within its product by its attribute signature."""

    product_key: str | None = Field(default=None, description="Key of the owning product")
    name: str = ""
    sku: str
    master: bool = Field(default=False, description="Represents a product without options")
    attributes: list[ProductAttribute] = Field(default_factory=list)

    price: Decimal = Decimal("0")
    cost_of_goods: Decimal | None = None
    sale_price: Decimal | None = None
    on_sale: bool = False
    manufacturer: str | None = None
    barcode: str | None = None
    weight: Decimal | None = None
    length: Decimal | None = None
    width: Decimal | None = None
    height: Decimal | None = None

    available: bool = True
    track_inventory: bool = False
    out_of_stock_purchase: bool = False
    taxable: bool = True
    shippable: bool = True

    catalog_inventories: list[CatalogInventory] = Field(default_factory=list)
    detached_contents: list[DetachedContent] = Field(default_factory=list)

    @property
    def attribute_keys(self) -> frozenset[str]:
        return frozenset(attribute.key for attribute in self.attributes)

    @property
    def total_inventory_count(self) -> int:
        return sum(inventory.count for inventory in self.catalog_inventories)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ProductVariant):
            return False
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


class Product(Entity):
    """A sellable product.

    Holds its options in insertion order and every stored variant, exactly one
    of which is the master variant. A product created without a master variant
    gets one built from its own name, sku and price.
    """

    name: str
    sku: str
    price: Decimal = Decimal("0")
    options: list[ProductOption] = Field(default_factory=list)
    variants: list[ProductVariant] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_variants(self) -> "Product":
        masters = [variant for variant in self.variants if variant.master]
        if not masters:
            self.variants.insert(
                0,
                ProductVariant(
                    product_key=self.key,
                    name=self.name,
                    sku=self.sku,
                    price=self.price,
                    master=True,
                ),
            )
        elif len(masters) > 1:
            raise ValueError(f"Product {self.key} has {len(masters)} master variants")
        elif masters[0].attributes:
            raise ValueError("The master variant cannot carry attributes")

        signatures: set[frozenset[str]] = set()
        for variant in self.variants:
            if variant.product_key is None:
                variant.product_key = self.key
            elif variant.product_key != self.key:
                raise ValueError(f"Variant {variant.key} belongs to product {variant.product_key}")
            if variant.attribute_keys in signatures:
                raise ValueError(
                    f"Duplicate attribute signature {sorted(variant.attribute_keys)} on product {self.key}"
                )
            signatures.add(variant.attribute_keys)
        return self

    @property
    def master_variant(self) -> ProductVariant:
        return next(variant for variant in self.variants if variant.master)

    @property
    def has_options(self) -> bool:
        return bool(self.options)

    def option_variants(self) -> list[ProductVariant]:
        """Variants other than the master."""
        return [variant for variant in self.variants if not variant.master]

    def choices(self) -> Iterator[ProductAttribute]:
        for option in self.options:
            yield from option.choices

    def find_choice(self, attribute_key: str) -> ProductAttribute | None:
        return next((choice for choice in self.choices() if choice.key == attribute_key), None)

    def add_option(self, name: str, required: bool = True) -> ProductOption:
        option = ProductOption(name=name, required=required, sort_order=len(self.options))
        self.options.append(option)
        return option
