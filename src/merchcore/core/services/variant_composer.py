"""Variant composition: expand option choices into variants and match selections back."""

from collections.abc import Iterable, Iterator
from itertools import product as cartesian
from typing import Any

from loguru import logger

from merchcore.core.exceptions import DuplicateVariantError, InvalidAttributeSelectionError
from merchcore.entities.inventory.entity import CatalogInventory
from merchcore.entities.product.entity import (
    Product,
    ProductAttribute,
    ProductOption,
    ProductVariant,
)

# Values a new variant takes from the master variant unless given explicitly
_INHERITED_FIELDS = (
    "price",
    "cost_of_goods",
    "sale_price",
    "on_sale",
    "manufacturer",
    "weight",
    "length",
    "width",
    "height",
    "available",
    "track_inventory",
    "out_of_stock_purchase",
    "taxable",
    "shippable",
)


class VariantComposer:
    """Stateless operations over a product's options and variants."""

    def possible_attribute_combinations(self, product: Product) -> Iterator[tuple[ProductAttribute, ...]]:
        """Every choice combination, one choice per option.

        Options are walked in product order and choices in option order. A
        product without options yields nothing at all. Each call returns a
        fresh iterator.
        """
        if not product.options:
            return iter(())
        return cartesian(*(option.choices for option in product.options))

    def find_variant(
        self, product: Product, selected_attributes: Iterable[ProductAttribute]
    ) -> ProductVariant | None:
        return self.find_variant_by_keys(product, (attribute.key for attribute in selected_attributes))

    def find_variant_by_keys(
        self, product: Product, selected_attribute_keys: Iterable[str]
    ) -> ProductVariant | None:
        """The variant whose signature is exactly the selected keys, in any order."""
        keys = list(selected_attribute_keys)
        wanted = frozenset(keys)
        if len(wanted) != len(keys):
            return None
        return next(
            (variant for variant in product.variants if variant.attribute_keys == wanted),
            None,
        )

    def variant_for_purchase_no_options(self, product: Product) -> ProductVariant | None:
        if product.has_options:
            return None
        return product.master_variant

    def options_for_attributes(
        self, product: Product, attributes: Iterable[ProductAttribute]
    ) -> list[ProductOption]:
        keys = {attribute.key for attribute in attributes}
        return [option for option in product.options if any(option.owns(key) for key in keys)]

    def suggest_sku(self, product: Product, attributes: Iterable[ProductAttribute]) -> str:
        """Product sku followed by each choice's sku fragment, in option order."""
        fragments = [product.sku]
        fragments.extend(choice.sku or choice.name for choice in self._in_option_order(product, attributes))
        return "-".join(fragment for fragment in fragments if fragment)

    def suggest_name(self, product: Product, attributes: Iterable[ProductAttribute]) -> str:
        names = [product.name]
        names.extend(choice.name for choice in self._in_option_order(product, attributes))
        return " ".join(name for name in names if name)

    def create_variant(
        self,
        product: Product,
        attributes: Iterable[ProductAttribute],
        sku: str | None = None,
        name: str | None = None,
        **fields: Any,
    ) -> ProductVariant:
        """Add a variant for the given choices to ``product`` and return it.

        Raises:
            InvalidAttributeSelectionError: If a choice does not belong to the
                product, two choices share an option, or a required option has
                no choice
            DuplicateVariantError: If a variant with the same choices exists
        """
        choices = self._validate_selection(product, attributes)
        keys = frozenset(choice.key for choice in choices)
        if self.find_variant_by_keys(product, keys) is not None:
            raise DuplicateVariantError(product.key, keys)

        master = product.master_variant
        values: dict[str, Any] = {field: getattr(master, field) for field in _INHERITED_FIELDS}
        values.update(fields)

        variant = ProductVariant(
            product_key=product.key,
            name=name or self.suggest_name(product, choices),
            sku=sku or self.suggest_sku(product, choices),
            attributes=choices,
            **values,
        )
        variant.catalog_inventories = [
            CatalogInventory(
                catalog_key=inventory.catalog_key,
                product_variant_key=variant.key,
                low_count=inventory.low_count,
            )
            for inventory in master.catalog_inventories
        ]
        product.variants.append(variant)
        product.touch()
        logger.info("Created variant {} ({}) for product {}", variant.sku, variant.key, product.key)
        return variant

    def missing_attribute_combinations(self, product: Product) -> Iterator[tuple[ProductAttribute, ...]]:
        for combination in self.possible_attribute_combinations(product):
            if self.find_variant(product, combination) is None:
                yield combination

    def ensure_variants(self, product: Product) -> list[ProductVariant]:
        """Create a variant for every combination that has none yet.

        Existing variants are left alone, including ones whose choices no
        longer exist.
        """
        missing = list(self.missing_attribute_combinations(product))
        created = [self.create_variant(product, combination) for combination in missing]
        if created:
            logger.debug("Product {} gained {} variants", product.key, len(created))
        return created

    def _in_option_order(
        self, product: Product, attributes: Iterable[ProductAttribute]
    ) -> list[ProductAttribute]:
        position = {option.key: index for index, option in enumerate(product.options)}
        return sorted(
            attributes,
            key=lambda choice: (position.get(choice.option_key or "", len(position)), choice.sort_order),
        )

    def _validate_selection(
        self, product: Product, attributes: Iterable[ProductAttribute]
    ) -> list[ProductAttribute]:
        choices: list[ProductAttribute] = []
        for attribute in attributes:
            choice = product.find_choice(attribute.key)
            if choice is None:
                raise InvalidAttributeSelectionError(
                    f"Choice {attribute.name!r} ({attribute.key}) is not an option of product {product.key}"
                )
            choices.append(choice)

        if not choices:
            raise InvalidAttributeSelectionError("A variant needs at least one choice")

        by_option: dict[str, ProductAttribute] = {}
        for choice in choices:
            option_key = choice.option_key or ""
            if option_key in by_option:
                raise InvalidAttributeSelectionError(
                    f"Choices {by_option[option_key].name!r} and {choice.name!r} belong to the same option"
                )
            by_option[option_key] = choice

        for option in product.options:
            if option.required and option.key not in by_option:
                raise InvalidAttributeSelectionError(f"Option {option.name!r} needs a choice")

        return self._in_option_order(product, choices)
