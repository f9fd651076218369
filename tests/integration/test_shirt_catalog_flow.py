"""End to end flow: configure a product, stock it, collect it and ship it."""

from decimal import Decimal

from merchcore.core.services.catalog_inventory import CatalogInventoryLedger
from merchcore.core.services.collection_membership import CollectionMembership
from merchcore.core.services.shipping_methods import (
    RateTableShipMethodDefinition,
    ShippingMethodCatalog,
)
from merchcore.core.services.variant_composer import VariantComposer
from merchcore.entities.collection import EntityCollection
from merchcore.entities.inventory import WarehouseCatalog
from merchcore.entities.product import ProductRepository
from merchcore.entities.shipping import RateTableType, ShipCountry, ShipRateTier
from merchcore.runtime.context import MerchContext
from tests.fixtures.catalog import build_shirt, choice


class TestShirtCatalogFlow:
    """Color{Red, Blue} x Size{S, M} from options to a shippable, stocked product."""

    def test_full_flow(
        self,
        context: MerchContext,
        warehouse_catalog: WarehouseCatalog,
        product_collection: EntityCollection,
        ship_country: ShipCountry,
    ):
        composer = VariantComposer()
        ledger = CatalogInventoryLedger.for_context(context)
        shirt = build_shirt()

        combinations = list(composer.possible_attribute_combinations(shirt))
        assert len(combinations) == 4
        assert all(len(combination) == 2 for combination in combinations)

        created = composer.ensure_variants(shirt)
        assert len(created) == 4
        for count, variant in enumerate(created, start=1):
            ledger.associate(variant, warehouse_catalog, count=count * 10, low_count=15)

        blue, medium = choice(shirt, "Color", "Blue"), choice(shirt, "Size", "M")
        blue_medium = composer.find_variant(shirt, [medium, blue])
        assert blue_medium is not None
        assert blue_medium.sku == "SHIRT-BLU-M"
        assert composer.find_variant(shirt, [blue]) is None
        assert composer.variant_for_purchase_no_options(shirt) is None

        with context.db.session() as session:
            ProductRepository(session).save(shirt)
        with context.db.session() as session:
            stored = ProductRepository(session).get(shirt.key)

        assert stored is not None
        stored_variant = composer.find_variant_by_keys(stored, [blue.key, medium.key])
        assert stored_variant is not None
        inventory = ledger.inventory_for(stored_variant, warehouse_catalog)
        assert inventory is not None
        assert inventory.count == 40
        low = [v.sku for v in stored.option_variants() if ledger.is_low(ledger.inventory_for(v, warehouse_catalog))]
        assert low == ["SHIRT-RED-S"]

        membership = CollectionMembership(context)
        assert membership.add_to_collection(stored, product_collection)
        assert [c.key for c in membership.collections_containing(stored)] == [product_collection.key]

        shipping = ShippingMethodCatalog(context)
        shipping.create_method(
            RateTableType.VARY_BY_WEIGHT,
            ship_country.key,
            "Standard",
            RateTableShipMethodDefinition(
                ship_country_key=ship_country.key,
                name="Standard",
                rate_table=[ShipRateTier(range_low=Decimal("0"), range_high=Decimal("10"), rate=Decimal("5"))],
            ),
        )
        assert [m.name for m in shipping.list_methods_for_country(ship_country.key)] == ["Standard"]
