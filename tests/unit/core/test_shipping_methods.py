"""Unit tests for the rate table shipping method catalog."""

from decimal import Decimal

import pytest

from merchcore.core.exceptions import NotFoundError, OperationFailedError
from merchcore.core.providers.shipping import FixedRateShippingGatewayProvider
from merchcore.core.services.shipping_methods import (
    RateTableShipMethodDefinition,
    ShippingMethodCatalog,
)
from merchcore.entities.shipping import (
    RateTableShippingMethod,
    RateTableType,
    ShipCountry,
    ShipMethodRepository,
    ShipRateTier,
)
from merchcore.runtime.config.config_data import FIXED_RATE_SHIPPING_PROVIDER_KEY
from merchcore.runtime.context import MerchContext


class _BrokenStorageProvider(FixedRateShippingGatewayProvider):
    def save_shipping_gateway_method(self, method: RateTableShippingMethod) -> RateTableShippingMethod:
        raise RuntimeError("storage unavailable")

    def delete_shipping_gateway_method(self, method: RateTableShippingMethod) -> None:
        raise RuntimeError("storage unavailable")


class _UnreadableStorageProvider(FixedRateShippingGatewayProvider):
    def get_all_shipping_gateway_methods(self, ship_country: ShipCountry) -> list[RateTableShippingMethod]:
        raise RuntimeError("storage unavailable")


def _failing_factory() -> FixedRateShippingGatewayProvider:
    raise RuntimeError("provider construction failed")


def _definition(ship_country: ShipCountry, name: str = "Ground") -> RateTableShipMethodDefinition:
    return RateTableShipMethodDefinition(
        ship_country_key=ship_country.key,
        name=name,
        rate_table=[
            ShipRateTier(range_low=Decimal("0"), range_high=Decimal("5"), rate=Decimal("4.99")),
            ShipRateTier(range_low=Decimal("5"), range_high=Decimal("20"), rate=Decimal("9.99")),
        ],
    )


@pytest.fixture
def catalog(context: MerchContext) -> ShippingMethodCatalog:
    return ShippingMethodCatalog(context)


@pytest.fixture
def ground(catalog: ShippingMethodCatalog, ship_country: ShipCountry) -> RateTableShippingMethod:
    return catalog.create_method(
        RateTableType.VARY_BY_WEIGHT, ship_country.key, "Ground", _definition(ship_country)
    )


class TestListing:
    """Listing providers and methods of a ship country."""

    def test_providers_for_country(self, catalog: ShippingMethodCatalog, ship_country: ShipCountry):
        providers = catalog.list_providers_for_country(ship_country.key)

        assert [provider.key for provider in providers] == [FIXED_RATE_SHIPPING_PROVIDER_KEY]

    def test_providers_for_unknown_country(self, catalog: ShippingMethodCatalog):
        with pytest.raises(NotFoundError):
            catalog.list_providers_for_country("no-such-country")

    def test_methods_for_unknown_country(self, catalog: ShippingMethodCatalog):
        with pytest.raises(NotFoundError) as exc_info:
            catalog.list_methods_for_country("no-such-country")

        assert exc_info.value.entity == "ShipCountry"

    def test_methods_for_country_without_fixed_rate_provider(
        self, catalog: ShippingMethodCatalog, unserved_ship_country: ShipCountry
    ):
        with pytest.raises(NotFoundError) as exc_info:
            catalog.list_methods_for_country(unserved_ship_country.key)

        assert exc_info.value.key == FIXED_RATE_SHIPPING_PROVIDER_KEY

    def test_country_without_methods(self, catalog: ShippingMethodCatalog, ship_country: ShipCountry):
        with pytest.raises(NotFoundError, match="no methods configured"):
            catalog.list_methods_for_country(ship_country.key)

    def test_lists_created_methods(
        self, catalog: ShippingMethodCatalog, ship_country: ShipCountry, ground: RateTableShippingMethod
    ):
        methods = catalog.list_methods_for_country(ship_country.key)

        assert [method.key for method in methods] == [ground.key]


class TestCreateMethod:
    """Creating rate table methods."""

    def test_creates_and_persists(self, context: MerchContext, ground: RateTableShippingMethod, ship_country: ShipCountry):
        assert ground.name == "Ground"
        assert ground.provider_key == FIXED_RATE_SHIPPING_PROVIDER_KEY
        assert ground.ship_country_key == ship_country.key
        assert ground.service_code.startswith("VaryByWeight-")
        assert [tier.rate for tier in ground.rate_table] == [Decimal("4.99"), Decimal("9.99")]

        with context.db.session() as session:
            stored = ShipMethodRepository(session).get(ground.key)
        assert stored is not None
        assert stored.rate_table == ground.rate_table

    def test_vary_by_price(self, catalog: ShippingMethodCatalog, ship_country: ShipCountry):
        method = catalog.create_method(
            RateTableType.VARY_BY_PRICE, ship_country.key, "Economy", _definition(ship_country, "Ignored")
        )

        assert method.rate_table_type is RateTableType.VARY_BY_PRICE
        assert method.name == "Economy"

    def test_unknown_country(self, catalog: ShippingMethodCatalog, ship_country: ShipCountry):
        with pytest.raises(NotFoundError):
            catalog.create_method(RateTableType.VARY_BY_WEIGHT, "no-such-country", "Ground", _definition(ship_country))

    def test_blank_name_is_an_operation_failure(self, catalog: ShippingMethodCatalog, ship_country: ShipCountry):
        with pytest.raises(OperationFailedError, match="needs a name"):
            catalog.create_method(RateTableType.VARY_BY_WEIGHT, ship_country.key, "  ", _definition(ship_country))

    def test_provider_failure_is_converted(
        self, context: MerchContext, catalog: ShippingMethodCatalog, ship_country: ShipCountry
    ):
        context.shipping_gateways.register(
            FIXED_RATE_SHIPPING_PROVIDER_KEY,
            lambda: _BrokenStorageProvider(context.db.session, key=FIXED_RATE_SHIPPING_PROVIDER_KEY),
        )

        with pytest.raises(OperationFailedError, match="storage unavailable") as exc_info:
            catalog.create_method(RateTableType.VARY_BY_WEIGHT, ship_country.key, "Ground", _definition(ship_country))

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_provider_construction_failure_is_converted(
        self, context: MerchContext, catalog: ShippingMethodCatalog, ship_country: ShipCountry
    ):
        context.shipping_gateways.register(FIXED_RATE_SHIPPING_PROVIDER_KEY, _failing_factory)

        with pytest.raises(OperationFailedError, match="provider construction failed"):
            catalog.create_method(RateTableType.VARY_BY_WEIGHT, ship_country.key, "Ground", _definition(ship_country))


class TestUpdateMethod:
    """Updating rate table methods."""

    def test_applies_definition(
        self, catalog: ShippingMethodCatalog, ship_country: ShipCountry, ground: RateTableShippingMethod
    ):
        definition = RateTableShipMethodDefinition(
            ship_country_key=ship_country.key,
            name="Ground Saver",
            rate_table_type=RateTableType.VARY_BY_PRICE,
            rate_table=[ShipRateTier(range_low=Decimal("0"), range_high=Decimal("100"), rate=Decimal("0"))],
            taxable=True,
        )

        updated = catalog.update_method(ground.key, definition)

        assert updated.key == ground.key
        stored = catalog.list_methods_for_country(ship_country.key)[0]
        assert stored.name == "Ground Saver"
        assert stored.rate_table_type is RateTableType.VARY_BY_PRICE
        assert stored.taxable is True
        assert len(stored.rate_table) == 1

    def test_unknown_method(self, catalog: ShippingMethodCatalog, ship_country: ShipCountry):
        with pytest.raises(NotFoundError):
            catalog.update_method("no-such-method", _definition(ship_country))

    def test_provider_failure_is_converted(
        self,
        context: MerchContext,
        catalog: ShippingMethodCatalog,
        ship_country: ShipCountry,
        ground: RateTableShippingMethod,
    ):
        context.shipping_gateways.register(
            FIXED_RATE_SHIPPING_PROVIDER_KEY,
            lambda: _BrokenStorageProvider(context.db.session, key=FIXED_RATE_SHIPPING_PROVIDER_KEY),
        )

        with pytest.raises(OperationFailedError):
            catalog.update_method(ground.key, _definition(ship_country, "Renamed"))

        assert catalog.list_methods_for_country(ship_country.key)[0].name == "Ground"

    def test_method_lookup_failure_is_converted(
        self,
        context: MerchContext,
        catalog: ShippingMethodCatalog,
        ship_country: ShipCountry,
        ground: RateTableShippingMethod,
    ):
        context.shipping_gateways.register(
            FIXED_RATE_SHIPPING_PROVIDER_KEY,
            lambda: _UnreadableStorageProvider(context.db.session, key=FIXED_RATE_SHIPPING_PROVIDER_KEY),
        )

        with pytest.raises(OperationFailedError, match="storage unavailable"):
            catalog.update_method(ground.key, _definition(ship_country, "Renamed"))


class TestDeleteMethod:
    """Deleting rate table methods."""

    def test_deletes_method(
        self, catalog: ShippingMethodCatalog, ship_country: ShipCountry, ground: RateTableShippingMethod
    ):
        removed = catalog.delete_method(ground.key, ship_country.key)

        assert removed.key == ground.key
        with pytest.raises(NotFoundError):
            catalog.list_methods_for_country(ship_country.key)

    def test_unknown_method(self, catalog: ShippingMethodCatalog, ship_country: ShipCountry):
        with pytest.raises(NotFoundError):
            catalog.delete_method("no-such-method", ship_country.key)

    def test_provider_failure_is_converted(
        self,
        context: MerchContext,
        catalog: ShippingMethodCatalog,
        ship_country: ShipCountry,
        ground: RateTableShippingMethod,
    ):
        context.shipping_gateways.register(
            FIXED_RATE_SHIPPING_PROVIDER_KEY,
            lambda: _BrokenStorageProvider(context.db.session, key=FIXED_RATE_SHIPPING_PROVIDER_KEY),
        )

        with pytest.raises(OperationFailedError, match="storage unavailable"):
            catalog.delete_method(ground.key, ship_country.key)

    def test_method_lookup_failure_is_converted(
        self,
        context: MerchContext,
        catalog: ShippingMethodCatalog,
        ship_country: ShipCountry,
        ground: RateTableShippingMethod,
    ):
        context.shipping_gateways.register(
            FIXED_RATE_SHIPPING_PROVIDER_KEY,
            lambda: _UnreadableStorageProvider(context.db.session, key=FIXED_RATE_SHIPPING_PROVIDER_KEY),
        )

        with pytest.raises(OperationFailedError, match="storage unavailable") as exc_info:
            catalog.delete_method(ground.key, ship_country.key)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
