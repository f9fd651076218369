"""Unit tests for the capability provider registries."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from merchcore.core.exceptions import NotFoundError
from merchcore.core.providers.collections import (
    EntityCollectionProviderRegistry,
    StaticInvoiceCollectionProvider,
    StaticProductCollectionProvider,
)
from merchcore.core.providers.registry import ProviderRegistry, discover, import_reference, provider_defn
from merchcore.core.providers.shipping import (
    FixedRateShippingGatewayProvider,
    ShippingGatewayRegistry,
    ShippingProviderKind,
    as_fixed_rate,
)
from merchcore.core.services.database import DbSessionService
from merchcore.entities.collection import EntityCollection, EntityType
from merchcore.entities.shipping import ShipCountry
from merchcore.runtime.config.config_data import (
    FIXED_RATE_SHIPPING_PROVIDER_KEY,
    STATIC_PRODUCT_COLLECTION_PROVIDER_KEY,
)
from merchcore.runtime.context import MerchContext


class _Widget:
    def __init__(self, label: str = "widget"):
        self.label = label


class TestProviderRegistry:
    """Keyed singleton resolution."""

    def test_resolve_returns_same_instance(self):
        registry: ProviderRegistry[_Widget] = ProviderRegistry({"w": _Widget})

        first = registry.resolve_by_key("w")

        assert registry.resolve_by_key("w") is first

    def test_unknown_key_raises_not_found(self):
        registry: ProviderRegistry[_Widget] = ProviderRegistry()

        with pytest.raises(NotFoundError) as exc_info:
            registry.resolve_by_key("missing")

        assert exc_info.value.key == "missing"

    def test_concurrent_first_resolution_builds_once(self):
        """Many threads racing on an unbuilt key must share one instance."""
        calls = 0
        counter_lock = threading.Lock()
        start = threading.Barrier(16)

        def factory() -> _Widget:
            nonlocal calls
            with counter_lock:
                calls += 1
            time.sleep(0.01)
            return _Widget()

        registry: ProviderRegistry[_Widget] = ProviderRegistry({"w": factory})

        def resolve(_: int) -> _Widget:
            start.wait()
            return registry.resolve_by_key("w")

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(resolve, range(16)))

        assert calls == 1
        assert all(result is results[0] for result in results)

    def test_factory_may_resolve_another_key(self):
        registry: ProviderRegistry[_Widget] = ProviderRegistry()
        registry.register("inner", lambda: _Widget("inner"))
        registry.register("outer", lambda: _Widget(registry.resolve_by_key("inner").label + "-outer"))
        resolved: list[_Widget] = []

        worker = threading.Thread(target=lambda: resolved.append(registry.resolve_by_key("outer")), daemon=True)
        worker.start()
        worker.join(timeout=2)

        assert not worker.is_alive()
        assert resolved[0].label == "inner-outer"
        assert registry.resolve_by_key("inner") is registry.resolve_by_key("inner")

    def test_slow_construction_does_not_block_other_keys(self):
        release = threading.Event()

        def slow() -> _Widget:
            release.wait(timeout=2)
            return _Widget("slow")

        registry: ProviderRegistry[_Widget] = ProviderRegistry({"slow": slow, "fast": _Widget})

        with ThreadPoolExecutor(max_workers=1) as pool:
            pending = pool.submit(registry.resolve_by_key, "slow")
            assert registry.resolve_by_key("fast").label == "widget"
            assert not pending.done()
            release.set()
            assert pending.result().label == "slow"

    def test_failed_construction_is_not_cached(self):
        attempts = []

        def flaky() -> _Widget:
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("not yet")
            return _Widget()

        registry: ProviderRegistry[_Widget] = ProviderRegistry({"w": flaky})

        with pytest.raises(RuntimeError):
            registry.resolve_by_key("w")

        assert registry.resolve_by_key("w").label == "widget"

    def test_register_replaces_factory_and_instance(self):
        registry: ProviderRegistry[_Widget] = ProviderRegistry({"w": lambda: _Widget("old")})
        old = registry.resolve_by_key("w")

        registry.register("w", lambda: _Widget("new"))

        assert registry.resolve_by_key("w") is not old
        assert registry.resolve_by_key("w").label == "new"

    def test_keys_and_membership(self):
        registry: ProviderRegistry[_Widget] = ProviderRegistry({"a": _Widget, "b": _Widget})

        assert registry.keys == ["a", "b"]
        assert "a" in registry
        assert "c" not in registry
        assert len(registry.resolve_all()) == 2


class TestProviderDiscovery:
    """Decorator marking and package discovery."""

    def test_provider_defn_marks_class(self):
        @provider_defn(key="k-1", name="Sample")
        class Sample:
            pass

        assert Sample.__provider_registered__ is True
        assert Sample.__provider_key__ == "k-1"
        assert Sample.__provider_name__ == "Sample"

    def test_provider_defn_requires_key(self):
        with pytest.raises(ValueError, match="requires 'key'"):
            provider_defn(key="")

    def test_discover_finds_builtin_providers(self):
        found = discover("merchcore.core.providers")

        assert FixedRateShippingGatewayProvider in found
        assert StaticProductCollectionProvider in found

    def test_register_discovered_filters_by_provider_type(self, db: DbSessionService):
        registry = ShippingGatewayRegistry()

        keys = registry.register_discovered("merchcore.core.providers", session_factory=db.session)

        assert keys == [FIXED_RATE_SHIPPING_PROVIDER_KEY]
        assert isinstance(registry.resolve_by_key(FIXED_RATE_SHIPPING_PROVIDER_KEY), FixedRateShippingGatewayProvider)

    def test_import_reference(self):
        assert import_reference("merchcore.core.providers.shipping:ShippingGatewayRegistry") is ShippingGatewayRegistry

    @pytest.mark.parametrize("reference", ["no_colon_here", "merchcore.core.providers.shipping:Nope"])
    def test_import_reference_rejects_bad_references(self, reference: str):
        with pytest.raises(ValueError):
            import_reference(reference)


class TestCollectionProviderRegistry:
    """Resolution of collection providers."""

    def test_providers_for_entity_type(self, context: MerchContext):
        providers = context.collection_providers.get_providers_for_entity_type(EntityType.PRODUCT)

        assert len(providers) == 1
        assert isinstance(next(iter(providers)), StaticProductCollectionProvider)

    def test_no_providers_for_unserved_type(self, context: MerchContext):
        assert context.collection_providers.get_providers_for_entity_type(EntityType.SHIPMENT) == set()

    def test_provider_for_collection(self, context: MerchContext, invoice_collection: EntityCollection):
        attempt = context.collection_providers.get_provider_for_collection(invoice_collection.key)

        assert attempt.success
        assert isinstance(attempt.result, StaticInvoiceCollectionProvider)

    def test_unknown_collection_is_a_failed_attempt(self, context: MerchContext):
        attempt = context.collection_providers.get_provider_for_collection("no-such-collection")

        assert not attempt.success
        assert attempt.result is None
        assert isinstance(attempt.error, NotFoundError)

    def test_unregistered_provider_is_a_failed_attempt(
        self, db: DbSessionService, product_collection: EntityCollection
    ):
        registry = EntityCollectionProviderRegistry(db.session)

        attempt = registry.get_provider_for_collection(product_collection.key)

        assert not attempt.success
        assert attempt.error.key == STATIC_PRODUCT_COLLECTION_PROVIDER_KEY


class TestShippingGatewayRegistry:
    """Resolution of shipping gateway providers."""

    def test_providers_for_ship_country(self, context: MerchContext, ship_country: ShipCountry):
        providers = context.shipping_gateways.get_gateway_providers_by_ship_country(ship_country)

        assert len(providers) == 1
        assert providers[0].kind is ShippingProviderKind.FIXED_RATE
        assert as_fixed_rate(providers[0]) is providers[0]

    def test_unregistered_keys_are_skipped(self, context: MerchContext):
        country = ShipCountry(country_code="de", provider_keys=["unknown", FIXED_RATE_SHIPPING_PROVIDER_KEY])

        providers = context.shipping_gateways.get_gateway_providers_by_ship_country(country)

        assert [provider.key for provider in providers] == [FIXED_RATE_SHIPPING_PROVIDER_KEY]
        assert country.country_code == "DE"
