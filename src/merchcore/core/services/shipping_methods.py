"""Rate table shipping methods offered through the fixed rate gateway provider."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger
from pydantic import BaseModel, Field

from merchcore.core.exceptions import NotFoundError, OperationFailedError
from merchcore.core.providers.shipping import (
    FixedRateShippingGatewayProvider,
    ShippingGatewayProvider,
    as_fixed_rate,
)
from merchcore.entities.shipping import (
    RateTableShippingMethod,
    RateTableType,
    ShipCountry,
    ShipCountryRepository,
    ShipRateTier,
)

if TYPE_CHECKING:
    from merchcore.runtime.context import MerchContext

T = TypeVar("T")


class RateTableShipMethodDefinition(BaseModel):
    """Caller supplied description of a rate table method."""

    ship_country_key: str = Field(description="Key of the ship country offering the method")
    name: str = Field(min_length=1, description="Method name")
    rate_table_type: RateTableType = RateTableType.VARY_BY_WEIGHT
    rate_table: list[ShipRateTier] = Field(default_factory=list)
    taxable: bool = False

    def apply_to(self, method: RateTableShippingMethod, **overrides: Any) -> RateTableShippingMethod:
        """Copy of ``method`` carrying this definition; ``overrides`` win over it."""
        values = {
            "name": self.name,
            "rate_table_type": self.rate_table_type,
            "rate_table": [tier.model_copy() for tier in self.rate_table],
            "taxable": self.taxable,
        }
        values.update(overrides)
        return method.model_copy(update=values)


class ShippingMethodCatalog:
    """List, create, update and delete rate table shipping methods.

    Scoped to the fixed rate provider named by ``shipping.fixed_rate_provider_key``.
    Unknown keys raise ``NotFoundError``. Any other failure while resolving
    the provider, reading or storing a method surfaces as
    ``OperationFailedError``.
    """

    def __init__(self, context: MerchContext) -> None:
        self._context = context
        self._provider_key = context.config.shipping.fixed_rate_provider_key

    def list_providers_for_country(self, ship_country_key: str) -> list[ShippingGatewayProvider]:
        def list_providers() -> list[ShippingGatewayProvider]:
            ship_country = self._ship_country(ship_country_key)
            providers = self._context.shipping_gateways.get_gateway_providers_by_ship_country(ship_country)
            return [provider for provider in providers if as_fixed_rate(provider) is not None]

        return self._capture(f"list shipping providers for {ship_country_key}", list_providers)

    def list_methods_for_country(self, ship_country_key: str) -> list[RateTableShippingMethod]:
        def list_methods() -> list[RateTableShippingMethod]:
            ship_country = self._ship_country(ship_country_key)
            provider = self._fixed_rate_provider(ship_country)
            methods = provider.get_all_shipping_gateway_methods(ship_country)
            if not methods:
                raise NotFoundError(
                    "RateTableShippingMethod", ship_country_key, detail="no methods configured"
                )
            return methods

        return self._capture(f"list shipping methods for {ship_country_key}", list_methods)

    def create_method(
        self,
        rate_table_type: RateTableType,
        ship_country_key: str,
        name: str,
        definition: RateTableShipMethodDefinition,
    ) -> RateTableShippingMethod:
        def create() -> RateTableShippingMethod:
            ship_country = self._ship_country(ship_country_key)
            provider = self._fixed_rate_provider(ship_country)
            method = provider.create_ship_method(rate_table_type, ship_country, name)
            method = definition.apply_to(
                method, name=method.name, rate_table_type=method.rate_table_type
            )
            return provider.save_shipping_gateway_method(method)

        return self._capture(f"create shipping method {name!r}", create)

    def update_method(
        self, method_key: str, definition: RateTableShipMethodDefinition
    ) -> RateTableShippingMethod:
        def update() -> RateTableShippingMethod:
            provider, method = self._find_method(method_key, definition.ship_country_key)
            return provider.save_shipping_gateway_method(definition.apply_to(method))

        return self._capture(f"update shipping method {method_key}", update)

    def delete_method(self, method_key: str, ship_country_key: str) -> RateTableShippingMethod:
        def delete() -> RateTableShippingMethod:
            provider, method = self._find_method(method_key, ship_country_key)
            provider.delete_shipping_gateway_method(method)
            return method

        return self._capture(f"delete shipping method {method_key}", delete)

    def _ship_country(self, ship_country_key: str) -> ShipCountry:
        with self._context.db.session() as session:
            ship_country = ShipCountryRepository(session).get(ship_country_key)
        if ship_country is None:
            raise NotFoundError("ShipCountry", ship_country_key)
        return ship_country

    def _fixed_rate_provider(self, ship_country: ShipCountry) -> FixedRateShippingGatewayProvider:
        if self._provider_key in ship_country.provider_keys and self._provider_key in self._context.shipping_gateways:
            provider = as_fixed_rate(self._context.shipping_gateways.resolve_by_key(self._provider_key))
            if provider is not None:
                return provider
        raise NotFoundError(
            "ShippingGatewayProvider",
            self._provider_key,
            detail=f"not configured for ship country {ship_country.key}",
        )

    def _find_method(
        self, method_key: str, ship_country_key: str
    ) -> tuple[FixedRateShippingGatewayProvider, RateTableShippingMethod]:
        ship_country = self._ship_country(ship_country_key)
        provider = self._fixed_rate_provider(ship_country)
        method = next(
            (m for m in provider.get_all_shipping_gateway_methods(ship_country) if m.key == method_key),
            None,
        )
        if method is None:
            raise NotFoundError("RateTableShippingMethod", method_key)
        return provider, method

    @staticmethod
    def _capture(action: str, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except (NotFoundError, OperationFailedError):
            raise
        except Exception as exc:
            logger.error("Failed to {}: {}", action, exc)
            raise OperationFailedError(str(exc) or f"Failed to {action}") from exc
