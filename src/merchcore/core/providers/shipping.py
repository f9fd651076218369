"""Shipping gateway providers and their registry.

Provider kinds form a closed family (``ShippingProviderKind``). Operations
that only make sense for rate tables live on ``FixedRateShippingGatewayProvider``
alone; callers reach them through ``as_fixed_rate`` instead of casting.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from enum import StrEnum
from typing import ClassVar

from loguru import logger
from sqlmodel import Session

from merchcore.core.exceptions import NotFoundError
from merchcore.core.providers.registry import ProviderRegistry, provider_defn
from merchcore.entities._base import new_key
from merchcore.entities.shipping import (
    RateTableShippingMethod,
    RateTableType,
    ShipCountry,
    ShipMethod,
    ShipMethodRepository,
)
from merchcore.runtime.config.config_data import FIXED_RATE_SHIPPING_PROVIDER_KEY

SessionFactory = Callable[[], AbstractContextManager[Session]]


class ShippingProviderKind(StrEnum):
    FIXED_RATE = "FixedRate"
    CARRIER = "Carrier"


class ShippingGatewayProvider(ABC):
    """Offers shipping methods for ship countries."""

    kind: ClassVar[ShippingProviderKind]

    def __init__(self, session_factory: SessionFactory, key: str | None = None) -> None:
        self._sessions = session_factory
        self.key = key or getattr(type(self), "__provider_key__", type(self).__name__)
        self.name = getattr(type(self), "__provider_name__", type(self).__name__)

    @abstractmethod
    def get_all_shipping_gateway_methods(self, ship_country: ShipCountry) -> Sequence[ShipMethod]:
        """Methods this provider has configured for ``ship_country``."""


@provider_defn(key=FIXED_RATE_SHIPPING_PROVIDER_KEY, name="Fixed Rate Shipping Provider")
class FixedRateShippingGatewayProvider(ShippingGatewayProvider):
    """Rate table shipping: prices come from weight or price breakpoints."""

    kind = ShippingProviderKind.FIXED_RATE

    def get_all_shipping_gateway_methods(self, ship_country: ShipCountry) -> list[RateTableShippingMethod]:
        with self._sessions() as session:
            return ShipMethodRepository(session).list_for(ship_country.key, self.key)

    def create_ship_method(
        self, rate_table_type: RateTableType, ship_country: ShipCountry, name: str
    ) -> RateTableShippingMethod:
        """Build a new, not yet persisted, rate table method for ``ship_country``."""
        if not name or not name.strip():
            raise ValueError("A shipping method needs a name")
        return RateTableShippingMethod(
            ship_country_key=ship_country.key,
            provider_key=self.key,
            name=name.strip(),
            service_code=f"{rate_table_type.value}-{new_key()}",
            rate_table_type=rate_table_type,
        )

    def save_shipping_gateway_method(self, method: RateTableShippingMethod) -> RateTableShippingMethod:
        if method.provider_key != self.key:
            raise ValueError(f"Method {method.key} belongs to provider {method.provider_key}, not {self.key}")
        with self._sessions() as session:
            saved = ShipMethodRepository(session).save(method)
        logger.info("Saved rate table method {} ({})", saved.name, saved.key)
        return saved

    def delete_shipping_gateway_method(self, method: RateTableShippingMethod) -> None:
        with self._sessions() as session:
            deleted = ShipMethodRepository(session).delete(method.key)
        if not deleted:
            raise NotFoundError("RateTableShippingMethod", method.key)
        logger.info("Deleted rate table method {} ({})", method.name, method.key)


def as_fixed_rate(provider: ShippingGatewayProvider) -> FixedRateShippingGatewayProvider | None:
    match provider:
        case FixedRateShippingGatewayProvider():
            return provider
        case _:
            return None


class ShippingGatewayRegistry(ProviderRegistry[ShippingGatewayProvider]):
    """Resolves shipping gateway providers by key or by ship country."""

    provider_type = ShippingGatewayProvider

    def get_gateway_providers_by_ship_country(self, ship_country: ShipCountry) -> list[ShippingGatewayProvider]:
        providers = []
        for key in ship_country.provider_keys:
            try:
                providers.append(self.resolve_by_key(key))
            except NotFoundError:
                logger.warning(
                    "Ship country {} lists unregistered shipping provider {}",
                    ship_country.country_code,
                    key,
                )
        return providers
