"""Capability providers: the generic registry and the collection and shipping families."""

from .collections import (
    EntityCollectionProvider,
    EntityCollectionProviderRegistry,
    StaticCustomerCollectionProvider,
    StaticInvoiceCollectionProvider,
    StaticProductCollectionProvider,
)
from .registry import ProviderRegistry, discover, import_reference, provider_defn
from .shipping import (
    FixedRateShippingGatewayProvider,
    ShippingGatewayProvider,
    ShippingGatewayRegistry,
    ShippingProviderKind,
    as_fixed_rate,
)

__all__ = [
    "ProviderRegistry",
    "provider_defn",
    "discover",
    "import_reference",
    "EntityCollectionProvider",
    "EntityCollectionProviderRegistry",
    "StaticProductCollectionProvider",
    "StaticInvoiceCollectionProvider",
    "StaticCustomerCollectionProvider",
    "ShippingGatewayProvider",
    "ShippingGatewayRegistry",
    "ShippingProviderKind",
    "FixedRateShippingGatewayProvider",
    "as_fixed_rate",
]
