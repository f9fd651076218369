"""Entity package: ShipCountry and RateTableShippingMethod."""

from .entity import (
    RateTableShippingMethod,
    RateTableType,
    ShipCountry,
    ShipMethod,
    ShipRateTier,
)
from .repository import ShipCountryRepository, ShipMethodRepository
from .table import ShipCountryTable, ShipMethodTable

__all__ = [
    "ShipCountry",
    "ShipMethod",
    "RateTableShippingMethod",
    "RateTableType",
    "ShipRateTier",
    "ShipCountryRepository",
    "ShipMethodRepository",
    "ShipCountryTable",
    "ShipMethodTable",
]
