"""Entities: ShipCountry and rate table shipping methods."""

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

from merchcore.entities._base import Entity


class ShipCountry(Entity):
    """A country a catalog ships to, with its configured gateway providers."""

    catalog_key: str | None = Field(default=None, description="Key of the warehouse catalog")
    country_code: str = Field(min_length=2, max_length=3, description="ISO country code")
    name: str = Field(default="", description="Country name")
    provider_keys: list[str] = Field(
        default_factory=list,
        description="Shipping gateway providers configured for the country, in order",
    )

    @field_validator("country_code")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()


class RateTableType(StrEnum):
    """How the rate table breakpoints are measured."""

    VARY_BY_WEIGHT = "VaryByWeight"
    VARY_BY_PRICE = "VaryByPrice"


class ShipRateTier(BaseModel):
    """One breakpoint of a rate table."""

    range_low: Decimal = Field(ge=0)
    range_high: Decimal = Field(ge=0)
    rate: Decimal = Field(ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "ShipRateTier":
        if self.range_high < self.range_low:
            raise ValueError("range_high must not be below range_low")
        return self


class ShipMethod(Entity):
    """A way of shipping to a ship country offered by one gateway provider."""

    ship_country_key: str = Field(description="Key of the owning ship country")
    provider_key: str = Field(description="Key of the owning gateway provider")
    name: str = Field(description="Method name shown to customers")
    service_code: str = Field(default="", description="Provider specific service code")
    taxable: bool = False


class RateTableShippingMethod(ShipMethod):
    """A shipping method priced from a table of breakpoints."""

    rate_table_type: RateTableType = RateTableType.VARY_BY_WEIGHT
    rate_table: list[ShipRateTier] = Field(default_factory=list)
