"""Shipping database table models."""

from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import Field

from merchcore.entities._base import EntityTable


class ShipCountryTable(EntityTable, table=True):
    """Database persistence model for ship countries."""

    __tablename__ = "ship_country"

    catalog_key: str | None = Field(default=None, index=True)
    country_code: str = Field(index=True)
    name: str = ""
    provider_keys: list[str] = Field(default_factory=list, sa_column=Column(JSON))


class ShipMethodTable(EntityTable, table=True):
    """Database persistence model for rate table shipping methods."""

    __tablename__ = "ship_method"

    ship_country_key: str = Field(index=True)
    provider_key: str = Field(index=True)
    name: str
    service_code: str = ""
    rate_table_type: str
    taxable: bool = False
    rate_table: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
