"""Entity: EntityCollection."""

from enum import StrEnum

from pydantic import Field

from merchcore.entities._base import Entity


class EntityType(StrEnum):
    """Kinds of entities a collection can group."""

    PRODUCT = "Product"
    INVOICE = "Invoice"
    CUSTOMER = "Customer"
    ORDER = "Order"
    SHIPMENT = "Shipment"


class EntityCollection(Entity):
    """A named group of entities managed by one collection provider."""

    name: str = Field(description="Collection name")
    entity_type: EntityType = Field(description="Type of the grouped entities")
    provider_key: str = Field(description="Key of the managing collection provider")
    parent_key: str | None = Field(default=None, description="Key of the parent collection")
    sort_order: int = Field(default=0)
