"""Entity collection database table models."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from merchcore.entities._base import EntityTable, utc_now


class EntityCollectionTable(EntityTable, table=True):
    """Database persistence model for entity collections."""

    __tablename__ = "entity_collection"

    name: str
    entity_type: str = Field(index=True)
    provider_key: str = Field(index=True)
    parent_key: str | None = None
    sort_order: int = 0


class EntityCollectionMembershipTable(SQLModel, table=True):
    """Association between an entity (product, invoice, ...) and a collection."""

    __tablename__ = "entity_collection_membership"

    entity_key: str = Field(primary_key=True, index=True)
    collection_key: str = Field(primary_key=True, index=True)
    created_at: datetime = Field(default_factory=utc_now)
