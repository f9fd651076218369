from sqlmodel import Session, col, select

from merchcore.entities.collection.entity import EntityCollection, EntityType
from merchcore.entities.collection.table import (
    EntityCollectionMembershipTable,
    EntityCollectionTable,
)


class EntityCollectionRepository:
    """Data-access layer for entity collections and their members."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, key: str) -> EntityCollection | None:
        row = self._session.get(EntityCollectionTable, key)
        if row is None:
            return None
        return EntityCollection.model_validate(row, from_attributes=True)

    def get_provider_key(self, key: str) -> str | None:
        row = self._session.get(EntityCollectionTable, key)
        return None if row is None else row.provider_key

    def list_by_entity_type(self, entity_type: EntityType) -> list[EntityCollection]:
        statement = select(EntityCollectionTable).where(
            EntityCollectionTable.entity_type == entity_type.value
        )
        return [
            EntityCollection.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def save(self, collection: EntityCollection) -> EntityCollection:
        collection.touch()
        row = self._session.get(EntityCollectionTable, collection.key)
        if row is None:
            row = EntityCollectionTable(key=collection.key, created_at=collection.created_at, name=collection.name)
        row.name = collection.name
        row.entity_type = collection.entity_type.value
        row.provider_key = collection.provider_key
        row.parent_key = collection.parent_key
        row.sort_order = collection.sort_order
        row.updated_at = collection.updated_at
        self._session.add(row)
        self._session.flush()
        return collection

    def exists_in_collection(self, entity_key: str, collection_key: str) -> bool:
        return self._session.get(EntityCollectionMembershipTable, (entity_key, collection_key)) is not None

    def add_entity(self, entity_key: str, collection_key: str) -> bool:
        """Add a member; returns False when it was already present."""
        if self.exists_in_collection(entity_key, collection_key):
            return False
        self._session.add(
            EntityCollectionMembershipTable(entity_key=entity_key, collection_key=collection_key)
        )
        self._session.flush()
        return True

    def remove_entity(self, entity_key: str, collection_key: str) -> bool:
        row = self._session.get(EntityCollectionMembershipTable, (entity_key, collection_key))
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def get_by_entity_key(self, entity_key: str, entity_type: EntityType | None = None) -> list[EntityCollection]:
        statement = (
            select(EntityCollectionTable)
            .join(
                EntityCollectionMembershipTable,
                col(EntityCollectionMembershipTable.collection_key) == col(EntityCollectionTable.key),
            )
            .where(EntityCollectionMembershipTable.entity_key == entity_key)
            .order_by(col(EntityCollectionTable.sort_order), col(EntityCollectionTable.name))
        )
        if entity_type is not None:
            statement = statement.where(EntityCollectionTable.entity_type == entity_type.value)
        return [
            EntityCollection.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def get_by_product_key(self, product_key: str) -> list[EntityCollection]:
        return self.get_by_entity_key(product_key, EntityType.PRODUCT)
