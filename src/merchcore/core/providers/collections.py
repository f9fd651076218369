"""Entity collection providers and their registry."""

from __future__ import annotations

from abc import ABC
from collections.abc import Callable
from contextlib import AbstractContextManager

from loguru import logger
from sqlmodel import Session

from merchcore.core.exceptions import Attempt, NotFoundError
from merchcore.core.providers.registry import ProviderRegistry, provider_defn
from merchcore.entities.collection import EntityCollectionRepository, EntityType
from merchcore.runtime.config.config_data import (
    STATIC_CUSTOMER_COLLECTION_PROVIDER_KEY,
    STATIC_INVOICE_COLLECTION_PROVIDER_KEY,
    STATIC_PRODUCT_COLLECTION_PROVIDER_KEY,
)

SessionFactory = Callable[[], AbstractContextManager[Session]]


class EntityCollectionProvider(ABC):
    """Manages membership of one entity type in the collections it owns."""

    entity_type: EntityType

    def __init__(self, session_factory: SessionFactory, key: str | None = None) -> None:
        self._sessions = session_factory
        self.key = key or getattr(type(self), "__provider_key__", type(self).__name__)

    def supports(self, entity_type: EntityType) -> bool:
        return entity_type == self.entity_type

    def add(self, entity_key: str, collection_key: str) -> bool:
        with self._sessions() as session:
            added = EntityCollectionRepository(session).add_entity(entity_key, collection_key)
        if added:
            logger.info("Added {} {} to collection {}", self.entity_type, entity_key, collection_key)
        return added

    def remove(self, entity_key: str, collection_key: str) -> bool:
        with self._sessions() as session:
            removed = EntityCollectionRepository(session).remove_entity(entity_key, collection_key)
        if removed:
            logger.info("Removed {} {} from collection {}", self.entity_type, entity_key, collection_key)
        return removed

    def exists(self, entity_key: str, collection_key: str) -> bool:
        with self._sessions() as session:
            return EntityCollectionRepository(session).exists_in_collection(entity_key, collection_key)


@provider_defn(key=STATIC_PRODUCT_COLLECTION_PROVIDER_KEY, name="Static Product Collection")
class StaticProductCollectionProvider(EntityCollectionProvider):
    entity_type = EntityType.PRODUCT


@provider_defn(key=STATIC_INVOICE_COLLECTION_PROVIDER_KEY, name="Static Invoice Collection")
class StaticInvoiceCollectionProvider(EntityCollectionProvider):
    entity_type = EntityType.INVOICE


@provider_defn(key=STATIC_CUSTOMER_COLLECTION_PROVIDER_KEY, name="Static Customer Collection")
class StaticCustomerCollectionProvider(EntityCollectionProvider):
    entity_type = EntityType.CUSTOMER


class EntityCollectionProviderRegistry(ProviderRegistry[EntityCollectionProvider]):
    """Resolves collection providers by key, by entity type or by collection."""

    provider_type = EntityCollectionProvider

    def __init__(
        self,
        session_factory: SessionFactory,
        factories: dict[str, Callable[[], EntityCollectionProvider]] | None = None,
    ) -> None:
        super().__init__(factories)
        self._sessions = session_factory

    def get_providers_for_entity_type(self, entity_type: EntityType) -> set[EntityCollectionProvider]:
        return {provider for provider in self.resolve_all() if provider.supports(entity_type)}

    def get_provider_for_collection(self, collection_key: str) -> Attempt[EntityCollectionProvider]:
        """Resolve the provider managing a collection without raising."""
        with self._sessions() as session:
            provider_key = EntityCollectionRepository(session).get_provider_key(collection_key)

        if provider_key is None:
            return Attempt.fail(NotFoundError("EntityCollection", collection_key))

        try:
            return Attempt.succeed(self.resolve_by_key(provider_key))
        except NotFoundError as exc:
            logger.debug("Collection {} uses unregistered provider {}", collection_key, provider_key)
            return Attempt.fail(exc)
