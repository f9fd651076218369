"""Product membership in entity collections."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from merchcore.core.providers.collections import EntityCollectionProvider
from merchcore.entities.collection import EntityCollection, EntityCollectionRepository, EntityType
from merchcore.entities.product.entity import Product

if TYPE_CHECKING:
    from merchcore.runtime.context import MerchContext

CollectionRef = str | EntityCollection


def _collection_key(collection: CollectionRef) -> str:
    return collection.key if isinstance(collection, EntityCollection) else collection


class CollectionMembership:
    """Adds products to and removes them from provider managed collections.

    Every operation quietly does nothing while no ready context is available.
    """

    def __init__(self, context: MerchContext | None = None) -> None:
        self._context = context

    def _ready_context(self) -> MerchContext | None:
        if self._context is None or not self._context.ready:
            return None
        return self._context

    def add_to_collection(self, product: Product, collection: CollectionRef) -> bool:
        collection_key = _collection_key(collection)
        provider = self._product_provider(collection_key)
        if provider is None:
            return False
        return provider.add(product.key, collection_key)

    def remove_from_collection(self, product: Product, collection: CollectionRef) -> bool:
        collection_key = _collection_key(collection)
        provider = self._product_provider(collection_key)
        if provider is None:
            return False
        return provider.remove(product.key, collection_key)

    def collections_containing(self, product: Product) -> list[EntityCollection]:
        """Collections the product belongs to.

        Runs one query per call. Listings over many products should batch.
        """
        context = self._ready_context()
        if context is None:
            return []
        with context.db.session() as session:
            return EntityCollectionRepository(session).get_by_product_key(product.key)

    def _product_provider(self, collection_key: str) -> EntityCollectionProvider | None:
        context = self._ready_context()
        if context is None:
            logger.debug("No ready context; collection {} left unchanged", collection_key)
            return None

        attempt = context.collection_providers.get_provider_for_collection(collection_key)
        if not attempt.success or attempt.result is None:
            logger.debug("No provider for collection {}: {}", collection_key, attempt.error)
            return None

        provider = attempt.result
        if not provider.supports(EntityType.PRODUCT):
            logger.debug(
                "Provider {} of collection {} does not manage products",
                provider.key,
                collection_key,
            )
            return None
        return provider
