"""Entity package: EntityCollection."""

from .entity import EntityCollection, EntityType
from .repository import EntityCollectionRepository
from .table import EntityCollectionMembershipTable, EntityCollectionTable

__all__ = [
    "EntityCollection",
    "EntityType",
    "EntityCollectionRepository",
    "EntityCollectionTable",
    "EntityCollectionMembershipTable",
]
