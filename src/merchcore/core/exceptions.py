"""Failure types raised or returned by the core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class MerchCoreError(Exception):
    """Base class for every error the core raises."""


class NotFoundError(MerchCoreError, LookupError):
    """A referenced key does not resolve to an entity."""

    def __init__(self, entity: str, key: object, detail: str | None = None) -> None:
        self.entity = entity
        self.key = key
        message = f"{entity} not found: {key}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class OperationFailedError(MerchCoreError):
    """A collaborator failed while constructing or persisting an entity."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidAttributeSelectionError(MerchCoreError, ValueError):
    """The selected choices cannot describe a variant of the product."""


class DuplicateVariantError(MerchCoreError, ValueError):
    """A variant with the same attribute signature already exists."""

    def __init__(self, product_key: str, attribute_keys: frozenset[str]) -> None:
        self.product_key = product_key
        self.attribute_keys = attribute_keys
        super().__init__(
            f"Product {product_key} already has a variant for attributes {sorted(attribute_keys)}"
        )


@dataclass(frozen=True)
class Attempt(Generic[T]):
    """Outcome of a lookup whose failure callers usually treat as a no-op."""

    result: T | None = None
    error: MerchCoreError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def succeed(cls, result: T) -> Attempt[T]:
        return cls(result=result)

    @classmethod
    def fail(cls, error: MerchCoreError) -> Attempt[T]:
        return cls(error=error)
