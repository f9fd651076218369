"""Runtime context.

Two pieces live here:

- ``MerchContext``: the explicit object that carries configuration, the
  database session service and the provider registries. It is built once by
  the host (``build_context``) and handed to every component that needs it.
- An ambient, ``ContextVar``-backed configuration (``get_config`` /
  ``with_config``) for code that only reads settings, such as logging setup.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel

from merchcore.core.providers.collections import EntityCollectionProviderRegistry
from merchcore.core.providers.registry import import_reference
from merchcore.core.providers.shipping import ShippingGatewayRegistry
from merchcore.core.services.database import DbSessionService
from merchcore.runtime.config.config_data import ConfigData


@dataclass
class MerchContext:
    """Everything the core needs to resolve providers and reach storage."""

    config: ConfigData
    db: DbSessionService
    collection_providers: EntityCollectionProviderRegistry
    shipping_gateways: ShippingGatewayRegistry
    ready: bool = True

    def close(self) -> None:
        self.ready = False
        self.db.dispose()


def build_context(config: ConfigData, db: DbSessionService | None = None) -> MerchContext:
    """Create a context and register the providers named in the configuration."""
    db = db or DbSessionService(config.database)

    collection_providers = EntityCollectionProviderRegistry(db.session)
    for key, reference in config.providers.collections.items():
        provider_cls = import_reference(reference)
        collection_providers.register(
            key, lambda cls=provider_cls, k=key: cls(db.session, key=k)
        )

    shipping_gateways = ShippingGatewayRegistry()
    for key, reference in config.providers.shipping.items():
        provider_cls = import_reference(reference)
        shipping_gateways.register(
            key, lambda cls=provider_cls, k=key: cls(db.session, key=k)
        )

    logger.info(
        "Context ready with {} collection and {} shipping providers",
        len(collection_providers.keys),
        len(shipping_gateways.keys),
    )
    return MerchContext(
        config=config,
        db=db,
        collection_providers=collection_providers,
        shipping_gateways=shipping_gateways,
    )


_config: ContextVar[ConfigData] = ContextVar("merchcore_config", default=ConfigData())


def get_config() -> ConfigData:
    """Get the current ambient configuration."""
    return _config.get()


def set_config(config: ConfigData) -> Token[ConfigData]:
    """Replace the ambient configuration.

    Returns:
        The token that restores the previous configuration.
    """
    return _config.set(config)


def _explicit_values(model: BaseModel) -> dict[str, Any]:
    """Dump only the fields that were explicitly set, at any nesting level."""
    result: dict[str, Any] = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            nested = _explicit_values(value)
            if nested:
                result[name] = nested
            elif name in model.model_fields_set:
                result[name] = value.model_dump()
        elif name in model.model_fields_set:
            result[name] = value
    return result


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_configs(base: ConfigData, override: ConfigData) -> ConfigData:
    """Overlay the explicitly set fields of ``override`` onto ``base``."""
    merged = _deep_merge(base.model_dump(), _explicit_values(override))
    return ConfigData.model_validate(merged)


@contextmanager
def with_config(override: ConfigData | None = None) -> Iterator[ConfigData]:
    """Temporarily override the ambient configuration.

    Only the fields explicitly set on ``override`` replace the current
    values; everything else is inherited.

    Example:
        override = ConfigData()
        override.logging.level = "DEBUG"
        with with_config(override) as config:
            assert config.logging.level == "DEBUG"
    """
    if override is None:
        yield get_config()
        return

    if not isinstance(override, ConfigData):
        raise ValueError(f"override must be ConfigData or None, got {type(override)}")

    token = _config.set(merge_configs(get_config(), override))
    try:
        yield _config.get()
    finally:
        _config.reset(token)
