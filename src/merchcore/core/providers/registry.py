"""
Capability Provider Registry.

Maps a stable provider key to a factory and hands out exactly one live
instance per key for the lifetime of the registry. The registry object is
the cache: hosts build one (normally inside the runtime context) and pass it
to whatever needs providers.

Usage:
    @provider_defn(key="aec7a923-9f64-41d0-b17b-0ef64725f576")
    class FixedRateShippingGatewayProvider(ShippingGatewayProvider):
        ...

    registry = ShippingGatewayRegistry()
    registry.register_discovered("merchcore.core.providers", session_factory=db.session)
    provider = registry.resolve_by_key("aec7a923-9f64-41d0-b17b-0ef64725f576")
"""

from __future__ import annotations

import importlib
import pkgutil
import threading
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from loguru import logger

from merchcore.core.exceptions import NotFoundError

P = TypeVar("P")
C = TypeVar("C", bound=type)


def provider_defn(*, key: str, name: str | None = None) -> Callable[[C], C]:
    """
    Mark a provider class with the key it registers under.

    Args:
        key: Stable provider key
        name: Human readable provider name, defaults to the class name

    Raises:
        ValueError: If key is not provided
    """
    if not key:
        raise ValueError("provider_defn requires 'key'")

    def deco(cls: C) -> C:
        setattr(cls, "__provider_registered__", True)
        setattr(cls, "__provider_key__", key)
        setattr(cls, "__provider_name__", name or cls.__name__)
        return cls

    return deco


def import_reference(reference: str) -> Any:
    """Import ``package.module:Attribute``."""
    module_path, _, attribute = reference.partition(":")
    if not module_path or not attribute:
        raise ValueError(f"Provider reference must look like 'module:Class', got {reference!r}")
    module = importlib.import_module(module_path)
    try:
        return getattr(module, attribute)
    except AttributeError as exc:
        raise ValueError(f"{module_path} has no attribute {attribute!r}") from exc


def discover(module_path: str) -> list[type]:
    """
    Discover every class marked with ``@provider_defn`` in a package.

    Args:
        module_path: Fully qualified package path (e.g., "merchcore.core.providers")

    Returns:
        Marked classes, each listed once
    """
    pkg = importlib.import_module(module_path)
    modules = [pkg]
    for m in pkgutil.walk_packages(getattr(pkg, "__path__", []), prefix=f"{module_path}."):
        modules.append(importlib.import_module(m.name))

    found: dict[str, type] = {}
    for mod in modules:
        for item in vars(mod).values():
            if isinstance(item, type) and item.__dict__.get("__provider_registered__", False):
                found[f"{item.__module__}.{item.__qualname__}"] = item
    return list(found.values())


class ProviderRegistry(Generic[P]):
    """Keyed resolver of singleton capability providers.

    Reads of already built providers take no lock. First construction of a key
    is serialized per key, so concurrent callers never build two instances.
    """

    provider_type: type | None = None

    def __init__(self, factories: dict[str, Callable[[], P]] | None = None) -> None:
        self._factories: dict[str, Callable[[], P]] = dict(factories or {})
        self._instances: dict[str, P] = {}
        self._lock = threading.Lock()
        self._build_locks: dict[str, threading.RLock] = {}

    @property
    def keys(self) -> list[str]:
        return list(self._factories)

    def __contains__(self, key: object) -> bool:
        return key in self._factories

    def register(self, key: str, factory: Callable[[], P]) -> None:
        """Register a factory; replaces an earlier one and drops its instance."""
        with self._lock:
            if key in self._factories:
                logger.warning("Replacing provider registered under {}", key)
            self._factories[key] = factory
            self._instances.pop(key, None)

    def register_discovered(self, module_path: str, **kwargs: Any) -> list[str]:
        """Register every marked provider class found in a package.

        Classes that are not subclasses of ``provider_type`` are ignored.
        ``kwargs`` are passed to each provider's constructor.
        """
        registered = []
        for cls in discover(module_path):
            if self.provider_type is not None and not issubclass(cls, self.provider_type):
                continue
            key = cls.__provider_key__
            self.register(key, lambda cls=cls: cls(**kwargs))
            registered.append(key)
        logger.debug("Discovered providers {} in {}", registered, module_path)
        return registered

    def resolve_by_key(self, key: str) -> P:
        """Return the provider for ``key``, building it on first use.

        Each key has its own build lock, so a factory may resolve other keys
        and a slow construction only holds up callers of the same key.

        Raises:
            NotFoundError: If nothing is registered under ``key``
        """
        instance = self._instances.get(key)
        if instance is not None:
            return instance

        with self._lock:
            if key not in self._factories:
                raise NotFoundError("Provider", key)
            build_lock = self._build_locks.setdefault(key, threading.RLock())

        with build_lock:
            instance = self._instances.get(key)
            if instance is not None:
                return instance
            with self._lock:
                factory = self._factories.get(key)
            if factory is None:
                raise NotFoundError("Provider", key)
            instance = factory()
            with self._lock:
                if self._factories.get(key) is factory:
                    self._instances[key] = instance
            logger.debug("Constructed provider {} for key {}", type(instance).__name__, key)
            return instance

    def resolve_all(self) -> list[P]:
        return [self.resolve_by_key(key) for key in self.keys]
