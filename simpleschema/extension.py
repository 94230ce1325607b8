# simpleschema/extension.py
"""Extension contract for reusable, named schema fragments.

A *schema provider* supplies a descriptor on demand and owns the conversion
of values matching it.  Providers implement :class:`SchemaProvider`; plain
objects or modules exposing callable ``resolve`` and ``convert_value`` also
qualify.  Anything else is rejected with a
:class:`~simpleschema.errors.DefinitionError` as soon as it is referenced.

Providers are located by name through a :class:`ProviderRegistry`::

    @register_provider("money")
    class Money(SchemaProvider):
        def resolve(self, options):
            return {"amount": "integer", "currency": ("string", {"enum": ["EUR", "USD"]})}

        def convert_value(self, resolved, value):
            record = convert(resolved, value)
            return Decimal(record.amount) / 100, record.currency
"""

from __future__ import annotations

import inspect
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from .errors import DefinitionError
from .utils.logging import get_logger

if TYPE_CHECKING:
    from .descriptors import Descriptor

__all__ = [
    "SchemaProvider",
    "ProviderRegistry",
    "default_registry",
    "register_provider",
    "ensure_provider",
    "provider_name",
]

logger = get_logger(__name__)

REQUIRED_OPERATIONS: tuple[str, ...] = ("resolve", "convert_value")

# provider class -> its shared instance
_instances: dict[type, Any] = {}
_instances_lock = threading.Lock()


class SchemaProvider(ABC):
    """Base class for extension providers."""

    #: Display name used in failure messages; defaults to the class name.
    name: Optional[str] = None

    @abstractmethod
    def resolve(self, options: dict[str, Any]) -> Any:
        """Expand this reference into a descriptor.

        May return a :data:`~simpleschema.descriptors.Descriptor`, any
        shorthand accepted by :func:`~simpleschema.descriptors.parse_descriptor`,
        or a ``(shorthand, options)`` pair.
        """

    @abstractmethod
    def convert_value(self, resolved: "Descriptor", value: Any) -> Any:
        """Convert ``value`` (already valid against ``resolved``).

        Raise :class:`~simpleschema.errors.ConversionError` on failure.
        """


def provider_name(provider: Any) -> str:
    """Human-readable name of a provider object, class or module."""
    explicit = getattr(provider, "name", None)
    if isinstance(explicit, str) and explicit:
        return explicit
    if inspect.ismodule(provider) or isinstance(provider, type):
        return provider.__name__
    return type(provider).__name__


def _missing_operations(candidate: Any) -> list[str]:
    missing = [op for op in REQUIRED_OPERATIONS if not callable(getattr(candidate, op, None))]
    if isinstance(candidate, type) and inspect.isabstract(candidate):
        missing.extend(
            op for op in REQUIRED_OPERATIONS
            if op in candidate.__abstractmethods__ and op not in missing
        )
    return missing


def ensure_provider(candidate: Any) -> Any:
    """Return a usable provider for ``candidate`` or raise ``DefinitionError``.

    Classes are instantiated once, with no arguments, and the instance is
    reused; instances and modules are returned unchanged.
    """
    missing = _missing_operations(candidate)
    if missing:
        raise DefinitionError(
            f"{provider_name(candidate)} is not a schema provider: "
            f"missing {', '.join(missing)}"
        )
    if isinstance(candidate, type):
        return _instance_of(candidate)
    return candidate


def _instance_of(cls: type) -> Any:
    with _instances_lock:
        instance = _instances.get(cls)
        if instance is None:
            try:
                instance = cls()
            except TypeError as exc:
                raise DefinitionError(
                    f"schema provider {cls.__name__} cannot be instantiated: {exc}"
                ) from exc
            _instances[cls] = instance
    return instance


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ProviderRegistry:
    """Name → provider lookup used when descriptors reference providers by name."""

    def __init__(self) -> None:
        self._providers: dict[str, Any] = {}
        self._lock = threading.Lock()

    def register(
        self,
        name: str,
        provider: Any = None,
        *,
        replace: bool = False,
    ) -> Any:
        """Register ``provider`` under ``name``.

        Without ``provider`` this returns a class decorator.  The provider is
        checked against the contract immediately.
        """
        if provider is None:
            def decorator(cls: Any) -> Any:
                self.register(name, cls, replace=replace)
                return cls

            return decorator

        instance = ensure_provider(provider)
        with self._lock:
            if name in self._providers and not replace:
                raise DefinitionError(f"schema provider {name!r} is already registered")
            if name in self._providers:
                logger.warning(f"Replacing schema provider {name!r}")
            self._providers[name] = instance
        logger.info(f"Registered schema provider {name!r} ({provider_name(instance)})")
        return provider

    def unregister(self, name: str) -> None:
        with self._lock:
            if self._providers.pop(name, None) is None:
                raise DefinitionError(f"schema provider {name!r} is not registered")

    def get(self, name: str) -> Any:
        """Return the provider registered as ``name``."""
        try:
            return self._providers[name]
        except KeyError:
            known = ", ".join(self.names()) or "none"
            raise DefinitionError(
                f"unknown schema kind or provider {name!r} (registered providers: {known})"
            ) from None

    def names(self) -> list[str]:
        return sorted(self._providers)

    def clear(self) -> None:
        with self._lock:
            self._providers.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)


default_registry = ProviderRegistry()


def register_provider(
    name: str,
    provider: Any = None,
    *,
    replace: bool = False,
) -> Any:
    """Register a provider in :data:`default_registry` (also usable as a decorator)."""
    return default_registry.register(name, provider, replace=replace)
