# simpleschema/compiler.py
"""Schema compiler: descriptor tree to JSON Schema document.

The emitted document only uses ``type``, ``properties``, ``required``,
``additionalProperties``, ``items``, ``minimum``, ``maximum``,
``minLength``, ``maxLength``, ``minItems``, ``maxItems``, ``enum`` and
``format``.  Every mapping is closed (``additionalProperties: false``).

Public API
----------
- :func:`compile_schema`: compile a descriptor (or shorthand).
- :func:`compile_schema_cached`: the same, memoized on the descriptor value.
"""

from __future__ import annotations

import copy
from functools import lru_cache
from typing import Any, Callable

from .config import get_config
from .descriptors import (
    Array,
    Descriptor,
    ExternalRef,
    Mapping,
    Primitive,
    is_descriptor,
    parse_descriptor,
)
from .errors import DefinitionError
from .utils.logging import get_logger

__all__ = [
    "ANY_TYPES",
    "DRAFT_07",
    "compile_schema",
    "compile_schema_cached",
    "clear_compile_cache",
]

logger = get_logger(__name__)

#: The full JSON type universe, emitted for ``any``.
ANY_TYPES: list[str] = ["array", "boolean", "integer", "null", "number", "object", "string"]

DRAFT_07 = "http://json-schema.org/draft-07/schema#"

_FORMATS: dict[str, str] = {
    "datetime": "date-time",
    "email": "email",
}

# option name -> JSON Schema keyword, for options copied through unchanged
_KEYWORDS: dict[str, str] = {
    "minimum": "minimum",
    "maximum": "maximum",
    "min_length": "minLength",
    "max_length": "maxLength",
    "min_items": "minItems",
    "max_items": "maxItems",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _types(kind: str, nullable: bool) -> str | list[str]:
    return [kind, "null"] if nullable else kind


def _add_keywords(doc: dict[str, Any], options: Any) -> None:
    for option, keyword in _KEYWORDS.items():
        value = getattr(options, option, None)
        if value is not None:
            doc[keyword] = value


def _compile_primitive(descriptor: Primitive) -> dict[str, Any]:
    options = descriptor.options
    if descriptor.kind == "any":
        return {"type": list(ANY_TYPES)}

    doc: dict[str, Any] = {"type": _types(descriptor.kind, descriptor.nullable)}
    _add_keywords(doc, options)

    enum = getattr(options, "enum", None)
    if enum:
        doc["enum"] = list(enum)

    fmt = getattr(options, "format", None)
    if fmt is not None:
        doc["format"] = _FORMATS[fmt]
    return doc


def _compile_mapping(descriptor: Mapping) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "type": _types("object", descriptor.nullable),
        "additionalProperties": False,
        "properties": {f.wire_key: _compile(f.descriptor) for f in descriptor.fields},
    }
    required = descriptor.required_keys
    if required:
        doc["required"] = required
    return doc


def _compile_array(descriptor: Array) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "type": _types("array", descriptor.nullable),
        "items": _compile(descriptor.element),
    }
    _add_keywords(doc, descriptor.options)
    return doc


def _compile_external(descriptor: ExternalRef) -> dict[str, Any]:
    resolved = descriptor.resolve()
    logger.debug(f"Resolved provider {descriptor.provider_name} to {type(resolved).__name__}")
    return _compile(resolved)


_COMPILERS: dict[type, Callable[[Any], dict[str, Any]]] = {
    Primitive: _compile_primitive,
    Mapping: _compile_mapping,
    Array: _compile_array,
    ExternalRef: _compile_external,
}


def _compile(descriptor: Descriptor) -> dict[str, Any]:
    try:
        compiler = _COMPILERS[type(descriptor)]
    except KeyError:
        raise DefinitionError(f"cannot compile {descriptor!r}") from None
    return compiler(descriptor)


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def compile_schema(schema: Any, *, draft: bool = False) -> dict[str, Any]:
    """Compile a descriptor into a JSON Schema document.

    Parameters
    ----------
    schema:
        A :data:`~simpleschema.descriptors.Descriptor` or any shorthand
        accepted by :func:`~simpleschema.descriptors.parse_descriptor`.
    draft:
        Add a root ``$schema`` keyword naming JSON Schema draft-07.

    Returns
    -------
    dict
        A fresh document; callers may mutate it.

    Raises
    ------
    DefinitionError
        If an option is not valid for its kind or a referenced provider does
        not implement the extension contract.  No partial document is
        returned.
    """
    descriptor = schema if is_descriptor(schema) else parse_descriptor(schema)
    doc = _compile(descriptor)
    if draft:
        doc = {"$schema": DRAFT_07, **doc}
    return doc


@lru_cache(maxsize=None)
def _cached_compile_factory(maxsize: int) -> Callable[[Descriptor], dict[str, Any]]:
    @lru_cache(maxsize=maxsize)
    def _cached(descriptor: Descriptor) -> dict[str, Any]:
        logger.debug(f"Compile cache miss for {type(descriptor).__name__}")
        return _compile(descriptor)

    return _cached


def compile_schema_cached(schema: Any) -> dict[str, Any]:
    """Like :func:`compile_schema`, memoized on the full descriptor value.

    The cache size comes from ``SimpleSchemaConfig.compile_cache_size``.  A
    copy of the cached document is returned so callers cannot corrupt it.
    """
    descriptor = schema if is_descriptor(schema) else parse_descriptor(schema)
    cached = _cached_compile_factory(get_config().compile_cache_size)
    return copy.deepcopy(cached(descriptor))


def clear_compile_cache() -> None:
    """Drop every memoized document."""
    _cached_compile_factory.cache_clear()

