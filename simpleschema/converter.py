# simpleschema/converter.py
"""Value converter: raw JSON values to symbol-keyed records.

The converter assumes its input already passed the compiled JSON Schema, so
it never re-checks ranges or formats.  Its job is shape transformation:
mapping keys are resolved against declared fields and collected into a
:class:`Record`; arrays keep their order; scalars and everything beneath
``any`` pass through untouched.

Failures are accumulated across sibling entries and elements rather than
stopping at the first one, and reported together in a single
:class:`~simpleschema.errors.ConversionError`.
"""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from typing import Any

from .descriptors import (
    Array,
    Descriptor,
    ExternalRef,
    Mapping,
    Primitive,
    is_descriptor,
    parse_descriptor,
)
from .errors import (
    ConversionError,
    ConversionFailure,
    DefinitionError,
    Location,
    ProviderFailure,
    ShapeMismatch,
    UnknownField,
)
from .extension import ensure_provider
from .utils.logging import get_logger

__all__ = ["Record", "convert"]

logger = get_logger(__name__)


class Record(dict):
    """A converted mapping: a ``dict`` keyed by field name with attribute access.

    Field values take precedence over ``dict`` methods, so a field named
    ``items`` is reached as ``record.items``; call ``dict.items(record)`` for
    the method.  Names starting with an underscore always resolve to the
    attribute first.
    """

    __slots__ = ()

    def __getattribute__(self, name: str) -> Any:
        if not name.startswith("_") and dict.__contains__(self, name):
            return dict.__getitem__(self, name)
        return super().__getattribute__(name)

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"Record({dict.__repr__(self)})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (Record, (dict(self),))


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, MappingABC):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


# ---------------------------------------------------------------------------
# Per-kind conversion
# ---------------------------------------------------------------------------
# Each helper returns the converted value and appends failures to ``failures``.


def _convert_mapping(
    descriptor: Mapping,
    value: Any,
    path: Location,
    failures: list[ConversionFailure],
) -> Any:
    if value is None and descriptor.nullable:
        return None
    if not isinstance(value, MappingABC):
        failures.append(ShapeMismatch(path, expected="object", actual=_type_name(value)))
        return None

    by_key = descriptor.fields_by_key()
    record = Record()
    for key in value:
        item = value[key]
        field = by_key.get(key)
        if field is None:
            failures.append(UnknownField(path + (key,), key=str(key)))
            continue
        record[field.name] = _convert(field.descriptor, item, path + (key,), failures)
    return record


def _convert_array(
    descriptor: Array,
    value: Any,
    path: Location,
    failures: list[ConversionFailure],
) -> Any:
    if value is None and descriptor.nullable:
        return None
    if not isinstance(value, (list, tuple)):
        failures.append(ShapeMismatch(path, expected="array", actual=_type_name(value)))
        return None

    return [
        _convert(descriptor.element, item, path + (index,), failures)
        for index, item in enumerate(value)
    ]


def _convert_external(
    descriptor: ExternalRef,
    value: Any,
    path: Location,
    failures: list[ConversionFailure],
) -> Any:
    provider = ensure_provider(descriptor.provider)
    resolved = descriptor.resolve()
    try:
        return provider.convert_value(resolved, value)
    except ConversionError as exc:
        if exc.failures:
            failures.extend(f.rebase(path) for f in exc.failures)
        else:
            failures.append(
                ProviderFailure(path, provider=descriptor.provider_name, reason=exc.reason)
            )
        return None


def _convert(
    descriptor: Descriptor,
    value: Any,
    path: Location,
    failures: list[ConversionFailure],
) -> Any:
    if isinstance(descriptor, Primitive):
        return value
    if isinstance(descriptor, Mapping):
        return _convert_mapping(descriptor, value, path, failures)
    if isinstance(descriptor, Array):
        return _convert_array(descriptor, value, path, failures)
    if isinstance(descriptor, ExternalRef):
        return _convert_external(descriptor, value, path, failures)
    raise DefinitionError(f"cannot convert against {descriptor!r}")


def convert(schema: Any, value: Any) -> Any:
    """Convert ``value`` into its structured form.

    Parameters
    ----------
    schema:
        A :data:`~simpleschema.descriptors.Descriptor` or any shorthand
        accepted by :func:`~simpleschema.descriptors.parse_descriptor`.
    value:
        A JSON-like value that already satisfies the compiled document.

    Returns
    -------
    Any
        Mappings become :class:`Record` objects keyed by field name, arrays
        become lists, everything else is returned as is.

    Raises
    ------
    ConversionError
        With every failure found, in iteration order.
    DefinitionError
        If the descriptor references a provider that does not implement the
        extension contract.
    """
    descriptor = schema if is_descriptor(schema) else parse_descriptor(schema)
    failures: list[ConversionFailure] = []
    result = _convert(descriptor, value, (), failures)
    if failures:
        logger.debug(f"Conversion failed with {len(failures)} failure(s)")
        raise ConversionError(failures)
    return result
