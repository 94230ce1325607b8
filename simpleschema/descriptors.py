# simpleschema/descriptors.py
"""Descriptor model: the immutable tree describing a schema.

A descriptor is one of four node types:

- :class:`Primitive`: ``boolean``, ``integer``, ``number``, ``null``,
  ``string`` or ``any``.
- :class:`Mapping`: an ordered tuple of :class:`FieldSpec` entries.
- :class:`Array`: a homogeneous list described by one element descriptor.
- :class:`ExternalRef`: a reference to a
  :class:`~simpleschema.extension.SchemaProvider`.

Each kind carries its own options record.  Options are checked when the node
is built; an unknown option or an ill-typed value raises
:class:`~simpleschema.errors.DefinitionError` right there.

Most callers never build nodes by hand and use the shorthand instead::

    schema = {
        "name": "string",
        "value": ("integer", {"optional": True, "maximum": 10}),
        "tags": (["string"], {"min_items": 1}),
        "extra": {"$type": "any", "optional": True},
    }
    descriptor = parse_descriptor(schema)

Public API
----------
- :func:`parse_descriptor`: shorthand to descriptor tree.
- :data:`Descriptor`: union of the node types.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping as MappingABC
from types import MappingProxyType
from typing import Any, ClassVar, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    ValidationError,
    field_validator,
    model_validator,
)

from .config import get_config
from .errors import DefinitionError
from .extension import ProviderRegistry, default_registry, ensure_provider, provider_name

__all__ = [
    "PRIMITIVE_KINDS",
    "TYPE_KEY",
    "NullOptions",
    "BooleanOptions",
    "IntegerOptions",
    "NumberOptions",
    "StringOptions",
    "AnyOptions",
    "MappingOptions",
    "ArrayOptions",
    "Primitive",
    "FieldSpec",
    "Mapping",
    "Array",
    "ExternalRef",
    "Descriptor",
    "parse_descriptor",
    "is_descriptor",
]

PrimitiveKind = Literal["boolean", "integer", "number", "null", "string", "any"]

PRIMITIVE_KINDS: tuple[str, ...] = ("boolean", "integer", "number", "null", "string", "any")

#: Key marking the ``{"$type": spec, **options}`` spelling of a typed shorthand.
TYPE_KEY = "$type"


def _describe_validation_error(label: str, exc: ValidationError) -> str:
    problems: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        if err.get("type") == "extra_forbidden":
            problems.append(f"option {loc!r} is not valid for {label}")
        elif loc:
            problems.append(f"invalid value for {label} option {loc!r}: {err.get('msg')}")
        else:
            problems.append(f"invalid {label}: {err.get('msg')}")
    return "; ".join(problems)


class _Frozen(BaseModel):
    """Immutable model whose validation failures surface as ``DefinitionError``."""

    label: ClassVar[str] = "descriptor"

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise DefinitionError(_describe_validation_error(type(self).label, exc)) from exc


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class _Options(_Frozen):
    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    @model_validator(mode="before")
    @classmethod
    def _lists_to_tuples(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: tuple(v) if isinstance(v, list) else v for k, v in data.items()}
        return data

    def explicit(self) -> dict[str, Any]:
        """Options that differ from their defaults."""
        return self.model_dump(exclude_defaults=True)


class NullOptions(_Options):
    label: ClassVar[str] = "null"


class BooleanOptions(_Options):
    label: ClassVar[str] = "boolean"

    nullable: bool = False


class IntegerOptions(_Options):
    label: ClassVar[str] = "integer"

    nullable: bool = False
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    enum: Optional[tuple[int, ...]] = None


class NumberOptions(_Options):
    label: ClassVar[str] = "number"

    nullable: bool = False
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None


class StringOptions(_Options):
    label: ClassVar[str] = "string"

    nullable: bool = False
    min_length: Optional[NonNegativeInt] = None
    max_length: Optional[NonNegativeInt] = None
    enum: Optional[tuple[str, ...]] = None
    format: Optional[Literal["datetime", "email"]] = None


class AnyOptions(_Options):
    label: ClassVar[str] = "any"

    nullable: bool = False

    @model_validator(mode="after")
    def _nullable_policy(self) -> "AnyOptions":
        if self.nullable and not get_config().allow_nullable_any:
            raise ValueError(
                "'nullable' is not accepted on 'any' unless allow_nullable_any is enabled"
            )
        return self


class MappingOptions(_Options):
    label: ClassVar[str] = "mapping"

    nullable: bool = False


class ArrayOptions(_Options):
    label: ClassVar[str] = "array"

    nullable: bool = False
    min_items: Optional[NonNegativeInt] = None
    max_items: Optional[NonNegativeInt] = None


_OPTIONS_BY_KIND: dict[str, type[_Options]] = {
    "null": NullOptions,
    "boolean": BooleanOptions,
    "integer": IntegerOptions,
    "number": NumberOptions,
    "string": StringOptions,
    "any": AnyOptions,
}


def _coerce_options(options_cls: type[_Options], value: Any) -> Any:
    if value is None:
        return options_cls()
    if isinstance(value, MappingABC):
        return options_cls(**dict(value))
    return value


def _freeze(value: Any) -> Any:
    """Deep, read-only snapshot of provider options."""
    if isinstance(value, MappingABC):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    return copy.deepcopy(value)


def _thaw(value: Any) -> Any:
    """Plain ``dict``/``list`` copy of a frozen snapshot."""
    if isinstance(value, MappingABC):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(v) for v in value]
    if isinstance(value, frozenset):
        return set(_thaw(v) for v in value)
    return value


def _hash_key(value: Any) -> Any:
    if isinstance(value, MappingABC):
        return frozenset((k, _hash_key(v)) for k, v in value.items())
    if isinstance(value, tuple):
        return tuple(_hash_key(v) for v in value)
    try:
        hash(value)
    except TypeError:
        return type(value).__name__
    return value


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class _Node(_Frozen):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def nullable(self) -> bool:
        return bool(getattr(self.options, "nullable", False))


class Primitive(_Node):
    """A scalar kind, or ``any``."""

    kind: PrimitiveKind
    options: Union[
        NullOptions, BooleanOptions, IntegerOptions, NumberOptions, StringOptions, AnyOptions
    ] = None  # type: ignore[assignment]

    @model_validator(mode="before")
    @classmethod
    def _options_for_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("kind") in _OPTIONS_BY_KIND:
            options_cls = _OPTIONS_BY_KIND[data["kind"]]
            data = {**data, "options": _coerce_options(options_cls, data.get("options"))}
        return data

    @model_validator(mode="after")
    def _options_match_kind(self) -> "Primitive":
        expected = _OPTIONS_BY_KIND[self.kind]
        if type(self.options) is not expected:
            raise ValueError(
                f"{self.kind} takes {expected.__name__}, not {type(self.options).__name__}"
            )
        return self

    def with_options(self, **options: Any) -> "Primitive":
        """Return a copy with ``options`` merged over the current ones."""
        return Primitive(kind=self.kind, options={**self.options.explicit(), **options})


class FieldSpec(_Frozen):
    """One entry of a :class:`Mapping`.

    ``name`` is the symbolic name used in converted records; ``key`` is the
    JSON key, defaulting to ``name``.
    """

    label: ClassVar[str] = "field"
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    descriptor: "Descriptor"
    optional: bool = False
    key: Optional[str] = None

    @property
    def wire_key(self) -> str:
        return self.key if self.key is not None else self.name


class Mapping(_Node):
    """A closed object: no keys beyond the declared fields are permitted."""

    label: ClassVar[str] = "mapping"

    fields: tuple[FieldSpec, ...] = ()
    options: MappingOptions = Field(default_factory=MappingOptions)

    @field_validator("options", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        return _coerce_options(MappingOptions, value)

    @field_validator("fields", mode="before")
    @classmethod
    def _fields_tuple(cls, value: Any) -> Any:
        return tuple(value) if isinstance(value, list) else value

    @model_validator(mode="after")
    def _unique_fields(self) -> "Mapping":
        names = [f.name for f in self.fields]
        keys = [f.wire_key for f in self.fields]
        for label, values in (("field name", names), ("field key", keys)):
            duplicates = sorted({v for v in values if values.count(v) > 1})
            if duplicates:
                raise ValueError(f"duplicate {label}(s): {', '.join(duplicates)}")
        return self

    def fields_by_key(self) -> dict[str, FieldSpec]:
        return {f.wire_key: f for f in self.fields}

    @property
    def required_keys(self) -> list[str]:
        """Sorted JSON keys of every non-optional field."""
        return sorted(f.wire_key for f in self.fields if not f.optional)

    def with_options(self, **options: Any) -> "Mapping":
        return Mapping(fields=self.fields, options={**self.options.explicit(), **options})


class Array(_Node):
    """A homogeneous list."""

    label: ClassVar[str] = "array"

    element: "Descriptor"
    options: ArrayOptions = Field(default_factory=ArrayOptions)

    @field_validator("options", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        return _coerce_options(ArrayOptions, value)

    def with_options(self, **options: Any) -> "Array":
        return Array(element=self.element, options={**self.options.explicit(), **options})


class ExternalRef(_Node):
    """Reference to a schema provider, resolved lazily.

    ``options`` are kept as a read-only snapshot (mappings become
    ``MappingProxyType``, lists become tuples).  Each ``resolve`` call hands
    the provider a fresh plain ``dict``/``list`` copy; the meaning of the
    options belongs to the provider.
    """

    label: ClassVar[str] = "provider reference"

    provider: Any
    options: Any = Field(default_factory=lambda: MappingProxyType({}))

    @field_validator("provider", mode="before")
    @classmethod
    def _check_provider(cls, value: Any) -> Any:
        return ensure_provider(value)

    @field_validator("options", mode="before")
    @classmethod
    def _freeze_options(cls, value: Any) -> Any:
        if value is None:
            return MappingProxyType({})
        if not isinstance(value, MappingABC):
            raise ValueError("provider options must be a mapping")
        return _freeze(value)

    # Providers compare by identity.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExternalRef):
            return NotImplemented
        return self.provider is other.provider and _thaw(self.options) == _thaw(other.options)

    def __hash__(self) -> int:
        return hash((type(self), id(self.provider), _hash_key(_freeze(self.options))))

    @property
    def nullable(self) -> bool:
        return False

    @property
    def provider_name(self) -> str:
        return provider_name(self.provider)

    def resolve(self) -> "Descriptor":
        """Ask the provider for the concrete descriptor this reference stands for."""
        provider = ensure_provider(self.provider)
        return parse_descriptor(provider.resolve(copy.deepcopy(_thaw(self.options))))

    def with_options(self, **options: Any) -> "ExternalRef":
        return ExternalRef(provider=self.provider, options={**self.options, **options})


Descriptor = Union[Primitive, Mapping, Array, ExternalRef]

FieldSpec.model_rebuild()
Mapping.model_rebuild()
Array.model_rebuild()

_NODE_TYPES = (Primitive, Mapping, Array, ExternalRef)


def is_descriptor(value: Any) -> bool:
    return isinstance(value, _NODE_TYPES)


# ---------------------------------------------------------------------------
# Shorthand parsing
# ---------------------------------------------------------------------------


def _unwrap(spec: Any, options: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
    """Peel ``(spec, options)`` and ``{"$type": ...}`` layers off ``spec``.

    Outer options win over inner ones.
    """
    while True:
        if isinstance(spec, tuple):
            if len(spec) != 2 or not isinstance(spec[1], MappingABC):
                raise DefinitionError(
                    f"typed shorthand must be a (descriptor, options) pair, got {spec!r}"
                )
            spec, inner = spec
            options = {**inner, **options}
        elif isinstance(spec, MappingABC) and TYPE_KEY in spec:
            inner = {k: v for k, v in spec.items() if k != TYPE_KEY}
            spec = spec[TYPE_KEY]
            options = {**inner, **options}
        else:
            return spec, options


def _parse(
    spec: Any,
    options: Optional[MappingABC],
    registry: ProviderRegistry,
) -> tuple[Descriptor, bool, Optional[str]]:
    spec, opts = _unwrap(spec, dict(options or {}))

    optional = opts.pop("optional", False)
    if not isinstance(optional, bool):
        raise DefinitionError(f"'optional' must be a boolean, got {optional!r}")
    key = opts.pop("key", None)
    if key is not None and not isinstance(key, str):
        raise DefinitionError(f"'key' must be a string, got {key!r}")

    if is_descriptor(spec):
        descriptor = spec.with_options(**opts) if opts else spec
    elif isinstance(spec, str):
        if spec in PRIMITIVE_KINDS:
            descriptor = Primitive(kind=spec, options=opts)
        else:
            descriptor = ExternalRef(provider=registry.get(spec), options=opts)
    elif isinstance(spec, MappingABC):
        fields = []
        for name, sub in spec.items():
            if not isinstance(name, str):
                raise DefinitionError(f"field names must be strings, got {name!r}")
            sub_descriptor, sub_optional, sub_key = _parse(sub, None, registry)
            fields.append(
                FieldSpec(name=name, descriptor=sub_descriptor, optional=sub_optional, key=sub_key)
            )
        descriptor = Mapping(fields=tuple(fields), options=opts)
    elif isinstance(spec, list):
        if len(spec) != 1:
            raise DefinitionError(
                f"array descriptors take exactly one element descriptor, got {len(spec)}"
            )
        element, _, _ = _parse(spec[0], None, registry)
        descriptor = Array(element=element, options=opts)
    elif spec is None or isinstance(spec, (bool, int, float, bytes)):
        raise DefinitionError(f"{spec!r} is not a schema description")
    else:
        descriptor = ExternalRef(provider=spec, options=opts)

    return descriptor, optional, key


def parse_descriptor(
    spec: Any,
    options: Optional[MappingABC] = None,
    *,
    registry: Optional[ProviderRegistry] = None,
) -> Descriptor:
    """Build a descriptor tree from its shorthand.

    Parameters
    ----------
    spec:
        A kind name, a registered provider name, a ``dict`` of fields, a
        one-element ``list``, a ``(spec, options)`` tuple, a
        ``{"$type": spec, **options}`` dict, a provider class/instance, or an
        existing descriptor.
    options:
        Extra options applied on top of any carried by ``spec``.
    registry:
        Where provider names are looked up.  Defaults to
        :data:`~simpleschema.extension.default_registry`.

    Returns
    -------
    Descriptor
        The root node.  Field-level options (``optional``, ``key``) given at
        the root are ignored.

    Raises
    ------
    DefinitionError
        For unknown options, malformed shorthand or non-conforming providers.
    """
    descriptor, _, _ = _parse(spec, options, registry or default_registry)
    return descriptor
