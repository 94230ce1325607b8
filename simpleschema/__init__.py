"""
simpleschema - compact schema descriptions for JSON-shaped data.

Describe a schema once with plain Python values, compile it into a JSON
Schema document for an external validator, and convert validated input into
records keyed by field name.

Main Components:
    - simpleschema.descriptors: the descriptor model and shorthand parser
    - simpleschema.compiler: descriptor to JSON Schema document
    - simpleschema.converter: raw JSON value to structured record
    - simpleschema.extension: provider contract and registry
"""

from .compiler import compile_schema, compile_schema_cached
from .converter import Record, convert
from .descriptors import (
    Array,
    Descriptor,
    ExternalRef,
    FieldSpec,
    Mapping,
    Primitive,
    parse_descriptor,
)
from .errors import (
    ConversionError,
    ConversionFailure,
    DefinitionError,
    InvalidInputError,
    ProviderFailure,
    SchemaError,
    ShapeMismatch,
    UnknownField,
)
from .extension import ProviderRegistry, SchemaProvider, default_registry, register_provider
from .templates import load_descriptor, load_descriptor_file
from .validation import from_json, validate

__version__ = "1.0.0"

__all__ = [
    "compile_schema",
    "compile_schema_cached",
    "convert",
    "Record",
    "parse_descriptor",
    "Descriptor",
    "Primitive",
    "Mapping",
    "FieldSpec",
    "Array",
    "ExternalRef",
    "SchemaProvider",
    "ProviderRegistry",
    "default_registry",
    "register_provider",
    "load_descriptor",
    "load_descriptor_file",
    "validate",
    "from_json",
    "SchemaError",
    "DefinitionError",
    "ConversionError",
    "InvalidInputError",
    "ConversionFailure",
    "UnknownField",
    "ShapeMismatch",
    "ProviderFailure",
]
