# simpleschema/validation.py
"""Glue between compiled documents and the external JSON Schema validator.

Validation itself is delegated to :mod:`jsonschema`; this module only wires
the compiled document in and turns its complaints into
:class:`~simpleschema.errors.ValidationIssue` records.
"""

from __future__ import annotations

from typing import Any

from jsonschema import Draft7Validator, FormatChecker

from .compiler import compile_schema_cached
from .converter import convert
from .descriptors import is_descriptor, parse_descriptor
from .errors import InvalidInputError, ValidationIssue
from .utils.logging import get_logger

__all__ = ["iter_issues", "validate", "from_json"]

logger = get_logger(__name__)


def iter_issues(schema: Any, value: Any) -> list[ValidationIssue]:
    """Return every validation issue for ``value``, sorted by location."""
    document = compile_schema_cached(schema)
    validator = Draft7Validator(document, format_checker=FormatChecker())
    issues = [
        ValidationIssue(path=tuple(err.absolute_path), message=err.message)
        for err in validator.iter_errors(value)
    ]
    return sorted(issues, key=lambda issue: [str(p) for p in issue.path])


def validate(schema: Any, value: Any) -> None:
    """Raise :class:`InvalidInputError` unless ``value`` satisfies ``schema``."""
    issues = iter_issues(schema, value)
    if issues:
        logger.debug(f"Validation rejected value with {len(issues)} issue(s)")
        raise InvalidInputError(issues)


def from_json(schema: Any, value: Any) -> Any:
    """Validate ``value`` against ``schema`` and convert it.

    Raises
    ------
    InvalidInputError
        If the validator rejects the value.
    ConversionError
        If a provider rejects part of the value.
    """
    descriptor = schema if is_descriptor(schema) else parse_descriptor(schema)
    validate(descriptor, value)
    return convert(descriptor, value)
