# simpleschema/errors.py
"""Exception classes and conversion-failure records.

Two disjoint classes of problems exist:

- :class:`DefinitionError`: the schema itself is wrong (unknown option,
  provider without the required operations).  Raised immediately.
- :class:`ConversionError`: the data could not be shaped into a record.
  Carries every :class:`ConversionFailure` found in one pass.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Sequence

__all__ = [
    "SchemaError",
    "DefinitionError",
    "ConversionError",
    "InvalidInputError",
    "ConversionFailure",
    "UnknownField",
    "ShapeMismatch",
    "ProviderFailure",
    "ValidationIssue",
    "format_path",
]

Location = tuple[str | int, ...]


def format_path(path: Location) -> str:
    """Render a location as a JSON-pointer-like string (``/a/0/b``)."""
    if not path:
        return "/"
    return "/" + "/".join(str(p) for p in path)


# ---------------------------------------------------------------------------
# Failure records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConversionFailure:
    """A single conversion problem at ``path``."""

    path: Location
    message: str = ""

    def describe(self) -> str:
        return self.message

    def rebase(self, prefix: Location) -> "ConversionFailure":
        """Return a copy located under ``prefix``."""
        return replace(self, path=tuple(prefix) + tuple(self.path))

    def __str__(self) -> str:
        return f"{format_path(self.path)}: {self.describe()}"


@dataclass(frozen=True)
class UnknownField(ConversionFailure):
    """An input key that does not match any declared field."""

    key: str = ""

    def describe(self) -> str:
        return f"unknown field {self.key!r}"


@dataclass(frozen=True)
class ShapeMismatch(ConversionFailure):
    """The value is not the container the descriptor expects."""

    expected: str = ""
    actual: str = ""

    def describe(self) -> str:
        return f"expected {self.expected}, got {self.actual}"


@dataclass(frozen=True)
class ProviderFailure(ConversionFailure):
    """A failure reported by an extension provider."""

    provider: str = ""
    reason: Any = None

    def describe(self) -> str:
        return f"{self.provider} rejected value: {self.reason}"


@dataclass(frozen=True)
class ValidationIssue:
    """One complaint from the external JSON Schema validator."""

    path: Location
    message: str

    def __str__(self) -> str:
        return f"{format_path(self.path)}: {self.message}"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SchemaError(Exception):
    """Base class for all simpleschema errors."""


class DefinitionError(SchemaError):
    """Raised when a schema description is malformed."""


class ConversionError(SchemaError):
    """Raised when a value cannot be converted.

    ``failures`` holds every problem found, in iteration order.  Providers
    may raise it with a plain ``reason`` instead; the converter then records
    a :class:`ProviderFailure` at the provider's location.
    """

    def __init__(
        self,
        failures: Sequence[ConversionFailure] | None = None,
        *,
        reason: Any = None,
    ) -> None:
        self.failures: list[ConversionFailure] = list(failures or [])
        self.reason = reason
        super().__init__(self._render())

    def _render(self) -> str:
        if not self.failures:
            return str(self.reason) if self.reason is not None else "conversion failed"
        lines = [f"{len(self.failures)} conversion failure(s):"]
        lines.extend(f"  {failure}" for failure in self.failures)
        return "\n".join(lines)


class InvalidInputError(SchemaError):
    """Raised when the external validator rejects a value."""

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        self.issues: list[ValidationIssue] = list(issues)
        lines = [f"{len(self.issues)} validation issue(s):"]
        lines.extend(f"  {issue}" for issue in self.issues)
        super().__init__("\n".join(lines))
