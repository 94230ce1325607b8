# simpleschema/templates.py
"""Descriptor templates: schema descriptions kept in YAML (or JSON) files.

The file format is the JSON-friendly spelling of the shorthand::

    name: string
    age: {$type: integer, optional: true, minimum: 0}
    tags:
      $type: [string]
      min_items: 1
    price: money          # a provider registered under "money"

Since tuples do not exist in YAML, options are always attached with a
``$type`` mapping.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml

from .descriptors import Descriptor, parse_descriptor
from .errors import DefinitionError
from .extension import ProviderRegistry

__all__ = ["load_descriptor", "load_descriptor_file"]


def load_descriptor(
    content: str,
    *,
    registry: Optional[ProviderRegistry] = None,
) -> Descriptor:
    """Parse a YAML template string into a descriptor.

    Parameters
    ----------
    content:
        YAML (or JSON) text.
    registry:
        Registry used for provider names.

    Raises
    ------
    DefinitionError
        If the text is not valid YAML, is empty, or describes an invalid schema.
    """
    try:
        data: Any = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise DefinitionError(f"template is not valid YAML: {exc}") from exc
    if data is None:
        raise DefinitionError("template is empty")
    return parse_descriptor(data, registry=registry)


def load_descriptor_file(
    path: str | Path,
    *,
    registry: Optional[ProviderRegistry] = None,
) -> Descriptor:
    """Read a template file and parse it into a descriptor."""
    content = Path(path).read_text(encoding="utf-8")
    return load_descriptor(content, registry=registry)
