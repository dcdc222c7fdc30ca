"""
Declarative ECS logging field spec.

The spec document describes every recognized field by dotted name: its
type, whether it is required, whether it must be a literal top-level key,
and its position among indexed fields in serialized text.

Design rationale:
- Attribute set is closed (extra="forbid"): an attribute the validator does
  not understand fails at load time instead of being ignored
- url, comment and default are descriptive only and carry no rule
- Documents are loaded once per path and cached process-wide
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.core.config import config
from src.core.exceptions import SpecError

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    """Value types a field spec can require."""

    DATETIME = "datetime"
    STRING = "string"


class FieldSpec(BaseModel):
    """
    Rules for a single field.

    Fields:
    - type: required value type
    - required: field must be present
    - top_level_field: field must be a literal top-level key, not nested
    - index: position among indexed fields in serialized text
    - url, comment, default: documentation only
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: FieldType
    required: bool = False
    top_level_field: bool = False
    index: Optional[int] = Field(default=None, ge=0)

    url: Optional[str] = None
    comment: Optional[Union[str, List[str]]] = None
    default: Optional[Any] = None


class SpecDocument(BaseModel):
    """
    A whole spec document; corresponds to one schema version.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    version: Optional[Any] = None
    url: Optional[str] = None
    fields: Dict[str, FieldSpec]

    @model_validator(mode="after")
    def check_unique_indexes(self) -> "SpecDocument":
        seen: Dict[int, str] = {}
        for name, field in self.fields.items():
            if field.index is None:
                continue
            if field.index in seen:
                raise ValueError(
                    f"fields '{seen[field.index]}' and '{name}' share index {field.index}"
                )
            seen[field.index] = name
        return self

    @property
    def indexed_fields(self) -> List[str]:
        """Names of indexed fields in index order."""
        indexed = [(f.index, name) for name, f in self.fields.items() if f.index is not None]
        return [name for _, name in sorted(indexed)]


def parse_spec(data: Mapping[str, Any]) -> SpecDocument:
    """
    Build a SpecDocument from already-decoded JSON.

    Raises:
        SpecError: If the document has unknown attributes, unknown types,
            duplicate indexes, or no fields mapping
    """
    try:
        return SpecDocument.model_validate(data)
    except ValidationError as e:
        raise SpecError(f"Invalid ECS logging spec: {e}") from e


@lru_cache(maxsize=None)
def _load_spec_file(path: Path) -> SpecDocument:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SpecError(f"Could not read spec document {path}: {e}") from e
    spec = parse_spec(data)
    logger.debug(f"Loaded spec {path} with {len(spec.fields)} fields")
    return spec


def load_spec(path: Optional[Union[str, Path]] = None) -> SpecDocument:
    """
    Load a spec document, cached per resolved path.

    Args:
        path: Spec file (defaults to config.spec_path)

    Returns:
        Parsed SpecDocument

    Raises:
        SpecError: If the file cannot be read or is not a valid spec
    """
    resolved = Path(path if path is not None else config.spec_path).resolve()
    return _load_spec_file(resolved)


def clear_spec_cache() -> None:
    _load_spec_file.cache_clear()
