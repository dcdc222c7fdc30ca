"""
ECS logging record validation against a field spec.

A record is given either as serialized JSON text or as an already-parsed
mapping. Every spec field is looked up by dotted name (flat key first, then
nested traversal) and checked against a closed set of rules:

    required         field must be present
    top_level_field  field must be a literal top-level key
    type             value must be a valid datetime or string
    index            indexed fields must open the serialized text, in order

Field order can only be checked against text: a parsed mapping does not
reliably reflect source order.

Validation problems are returned, never raised. Only invalid JSON text
raises (json.JSONDecodeError), since this package never produces it.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from src.core.exceptions import EcsLoggingError, SpecError
from src.ecs.paths import MISSING, dotted_get, has_top_level_key
from src.validation.spec import FieldSpec, FieldType, SpecDocument, load_spec

logger = logging.getLogger(__name__)


class SpecKey(str, Enum):
    """The rule kinds a violation can refer to."""

    REQUIRED = "required"
    TYPE = "type"
    TOP_LEVEL_FIELD = "top_level_field"
    INDEX = "index"


@dataclass(frozen=True)
class ViolationDetail:
    """
    One validation problem.

    name and spec are None for index violations, which concern the whole
    record rather than one field.
    """

    message: str
    spec_key: SpecKey
    name: Optional[str] = None
    spec: Optional[FieldSpec] = None


class EcsLoggingValidationError(EcsLoggingError):
    """Aggregate of violations; returned by validate(), not raised."""

    def __init__(self, details: Sequence[ViolationDetail]) -> None:
        if not details:
            raise ValueError("a non-empty details list is required")
        self.details: List[ViolationDetail] = list(details)
        super().__init__(", ".join(d.message for d in self.details))


# Common non-ISO layouts; ISO 8601 itself goes through fromisoformat.
_DATETIME_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y/%m/%d %H:%M:%S",
    "%a, %d %b %Y %H:%M:%S GMT",
)

# fromisoformat() before 3.11 only takes 3 or 6 fractional digits.
_ISO_FRACTION = re.compile(r"(?<=\d{2}:\d{2}:\d{2})\.(\d+)")


def _fraction_to_micros(match: re.Match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def is_valid_datetime(value: Any) -> bool:
    """
    Check whether a value denotes a valid calendar date.

    Accepts ISO 8601 strings (including a trailing "Z"), a few common
    layouts, and finite numbers taken as epoch milliseconds. Booleans and
    None are rejected.
    """
    if value is None or isinstance(value, bool):
        return False

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return False
        try:
            datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return False
        return True

    if not isinstance(value, str):
        return False

    text = value.strip()
    if not text:
        return False
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    text = _ISO_FRACTION.sub(_fraction_to_micros, text, count=1)
    try:
        datetime.fromisoformat(text)
        return True
    except ValueError:
        pass

    for fmt in _DATETIME_FORMATS:
        try:
            datetime.strptime(value.strip(), fmt)
            return True
        except ValueError:
            continue
    return False


def is_valid_string(value: Any) -> bool:
    return isinstance(value, str)


_TYPE_CHECKS: Dict[FieldType, Callable[[Any], bool]] = {
    FieldType.DATETIME: is_valid_datetime,
    FieldType.STRING: is_valid_string,
}


def _encode(value: Any) -> str:
    # Must match how the serializer writes values.
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


class SpecValidator:
    """
    Validates records against one SpecDocument.

    The validator holds no per-call state, so one instance can be shared
    freely across threads.
    """

    def __init__(self, spec: Optional[SpecDocument] = None) -> None:
        self.spec = spec if spec is not None else load_spec()
        for name, field in self.spec.fields.items():
            if field.type not in _TYPE_CHECKS:
                raise SpecError(f"unknown field type for '{name}': {field.type}")

    def _check_field(
        self,
        record: Mapping,
        name: str,
        field: FieldSpec,
        details: List[ViolationDetail],
    ) -> bool:
        """
        Apply the per-field rules.

        Returns:
            True if the field is present (and so takes part in ordering)
        """
        value = dotted_get(record, name)
        if value is MISSING:
            if field.required:
                details.append(ViolationDetail(
                    message=f"required field '{name}' is missing",
                    spec_key=SpecKey.REQUIRED,
                    name=name,
                    spec=field,
                ))
            return False

        if field.top_level_field and not has_top_level_key(record, name):
            details.append(ViolationDetail(
                message=f"field '{name}' is not a top-level field",
                spec_key=SpecKey.TOP_LEVEL_FIELD,
                name=name,
                spec=field,
            ))

        if not _TYPE_CHECKS[field.type](value):
            details.append(ViolationDetail(
                message=f"field '{name}' is not a valid '{field.type.value}'",
                spec_key=SpecKey.TYPE,
                name=name,
                spec=field,
            ))
        return True

    def _check_order(
        self,
        record: Mapping,
        text: str,
        indexed: Dict[int, str],
        details: List[ViolationDetail],
    ) -> None:
        names = [indexed[i] for i in sorted(indexed)]
        expected = "{" + "".join(
            f"{_encode(name)}:{_encode(dotted_get(record, name))},"
            for name in names
        )
        if not text.startswith(expected):
            details.append(ViolationDetail(
                message=f"the order of fields is not the expected: {', '.join(names)}",
                spec_key=SpecKey.INDEX,
            ))

    def validate(
        self, record: Union[str, bytes, Mapping[str, Any]]
    ) -> Optional[EcsLoggingValidationError]:
        """
        Validate a record.

        Args:
            record: JSON text, or an already-parsed record mapping

        Returns:
            None if valid, otherwise an EcsLoggingValidationError whose
            details list every violation in spec order

        Raises:
            json.JSONDecodeError: If text is given and is not valid JSON
        """
        text: Optional[str] = None
        if isinstance(record, (bytes, bytearray)):
            record = record.decode("utf-8")
        if isinstance(record, str):
            text = record
            record = json.loads(text)

        details: List[ViolationDetail] = []
        indexed: Dict[int, str] = {}

        for name, field in self.spec.fields.items():
            present = self._check_field(record, name, field, details)
            if present and field.index is not None:
                indexed[field.index] = name

        if indexed and text is not None:
            self._check_order(record, text, indexed, details)

        if not details:
            return None

        logger.debug(f"Record failed validation with {len(details)} violation(s)")
        return EcsLoggingValidationError(details)


def validate(
    record: Union[str, bytes, Mapping[str, Any]],
    spec: Optional[SpecDocument] = None,
) -> Optional[EcsLoggingValidationError]:
    """Validate a record against spec (defaults to the configured spec)."""
    return SpecValidator(spec).validate(record)
