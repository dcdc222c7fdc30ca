"""
Validation module: check ECS records against a declarative field spec.

Used from tests and CI to confirm that formatter output conforms to the
ecs-logging spec: required fields, value types, top-level placement and
field order in serialized text.
"""

from src.validation.spec import (
    FieldSpec,
    FieldType,
    SpecDocument,
    clear_spec_cache,
    load_spec,
    parse_spec,
)
from src.validation.validator import (
    EcsLoggingValidationError,
    SpecKey,
    SpecValidator,
    ViolationDetail,
    is_valid_datetime,
    is_valid_string,
    validate,
)

__all__ = [
    # Spec
    "FieldSpec",
    "FieldType",
    "SpecDocument",
    "load_spec",
    "parse_spec",
    "clear_spec_cache",
    
    # Validation
    "SpecValidator",
    "SpecKey",
    "ViolationDetail",
    "EcsLoggingValidationError",
    "is_valid_datetime",
    "is_valid_string",
    "validate",
]
