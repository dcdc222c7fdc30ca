"""
ECS module: map runtime event data into canonical ECS log records.

Responsible for turning a log call (message, level, error, request and
response objects, extra context) into one compact JSON line. Pipeline:

    Log call (message, level, extras)
        ↓
    Record assembly (src/ecs/record.py)
        ├── HTTP mapping (src/ecs/http_formatters.py) → http.*, url.*, client.*
        └── Error mapping (src/ecs/error_formatters.py) → error.*
        ↓
    Serialization (src/ecs/serializer.py) → JSON line
        ↓
    Optional conformance check (src/validation)
"""

from src.ecs.error_formatters import format_error
from src.ecs.formatter import EcsFormatter
from src.ecs.http_formatters import (
    NOT_RECOGNIZED,
    REQUEST_ID_HEADERS,
    RequestLike,
    ResponseLike,
    format_http_request,
    format_http_response,
    recognize_request,
    recognize_response,
    split_url,
)
from src.ecs.paths import (
    MISSING,
    dotted_get,
    dotted_set,
    has_top_level_key,
    namespace_root,
)
from src.ecs.record import (
    RESERVED_NAMESPACES,
    build_record,
    format_timestamp,
    merge_extra,
)
from src.ecs.serializer import stringify

__all__ = [
    # Paths
    "MISSING",
    "dotted_get",
    "dotted_set",
    "has_top_level_key",
    "namespace_root",
    
    # HTTP
    "format_http_request",
    "format_http_response",
    "recognize_request",
    "recognize_response",
    "split_url",
    "RequestLike",
    "ResponseLike",
    "NOT_RECOGNIZED",
    "REQUEST_ID_HEADERS",
    
    # Errors
    "format_error",
    
    # Records
    "build_record",
    "format_timestamp",
    "merge_extra",
    "RESERVED_NAMESPACES",
    "stringify",
    
    # Logging adapter
    "EcsFormatter",
]
