"""
Canonical ECS record assembly.

Builds the per-event record that is later serialized to one JSON line.
The record is a plain dict; its insertion order is the serialization order,
so the fields the ecs-logging spec orders by index come first.

Design rationale:
- A fixed set of namespace roots belongs to this package; caller-supplied
  extra fields can never overwrite them
- Request/response and error conversion are opt-in switches, matching the
  formatter options
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, MutableMapping, Optional

from src.core.config import ServiceFields, config
from src.ecs.error_formatters import format_error
from src.ecs.http_formatters import format_http_request, format_http_response
from src.ecs.paths import namespace_root

logger = logging.getLogger(__name__)


RESERVED_NAMESPACES = frozenset({
    "@timestamp",
    "log",
    "message",
    "ecs",
    "http",
    "url",
    "client",
    "user_agent",
    "event",
    "error",
    "trace",
    "transaction",
    "span",
    "service",
})


def format_timestamp(ts: Optional[datetime] = None) -> str:
    """
    Render a timestamp as ISO 8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC already.
    """
    if ts is None:
        ts = datetime.now(timezone.utc)
    elif ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    else:
        ts = ts.astimezone(timezone.utc)
    return f"{ts:%Y-%m-%dT%H:%M:%S}.{ts.microsecond // 1000:03d}Z"


def is_reserved(name: str) -> bool:
    return namespace_root(name) in RESERVED_NAMESPACES


def merge_extra(record: MutableMapping, extra: Optional[Mapping[str, Any]]) -> None:
    """
    Copy caller fields into record, skipping reserved namespaces.

    Args:
        record: Record being built
        extra: Caller-supplied fields (flat or dotted names)
    """
    if not extra:
        return
    for key, value in extra.items():
        if not isinstance(key, str):
            key = str(key)
        if is_reserved(key):
            logger.debug(f"Dropped extra field {key!r}: reserved namespace")
            continue
        record[key] = value


def _add_service_fields(
    record: MutableMapping,
    service: ServiceFields,
    event_dataset: Optional[str],
) -> None:
    if service.name:
        record["service.name"] = service.name
    if service.version:
        record["service.version"] = service.version
    if service.environment:
        record["service.environment"] = service.environment
    if service.node_name:
        record["service.node.name"] = service.node_name

    dataset = event_dataset if event_dataset is not None else service.name
    if dataset:
        record["event.dataset"] = dataset


def build_record(
    message: Any,
    level: str,
    *,
    timestamp: Optional[datetime] = None,
    logger_name: Optional[str] = None,
    service: Optional[ServiceFields] = None,
    event_dataset: Optional[str] = None,
    ecs_version: Optional[str] = None,
    error: Any = None,
    req: Any = None,
    res: Any = None,
    extra: Optional[Mapping[str, Any]] = None,
    convert_err: bool = True,
    convert_req_res: bool = False,
) -> Dict[str, Any]:
    """
    Assemble a fresh ECS record for one logged event.

    Args:
        message: Log message (non-strings are rendered with str())
        level: Level name, written to log.level as given
        timestamp: Event time (defaults to now)
        logger_name: Written to log.logger when set
        service: Service metadata (defaults to config.service)
        event_dataset: Written to event.dataset (defaults to service name)
        ecs_version: Written to ecs.version (defaults to config.ecs_version)
        error: Exception (or any value) associated with the event
        req: Request-like value
        res: Response-like value
        extra: Additional caller fields; reserved namespaces are dropped
        convert_err: Map error into error.* (otherwise kept under "err")
        convert_req_res: Map req/res into http.* (otherwise kept verbatim)

    Returns:
        Record dict whose first keys are @timestamp, log.level, message,
        ecs.version
    """
    record: Dict[str, Any] = {
        "@timestamp": format_timestamp(timestamp),
        "log.level": level,
        "message": message if isinstance(message, str) else str(message),
        "ecs.version": ecs_version or config.ecs_version,
    }
    if logger_name:
        record["log.logger"] = logger_name

    _add_service_fields(record, service or config.service, event_dataset)

    if error is not None:
        if convert_err:
            format_error(record, error)
        else:
            record["err"] = error

    if req is not None:
        if convert_req_res:
            format_http_request(record, req)
        else:
            record["req"] = req
    if res is not None:
        if convert_req_res:
            format_http_response(record, res)
        else:
            record["res"] = res

    merge_extra(record, extra)
    return record
