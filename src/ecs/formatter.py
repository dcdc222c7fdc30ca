"""
ECS formatter for the standard library logging package.

Usage:
    from src.ecs.formatter import EcsFormatter
    handler.setFormatter(EcsFormatter(service_name="checkout"))
    log.info("handled", extra={"req": request, "res": response})

Each LogRecord becomes one compact ECS JSON line. The "req", "res" and "err"
extras are routed through the HTTP and error mappers; other extras are
merged as fields unless they fall in a reserved namespace.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.core.config import ServiceFields, config
from src.ecs.record import build_record
from src.ecs.serializer import stringify


# Attributes every LogRecord carries; anything else was passed via extra=.
_LOG_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

_CONVERTED_EXTRAS = ("req", "res", "err")


class EcsFormatter(logging.Formatter):
    """Format log records as ECS JSON lines."""

    def __init__(
        self,
        *,
        service_name: Optional[str] = None,
        service_version: Optional[str] = None,
        service_environment: Optional[str] = None,
        service_node_name: Optional[str] = None,
        event_dataset: Optional[str] = None,
        convert_err: Optional[bool] = None,
        convert_req_res: Optional[bool] = None,
    ) -> None:
        super().__init__()
        defaults = config.service
        self.service = ServiceFields(
            name=service_name if service_name is not None else defaults.name,
            version=service_version if service_version is not None else defaults.version,
            environment=(
                service_environment if service_environment is not None else defaults.environment
            ),
            node_name=service_node_name if service_node_name is not None else defaults.node_name,
        )
        options = config.formatter
        self.event_dataset = event_dataset if event_dataset is not None else options.event_dataset
        self.convert_err = options.convert_err if convert_err is None else convert_err
        self.convert_req_res = options.convert_req_res if convert_req_res is None else convert_req_res

    def _extra_fields(self, record: logging.LogRecord) -> Dict[str, Any]:
        return {
            key: value
            for key, value in vars(record).items()
            if key not in _LOG_RECORD_ATTRS and key not in _CONVERTED_EXTRAS
        }

    def format(self, record: logging.LogRecord) -> str:
        error: Any = getattr(record, "err", None)
        # log.error(exc) passes the exception itself as the message.
        if self.convert_err and isinstance(record.msg, BaseException):
            error = record.msg
        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]

        ecs_record = build_record(
            record.getMessage(),
            record.levelname.lower(),
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
            logger_name=record.name,
            service=self.service,
            event_dataset=self.event_dataset,
            error=error,
            req=getattr(record, "req", None),
            res=getattr(record, "res", None),
            extra=self._extra_fields(record),
            convert_err=self.convert_err,
            convert_req_res=self.convert_req_res,
        )
        return stringify(ecs_record)
