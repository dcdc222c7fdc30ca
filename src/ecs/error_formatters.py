"""
Exception mapping into ECS error.* fields.
"""

import traceback
from typing import Any, MutableMapping


def _format_traceback(err: BaseException) -> str:
    return "".join(traceback.format_exception(type(err), err, err.__traceback__))


def _is_json_safe(value: Any) -> bool:
    if value is None or isinstance(value, (str, int, float, bool)):
        return True
    if isinstance(value, (list, tuple)):
        return all(_is_json_safe(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and _is_json_safe(v) for k, v in value.items())
    return False


def format_error(record: MutableMapping, err: Any) -> None:
    """
    Write ECS error fields for an exception into record.

    Exceptions become error.type, error.message and error.stack_trace, plus
    error.cause when the exception was chained with "raise ... from ...".
    Public JSON-safe attributes set on the exception (e.g. err.code) are
    carried into error as well. Any other value is kept verbatim under the top-level "err" key so it is
    not lost.

    Args:
        record: Record being built
        err: Exception instance or arbitrary value
    """
    if not isinstance(err, BaseException):
        record["err"] = err
        return

    # Own attributes first; the fixed fields below always win.
    error = {
        key: value
        for key, value in vars(err).items()
        if not key.startswith("_") and _is_json_safe(value)
    }
    error.update({
        "type": type(err).__name__,
        "message": str(err),
        "stack_trace": _format_traceback(err),
    })
    # Always a string, so the field type does not vary with the cause value.
    if err.__cause__ is not None:
        error["cause"] = _format_traceback(err.__cause__)
    record["error"] = error
