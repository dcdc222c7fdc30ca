"""
HTTP request/response mapping into ECS fields.

Converts request- and response-like objects from arbitrary web frameworks
into the ECS http.*, url.*, client.* and user_agent.* fields of a record.

Design:
- Recognition is structural: a candidate is read through attributes, or
  through keys when it is a mapping, never by type identity
- One level of framework wrapping (candidate.raw.req / candidate.raw.res)
  is unwrapped before recognition
- Unrecognized input is a clean no-op: False is returned and the record is
  left untouched
- Header maps are copied; caller-owned objects are never mutated
"""

import logging
import math
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from src.ecs.paths import MISSING, dotted_merge, dotted_set

logger = logging.getLogger(__name__)


# Likely HTTP request header names carrying a request ID value, as used by
# common web frameworks when no explicit id is set on the request.
REQUEST_ID_HEADERS = (
    "request-id",
    "x-request-id",
)


@dataclass(frozen=True)
class RequestLike:
    """A recognized request, with the three fields recognition requires."""

    source: Any
    method: str
    http_version: str
    headers: Dict[str, Any]


@dataclass(frozen=True)
class ResponseLike:
    """A recognized response, with its header collection already copied."""

    source: Any
    status_code: int
    headers: Dict[str, Any]


class NotRecognized:
    """Result of recognizing a value that is neither a request nor a response."""

    def __repr__(self) -> str:
        return "NOT_RECOGNIZED"


NOT_RECOGNIZED = NotRecognized()

Recognized = Union[RequestLike, ResponseLike, NotRecognized]


def _field(candidate: Any, name: str) -> Any:
    """Read a field by key from mappings, by attribute from anything else."""
    if candidate is None or candidate is MISSING:
        return MISSING
    try:
        if isinstance(candidate, Mapping):
            return candidate.get(name, MISSING)
        return getattr(candidate, name, MISSING)
    except Exception as e:
        # Framework properties may compute lazily and fail.
        logger.debug(f"Could not read {name!r} from {type(candidate).__name__}: {e}")
        return MISSING


def _is_header_collection(headers: Any) -> bool:
    if isinstance(headers, (str, bytes)) or headers is MISSING or headers is None:
        return False
    return isinstance(headers, Mapping) or callable(_field(headers, "items"))


def _looks_like_response(candidate: Any) -> bool:
    """Integer status_code plus get_headers() or a headers collection."""
    status_code = _field(candidate, "status_code")
    if not isinstance(status_code, int) or isinstance(status_code, bool):
        return False
    return callable(_field(candidate, "get_headers")) or _is_header_collection(
        _field(candidate, "headers")
    )


def _copy_headers(headers: Any) -> Optional[Dict[str, Any]]:
    """
    Shallow-copy a header collection into a plain dict.

    Accepts mappings and multi-dict style objects exposing items().

    Returns:
        The copy, or None if the value is not a header collection
    """
    if isinstance(headers, (str, bytes)) or headers is MISSING or headers is None:
        return None
    items = _field(headers, "items") if not isinstance(headers, Mapping) else headers.items
    if not callable(items):
        return None
    try:
        return {key: value for key, value in items()}
    except Exception as e:
        logger.debug(f"Could not copy headers from {type(headers).__name__}: {e}")
        return None


def _header(headers: Mapping, name: str) -> Any:
    """Case-insensitive header lookup; an exact key match wins."""
    if name in headers:
        return headers[name]
    for key, value in headers.items():
        if isinstance(key, str) and key.lower() == name:
            return value
    return None


def _parse_content_length(value: Any) -> Optional[Union[int, float]]:
    """
    Parse a content-length header value as a number.

    Returns:
        int when integral, float otherwise, or None when the value does not
        parse as a finite number
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and "_" in value:
        # float() allows digit separators; header values never carry them.
        return None
    try:
        number = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return int(number) if number.is_integer() else number


def split_url(raw: str) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Split a raw request path into (path, query, fragment).

    Splits on the first "?" and the first "#":
    - both present: query is only the text between them
    - only "?": everything after it is the query
    - only "#": everything after it is the fragment
    - neither: the whole string is the path

    Absent components are None; present-but-empty ones are "".
    """
    q = raw.find("?")
    h = raw.find("#")
    if q > -1 and h > -1:
        return raw[:q], raw[q + 1:h], raw[h + 1:]
    if q > -1:
        return raw[:q], raw[q + 1:], None
    if h > -1:
        return raw[:h], None, raw[h + 1:]
    return raw, None, None


def recognize_request(candidate: Any) -> Recognized:
    """
    Recognize a request-like value.

    A request exposes a string http_version, a headers collection and a
    string method. A wrapper whose raw.req has an http_version is unwrapped
    first.
    """
    if candidate is None or isinstance(candidate, (str, bytes, int, float, list, tuple)):
        return NOT_RECOGNIZED

    inner = _field(_field(candidate, "raw"), "req")
    if _field(inner, "http_version") is not MISSING:
        candidate = inner

    method = _field(candidate, "method")
    http_version = _field(candidate, "http_version")
    if not isinstance(method, str) or not isinstance(http_version, str):
        return NOT_RECOGNIZED

    headers = _copy_headers(_field(candidate, "headers"))
    if headers is None:
        return NOT_RECOGNIZED

    return RequestLike(
        source=candidate,
        method=method,
        http_version=http_version,
        headers=headers,
    )


def recognize_response(candidate: Any) -> Recognized:
    """
    Recognize a response-like value.

    A response exposes an integer status_code and either a callable
    get_headers() or a headers collection. A wrapper whose raw.res looks
    like a response by the same rule is unwrapped first.
    """
    if candidate is None or isinstance(candidate, (str, bytes, int, float, list, tuple)):
        return NOT_RECOGNIZED

    inner = _field(_field(candidate, "raw"), "res")
    if _looks_like_response(inner):
        candidate = inner

    status_code = _field(candidate, "status_code")
    if not isinstance(status_code, int) or isinstance(status_code, bool):
        return NOT_RECOGNIZED

    get_headers = _field(candidate, "get_headers")
    if callable(get_headers):
        try:
            raw_headers = get_headers()
        except Exception as e:
            logger.debug(f"get_headers() failed on {type(candidate).__name__}: {e}")
            return NOT_RECOGNIZED
    else:
        raw_headers = _field(candidate, "headers")

    headers = _copy_headers(raw_headers)
    if headers is None:
        return NOT_RECOGNIZED

    return ResponseLike(source=candidate, status_code=status_code, headers=headers)


def _resolve_request_id(source: Any, headers: Mapping) -> Optional[str]:
    """
    Find a request ID.

    Tried in order: a string id field, a numeric id field, a zero-argument
    id callable, then the REQUEST_ID_HEADERS.
    """
    request_id = None
    candidate_id = _field(source, "id")
    if isinstance(candidate_id, str):
        request_id = candidate_id
    elif isinstance(candidate_id, (int, float)) and not isinstance(candidate_id, bool):
        if isinstance(candidate_id, float) and candidate_id.is_integer():
            candidate_id = int(candidate_id)
        request_id = str(candidate_id)
    elif callable(candidate_id):
        try:
            produced = candidate_id()
        except Exception as e:
            logger.debug(f"Request id callable failed: {e}")
            produced = None
        if produced is not None:
            request_id = str(produced)

    if not request_id and headers:
        for name in REQUEST_ID_HEADERS:
            value = _header(headers, name)
            if value:
                request_id = str(value)
                break

    return request_id or None


def format_http_request(record: MutableMapping, candidate: Any) -> bool:
    """
    Write ECS fields for a request-like value into record.

    Args:
        record: Record being built (written to only on success)
        candidate: Any value; typically a framework request object

    Returns:
        True iff the candidate was recognized and mapped
    """
    req = recognize_request(candidate)
    if not isinstance(req, RequestLike):
        return False

    source = req.source
    headers = req.headers

    dotted_set(record, "http.version", req.http_version)
    dotted_set(record, "http.request.method", req.method)

    # Routing may rewrite url; original_url keeps what the client sent.
    raw_url = ""
    for name in ("original_url", "url"):
        value = _field(source, name)
        if isinstance(value, str) and value:
            raw_url = value
            break

    socket = _field(source, "socket")
    if socket is MISSING:
        socket = None
    scheme = "https://" if socket is not None and _field(socket, "encrypted") is True else "http://"
    host = _header(headers, "host")
    dotted_set(record, "url.full", scheme + (str(host) if host else "") + raw_url)

    path, query, fragment = split_url(raw_url)
    dotted_set(record, "url.path", path)
    if query is not None:
        dotted_set(record, "url.query", query)
    if fragment is not None:
        dotted_set(record, "url.fragment", fragment)

    hostname = _field(source, "hostname")
    if isinstance(hostname, str) and hostname:
        domain, _, port = hostname.partition(":")
        dotted_set(record, "url.domain", domain)
        if port:
            try:
                dotted_set(record, "url.port", int(port, 10))
            except ValueError:
                logger.debug(f"Ignoring non-numeric port in hostname {hostname!r}")

    ip = _field(source, "ip")
    if not (isinstance(ip, str) and ip) and socket is not None:
        ip = _field(socket, "remote_address")
    if isinstance(ip, str) and ip:
        dotted_set(record, "client.address", ip)
        dotted_set(record, "client.ip", ip)
    if socket is not None:
        remote_port = _field(socket, "remote_port")
        if remote_port is not MISSING and remote_port is not None:
            dotted_set(record, "client.port", remote_port)

    if headers:
        dotted_merge(record, "http.request.headers", headers)
        content_length = _parse_content_length(_header(headers, "content-length"))
        if content_length is not None:
            dotted_set(record, "http.request.body.bytes", content_length)
        user_agent = _header(headers, "user-agent")
        if user_agent:
            dotted_set(record, "user_agent.original", user_agent)

    request_id = _resolve_request_id(source, headers)
    if request_id:
        dotted_set(record, "http.request.id", request_id)

    return True


def format_http_response(record: MutableMapping, candidate: Any) -> bool:
    """
    Write ECS fields for a response-like value into record.

    Returns:
        True iff the candidate was recognized and mapped
    """
    res = recognize_response(candidate)
    if not isinstance(res, ResponseLike):
        return False

    dotted_set(record, "http.response.status_code", res.status_code)

    if res.headers:
        dotted_merge(record, "http.response.headers", res.headers)
        content_length = _parse_content_length(_header(res.headers, "content-length"))
        if content_length is not None:
            dotted_set(record, "http.response.body.bytes", content_length)

    return True
