"""Classification and typed parsing of HTTP responses."""

import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import from_json

from .exceptions import ApiError, DeserializeError, JsonParseError, RateLimitError

logger = logging.getLogger(__name__)

BODY_READ_FAILED = "Failed to read response body"


@lru_cache(maxsize=256)
def _cached_adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def _adapter(response_type: Any) -> TypeAdapter:
    try:
        return _cached_adapter(response_type)
    except TypeError:
        # unhashable target such as Annotated with list metadata
        return TypeAdapter(response_type)


def format_error_path(loc: Sequence[Union[str, int]]) -> str:
    """Render a validation location as ``user.address.zip`` or ``items[0].id``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "."


def document_loc(loc: Sequence[Union[str, int]], value: Any, error_type: str = "") -> List[Union[str, int]]:
    """Keep only the parts of ``loc`` that address a key or index of ``value``.

    Union members and validator functions add tags such as ``int`` or
    ``ModelA`` to a location; those are not in the document and are skipped.
    A missing field is absent from the input, so the final part of a
    ``missing`` error is always kept.
    """
    parts: List[Union[str, int]] = []
    current = value
    last = len(loc) - 1
    for i, part in enumerate(loc):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        elif isinstance(part, int) and isinstance(current, (list, tuple)) and -len(current) <= part < len(current):
            current = current[part]
        elif not (i == last and error_type == "missing"):
            continue
        parts.append(part)
    return parts


def parse_text(body: str, response_type: Any = None) -> Any:
    """Parse a JSON body into ``response_type``.

    With no target type the decoded JSON value is returned unchanged.
    Raises ``JsonParseError`` for malformed JSON or a shape mismatch.
    """
    try:
        if response_type is None:
            return from_json(body)
        return _adapter(response_type).validate_json(body)
    except (ValueError, ValidationError) as e:
        raise JsonParseError(
            f"Failed to parse JSON response: {e}", body=body, original_exception=e
        ) from e


def deserialize_value(value: Any, response_type: Any) -> Any:
    """Validate an already decoded JSON value into ``response_type``.

    Failures raise ``DeserializeError`` carrying the path of the first bad field.
    """
    try:
        return _adapter(response_type).validate_python(value)
    except ValidationError as e:
        first = e.errors()[0]
        path = format_error_path(document_loc(first["loc"], value, first["type"]))
        raise DeserializeError(
            f"Failed to deserialize value at '{path}': {first['msg']}",
            path=path,
            original_exception=e,
        ) from e


def _int_header(headers: httpx.Headers, name: str) -> Optional[int]:
    try:
        return int(headers[name])
    except (KeyError, ValueError):
        return None


def extract_rate_limit_info(response: httpx.Response) -> Dict[str, Any]:
    """Extract rate limit information from response headers."""
    info: Dict[str, Any] = {
        "limit": _int_header(response.headers, "X-RateLimit-Limit"),
        "remaining": _int_header(response.headers, "X-RateLimit-Remaining"),
        "reset_time": _int_header(response.headers, "X-RateLimit-Reset"),
    }
    retry_after = response.headers.get("Retry-After")
    if retry_after is not None:
        try:
            info["retry_after"] = float(retry_after)
        except ValueError:
            # HTTP-date form, not used for scheduling
            pass
    return info


class ResponseHandler:
    """Turns a completed response into a typed value or a taxonomy error."""

    async def read_body(self, response: httpx.Response) -> str:
        """Read the whole body, falling back to a placeholder when that fails."""
        try:
            await response.aread()
            return response.text
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.warning(f"Could not read response body from {response.request.url}: {e}")
            return BODY_READ_FAILED
        finally:
            await response.aclose()

    async def classify_and_parse(self, response: httpx.Response, response_type: Any = None) -> Any:
        """
        Classify a response and parse successful bodies.

        Args:
            response: Response returned by the transport, possibly unread
            response_type: Target type for the body; ``None`` returns raw JSON

        Returns:
            The parsed body

        Raises:
            JsonParseError: 2xx body did not match ``response_type``
            RateLimitError: status 429
            ApiError: any other non-success status
        """
        status = response.status_code
        body = await self.read_body(response)
        context = {
            "request_method": response.request.method,
            "request_url": str(response.request.url),
        }

        if response.is_success:
            return parse_text(body, response_type)

        if status == httpx.codes.TOO_MANY_REQUESTS:
            raise RateLimitError(body, **extract_rate_limit_info(response), **context)

        raise ApiError(status, body, **context)
