"""Query string construction from parameter objects."""

import json
import logging
from typing import Any, List, Optional, Tuple

from pydantic_core import PydanticSerializationError, to_jsonable_python

from .exceptions import DeserializeError

logger = logging.getLogger(__name__)

QueryParams = List[Tuple[str, str]]


def _scalar_to_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return None


def serialize_params(params: Any) -> Optional[QueryParams]:
    """
    Flatten a parameter object into ordered query pairs.

    Accepts anything pydantic can dump to JSON: models (aliases are used as
    keys), dataclasses, mappings. Scalar fields become strings in field
    order. Arrays, nested objects and nulls are dropped.

    Args:
        params: Parameter object, or None

    Returns:
        List of (key, value) pairs, or None when ``params`` is None

    Raises:
        DeserializeError: the object cannot be serialized or is not an object
    """
    if params is None:
        return None

    try:
        value = to_jsonable_python(params, by_alias=True)
    except PydanticSerializationError as e:
        raise DeserializeError(
            f"Failed to serialize query parameters: {e}", original_exception=e
        ) from e

    if not isinstance(value, dict):
        raise DeserializeError(
            f"Query parameters must serialize to an object, got {type(value).__name__}"
        )

    pairs: QueryParams = []
    for key, field_value in value.items():
        text = _scalar_to_str(field_value)
        if text is None:
            logger.debug(f"Dropping non-scalar query parameter '{key}'")
            continue
        pairs.append((str(key), text))
    return pairs
