"""JSON serialization for request payloads and response bodies.

Built on pydantic v2. Payloads may be pydantic models, dataclasses, plain
dicts or any value pydantic knows how to dump. Responses are validated into
whatever type the caller asks for (model, TypedDict, ``dict``, ``list[...]``).
"""
import json
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Annotated, Type, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer, PydanticUserError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .errors import CoinbaseClientError

T = TypeVar("T")


def _to_utc_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


# Datetime that is always written as UTC ISO-8601 with a "Z" suffix.
UtcDateTime = Annotated[datetime, PlainSerializer(_to_utc_iso, return_type=str, when_used="json")]


class CoinbaseModel(BaseModel):
    """Base class for request and response DTOs."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


@lru_cache(maxsize=256)
def _cached_adapter(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


def _adapter(target_type: Any) -> TypeAdapter:
    try:
        return _cached_adapter(target_type)
    except TypeError:
        # unhashable type hint
        return TypeAdapter(target_type)


def _drop_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(v) for v in value]
    return value


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", repr(target_type))


class JsonSerializer:
    """Serialize payloads to compact JSON and validate JSON into types.

    Rules on output: ``None`` fields are omitted, models are dumped by alias,
    enums are written as their value and datetimes as ISO-8601.
    """

    def to_primitive(self, value: Any) -> Any:
        """Convert ``value`` into plain JSON-compatible python data."""
        try:
            data = to_jsonable_python(value, by_alias=True, exclude_none=True)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise CoinbaseClientError(f"Failed to serialize {type(value).__name__}: {e}") from e
        return _drop_none(data)

    def serialize(self, value: Any) -> str:
        if value is None:
            return ""
        data = self.to_primitive(value)
        try:
            return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise CoinbaseClientError(f"Failed to serialize {type(value).__name__}: {e}") from e

    def deserialize(self, text: str, target_type: Type[T]) -> T:
        try:
            return _adapter(target_type).validate_json(text)
        except ValidationError as e:
            raise CoinbaseClientError(
                f"Failed to deserialize response into {_type_name(target_type)}: "
                f"{e.error_count()} validation error(s)"
            ) from e
        except PydanticUserError as e:
            raise CoinbaseClientError(f"Cannot deserialize into {_type_name(target_type)}: {e}") from e
