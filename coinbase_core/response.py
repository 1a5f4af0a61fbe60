"""Normalized HTTP responses and their resolution into results or errors."""
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import CoinbaseHttpError, CoinbaseServiceError
from .serialization import JsonSerializer

T = TypeVar("T")


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""


class ErrorPayload(BaseModel):
    """Structured error body returned by the API."""
    model_config = ConfigDict(extra="ignore")

    message: str


def _service_error_message(body: str) -> Optional[str]:
    try:
        return ErrorPayload.model_validate_json(body).message
    except ValidationError:
        return None


def resolve(
    response: RawResponse,
    expected_status_codes: Iterable[int],
    response_type: Optional[Type[T]] = None,
    serializer: Optional[JsonSerializer] = None,
) -> Any:
    """Turn a response into ``response_type`` or raise a classified error.

    Args:
        response: Final response handed over by the transport
        expected_status_codes: Status codes that count as success for this call
        response_type: Type to deserialize the body into; ``None`` discards the body
        serializer: Serializer to use, defaults to ``JsonSerializer``

    Raises:
        CoinbaseClientError: Expected status but the body does not match ``response_type``
        CoinbaseServiceError: Unexpected status with a ``{"message": ...}`` body
        CoinbaseHttpError: Unexpected status with any other body
    """
    expected = {int(code) for code in expected_status_codes}
    if response.status_code in expected:
        if response_type is None:
            return None
        serializer = serializer or JsonSerializer()
        return serializer.deserialize(response.body, response_type)

    message = _service_error_message(response.body)
    if message is not None:
        raise CoinbaseServiceError(response.status_code, message)
    raise CoinbaseHttpError(response.status_code, response.body)

