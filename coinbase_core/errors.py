"""Exception hierarchy for the request pipeline.

Catch ``CoinbaseAPIError`` to handle every failure of a call in one place, or
one of the subclasses to branch on the kind of failure:

- ``CoinbaseClientError``: local problem (credentials, URI, serialization,
  unexpected response shape). Never retried.
- ``CoinbaseTransportError``: the server could not be reached after all
  retries were spent.
- ``CoinbaseServiceError``: the server answered with a structured error body.
- ``CoinbaseHttpError``: the server answered with an unexpected status and a
  body that is not a structured error.
"""
from typing import Optional


class CoinbaseAPIError(Exception):
    """Base class for all errors raised by the client."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class CoinbaseClientError(CoinbaseAPIError):
    """Raised for local failures: bad credentials, bad URI, (de)serialization."""

    def __init__(self, message: str):
        super().__init__(message)


class CoinbaseTransportError(CoinbaseAPIError):
    """Raised when no attempt reached the server."""

    def __init__(self, message: str, attempts: int = 1):
        super().__init__(message)
        self.attempts = attempts


class CoinbaseHttpError(CoinbaseAPIError):
    """Unexpected status code with a body that is not a structured error."""

    def __init__(self, status_code: int, body: str):
        super().__init__(body, status_code=status_code)
        self.body = body


class CoinbaseServiceError(CoinbaseAPIError):
    """Unexpected status code with a structured ``{"message": ...}`` body."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message, status_code=status_code)
