"""Build canonical, signed HTTP requests from logical API calls."""
import json
import time
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, urlsplit, urlunsplit

from .credentials import Credentials
from .errors import CoinbaseClientError
from .serialization import JsonSerializer

DEFAULT_USER_AGENT = "coinbase-core-python/0.1.0"

# RFC 3986 pchar plus "/" and "%" so already escaped paths are left alone
_PATH_SAFE = "/-._~!$&'()*+,;=:@%"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @classmethod
    def parse(cls, method: Union[str, "HttpMethod"]) -> "HttpMethod":
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            raise CoinbaseClientError(f"Unsupported HTTP method: {method}") from None

    @property
    def sends_body(self) -> bool:
        """Whether the payload goes into the body by default."""
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


@dataclass(frozen=True)
class RequestSpec:
    """One logical API call: method, path and optional payload.

    ``payload_in_body`` overrides where the payload goes; leave it ``None`` to
    follow the method (body for POST/PUT/PATCH, query string otherwise).
    """
    method: HttpMethod
    path: str
    payload: Any = None
    payload_in_body: Optional[bool] = None

    def __post_init__(self):
        object.__setattr__(self, "method", HttpMethod.parse(self.method))

    @property
    def uses_body(self) -> bool:
        if self.payload_in_body is None:
            return self.method.sends_body
        return self.payload_in_body


@dataclass(frozen=True)
class SignedRequest:
    """Fully built request. Resent unchanged on every retry."""
    uri: str
    method: HttpMethod
    headers: Mapping[str, str]
    body: str = ""


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def query_pairs(payload: Any, serializer: Optional[JsonSerializer] = None) -> List[Tuple[str, str]]:
    """Flatten a payload into ``(key, value)`` pairs.

    Scalars give one pair, sequences one pair per element, ``None`` nothing.
    """
    if payload is None:
        return []
    serializer = serializer or JsonSerializer()
    data = serializer.to_primitive(payload)
    if not isinstance(data, dict):
        raise CoinbaseClientError(
            f"Query parameters must be an object, got {type(payload).__name__}"
        )
    pairs = []
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, list):
            pairs.extend((key, _query_value(item)) for item in value if item is not None)
        else:
            pairs.append((key, _query_value(value)))
    return pairs


def to_query_string(payload: Any, serializer: Optional[JsonSerializer] = None) -> str:
    return "&".join(
        f"{quote(key, safe='')}={quote(value, safe='')}"
        for key, value in query_pairs(payload, serializer)
    )


def _join_uri(base_url: str, path: str, query: str) -> str:
    request_path = path if path.startswith("/") else f"/{path}"
    uri = f"{base_url.rstrip('/')}{request_path}"
    if query:
        uri = f"{uri}?{query}"
    try:
        parts = urlsplit(uri)
    except ValueError as e:
        raise CoinbaseClientError(f"Invalid request URI {uri!r}: {e}") from e
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise CoinbaseClientError(f"Invalid request URI {uri!r}")
    return urlunsplit((parts.scheme, parts.netloc, quote(parts.path, safe=_PATH_SAFE), parts.query, ""))


def build_request(
    base_url: str,
    spec: RequestSpec,
    credentials: Credentials,
    serializer: Optional[JsonSerializer] = None,
    *,
    clock: Callable[[], float] = time.time,
    user_agent: str = DEFAULT_USER_AGENT,
) -> SignedRequest:
    """Turn a ``RequestSpec`` into a ``SignedRequest``.

    The string handed to the signer is the path and query of the final URI,
    so the signature covers exactly what is sent on the wire. One timestamp
    is taken per build and used for both the signature and its header.

    Raises:
        CoinbaseClientError: If the URI is invalid or the payload cannot be serialized
    """
    serializer = serializer or JsonSerializer()

    if spec.uses_body:
        body = serializer.serialize(spec.payload)
        query = ""
    else:
        body = ""
        query = to_query_string(spec.payload, serializer)

    uri = _join_uri(base_url, spec.path, query)
    parts = urlsplit(uri)
    signed_path = parts.path + (f"?{parts.query}" if parts.query else "")

    timestamp = str(int(clock()))
    method = spec.method.value
    signature = credentials.sign(timestamp, method, signed_path, body)

    headers = {}
    if body:
        headers["Content-Type"] = "application/json"
    headers["User-Agent"] = user_agent
    headers["CB-ACCESS-KEY"] = credentials.access_key
    headers["CB-ACCESS-SIGN"] = signature
    headers["CB-ACCESS-TIMESTAMP"] = timestamp
    headers["CB-ACCESS-PASSPHRASE"] = credentials.passphrase

    return SignedRequest(uri=uri, method=spec.method, headers=MappingProxyType(headers), body=body)
