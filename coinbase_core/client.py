"""Coinbase API client: signed request -> retrying transport -> typed result."""
import time
from typing import Any, Callable, Iterable, Optional, Type, TypeVar, Union

from .config import ClientConfig
from .credentials import Credentials, load_credentials
from .errors import CoinbaseAPIError, CoinbaseClientError
from .logging_setup import logger
from .request import DEFAULT_USER_AGENT, HttpMethod, RequestSpec, build_request
from .response import resolve
from .retry import CallOptions
from .serialization import JsonSerializer
from .transport import AiohttpSender, RetryingTransport

T = TypeVar("T")


class CoinbaseClient:
    """Holds credentials, serializer and transport, and runs the request pipeline.

    Swap behaviour by passing other collaborators (e.g. a ``RetryingTransport``
    around a ``RequestsSender``) rather than subclassing.

    Usage:
        async with CoinbaseClient(creds, "https://api.exchange.coinbase.com") as client:
            order = await client.send_request_async(
                "POST", "/orders", payload, response_type=Order)
    """

    def __init__(
        self,
        credentials: Credentials,
        api_base_path: str,
        *,
        serializer: Optional[JsonSerializer] = None,
        transport: Optional[RetryingTransport] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        clock: Callable[[], float] = time.time,
    ):
        if credentials is None:
            raise ValueError("Credentials cannot be None")
        if not api_base_path or not api_base_path.strip():
            raise ValueError("API base path cannot be empty")
        self.credentials = credentials
        self.api_base_path = api_base_path.strip()
        self.serializer = serializer or JsonSerializer()
        self.transport = transport or RetryingTransport()
        self.user_agent = user_agent
        self._clock = clock

    @classmethod
    def from_config(cls, config: ClientConfig, credentials: Optional[Credentials] = None, **kwargs) -> "CoinbaseClient":
        """Create a client from ``ClientConfig``; credentials are loaded if not given."""
        transport = RetryingTransport(
            AiohttpSender(timeout=config.api.timeout),
            call_options=config.retry.to_call_options(),
        )
        return cls(
            credentials=credentials or load_credentials(),
            api_base_path=config.api.base_url,
            transport=transport,
            user_agent=config.api.user_agent,
            **kwargs,
        )

    async def __aenter__(self) -> "CoinbaseClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def send_request_async(
        self,
        method: Union[str, HttpMethod],
        path: str,
        payload: Any = None,
        *,
        expected_status_codes: Iterable[int] = (200,),
        response_type: Optional[Type[T]] = None,
        call_options: Optional[CallOptions] = None,
        payload_in_body: Optional[bool] = None,
    ) -> Any:
        """Send one API call and return the body as ``response_type``.

        Args:
            method: HTTP method
            path: Request path relative to the API base path
            payload: Body for POST/PUT/PATCH, query parameters otherwise
            expected_status_codes: Status codes treated as success
            response_type: Type to deserialize the body into; ``None`` returns ``None``
            call_options: Retry settings for this call; defaults to the transport's
            payload_in_body: Force the payload into the body (True) or query (False)

        Raises:
            CoinbaseClientError: Bad request data or unexpected response shape
            CoinbaseTransportError: Server unreachable after all retries
            CoinbaseServiceError: Server returned a structured error
            CoinbaseHttpError: Server returned an unexpected status
        """
        spec = RequestSpec(method=method, path=path, payload=payload, payload_in_body=payload_in_body)
        request = build_request(
            self.api_base_path,
            spec,
            self.credentials,
            self.serializer,
            clock=self._clock,
            user_agent=self.user_agent,
        )
        try:
            response = await self.transport.send(request, call_options)
        except CoinbaseAPIError:
            raise
        except Exception as e:
            # CancelledError is a BaseException and passes through untouched
            raise CoinbaseClientError(f"{spec.method.value} {request.uri} failed: {e!r}") from e
        try:
            return resolve(response, expected_status_codes, response_type, self.serializer)
        except CoinbaseAPIError as e:
            logger.info(f"Request not successful | method={spec.method.value} path={path} error={e}")
            raise
