"""HTTP transport with bounded retries and jittered exponential backoff.

Two senders are provided:

- ``AiohttpSender`` (default): non-blocking, backed by an ``aiohttp.ClientSession``.
- ``RequestsSender``: for hosts that already manage a ``requests.Session``;
  each attempt runs in a worker thread via ``asyncio.to_thread``.

A sender performs exactly one attempt and classifies it as a response or a
transport failure. ``RetryingTransport`` owns the retry loop.

Cancellation: cancelling the task that awaits ``RetryingTransport.send``
aborts the in-flight attempt or the pending backoff sleep and propagates
``asyncio.CancelledError`` without another attempt. Per-attempt timeouts are
transport failures and are retried.
"""
import asyncio
from typing import Awaitable, Callable, Optional, Protocol

import aiohttp
import requests
from yarl import URL

from .errors import CoinbaseTransportError
from .logging_setup import logger
from .request import SignedRequest
from .response import RawResponse
from .retry import DEFAULT_CALL_OPTIONS, AttemptOutcome, CallOptions, Jitter, backoff_delay, should_retry

DEFAULT_TIMEOUT_SECONDS = 10.0


class HttpSender(Protocol):
    async def send(self, request: SignedRequest) -> AttemptOutcome:
        """Perform one attempt. Never raises for network errors."""
        ...

    async def close(self) -> None:
        ...


class AiohttpSender:
    """Send requests with aiohttp.

    If no session is given one is created on first use and closed by
    ``close()``; an injected session is left open for its owner.
    """

    def __init__(self, session: Optional[aiohttp.ClientSession] = None, *, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self._session = session
        self._owns_session = session is None
        self.timeout = timeout

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def send(self, request: SignedRequest) -> AttemptOutcome:
        session = self._get_session()
        try:
            async with session.request(
                request.method.value,
                URL(request.uri, encoded=True),
                headers=dict(request.headers),
                data=request.body.encode("utf-8") if request.body else None,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                text = await resp.text(errors="replace")
                return AttemptOutcome(response=RawResponse(resp.status, dict(resp.headers), text))
        except asyncio.TimeoutError as e:
            return AttemptOutcome(failure=e)
        except aiohttp.ClientError as e:
            return AttemptOutcome(failure=e)

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()


class RequestsSender:
    """Send requests with a (possibly shared) ``requests.Session``."""

    def __init__(self, session: Optional[requests.Session] = None, *, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self._session = session or requests.Session()
        self._owns_session = session is None
        self.timeout = timeout

    def _send_blocking(self, request: SignedRequest) -> RawResponse:
        resp = self._session.request(
            request.method.value,
            request.uri,
            headers=dict(request.headers),
            data=request.body.encode("utf-8") if request.body else None,
            timeout=self.timeout,
        )
        return RawResponse(resp.status_code, dict(resp.headers), resp.text)

    async def send(self, request: SignedRequest) -> AttemptOutcome:
        try:
            response = await asyncio.to_thread(self._send_blocking, request)
        except requests.exceptions.RequestException as e:
            return AttemptOutcome(failure=e)
        return AttemptOutcome(response=response)

    async def close(self) -> None:
        if self._owns_session:
            self._session.close()


class RetryingTransport:
    """Send a signed request, retrying per ``CallOptions``.

    The same ``SignedRequest`` (headers, timestamp and signature included) is
    resent on every attempt. When retries run out the last response is
    returned, whatever its status; if the last attempt was a transport
    failure, ``CoinbaseTransportError`` is raised instead.
    """

    def __init__(
        self,
        sender: Optional[HttpSender] = None,
        *,
        call_options: CallOptions = DEFAULT_CALL_OPTIONS,
        jitter: Optional[Jitter] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.sender = sender or AiohttpSender()
        self.call_options = call_options
        self._jitter = jitter
        self._sleep = sleep

    async def send(self, request: SignedRequest, call_options: Optional[CallOptions] = None) -> RawResponse:
        options = call_options or self.call_options
        method = request.method.value
        retries = 0
        while True:
            logger.debug(f"HTTP attempt | method={method} uri={request.uri} attempt={retries + 1}")
            outcome = await self.sender.send(request)
            if not should_retry(options, retries, outcome):
                break
            retries += 1
            delay = backoff_delay(retries, options, self._jitter)
            reason = f"error={outcome.failure!r}" if outcome.transport_failed else f"status={outcome.status_code}"
            logger.warning(
                f"Retrying request | method={method} uri={request.uri} "
                f"retry={retries}/{options.max_retries} delay={delay:.3f}s {reason}"
            )
            await self._sleep(delay)

        attempts = retries + 1
        if outcome.transport_failed:
            logger.error(f"Request failed | method={method} uri={request.uri} attempts={attempts} error={outcome.failure!r}")
            raise CoinbaseTransportError(
                f"{method} {request.uri} failed after {attempts} attempt(s): {outcome.failure}",
                attempts=attempts,
            ) from outcome.failure
        logger.debug(f"HTTP response | method={method} uri={request.uri} status={outcome.status_code} attempts={attempts}")
        return outcome.response

    async def close(self) -> None:
        await self.sender.close()
