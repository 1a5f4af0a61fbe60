"""
Coinbase API core client.

Authenticated request pipeline for the Coinbase Exchange REST API featuring:
- HMAC-SHA256 request signing (CB-ACCESS-* headers), base64 or plain text secrets
- Canonical request building: JSON bodies for writes, flattened query strings for reads
- Bounded automatic retry with jittered exponential backoff
- Caller-controlled cancellation of attempts and backoff sleeps
- Deterministic classification of responses into typed results or errors
- Typed (de)serialization via pydantic
- Structured logging via loguru
- Configuration-driven (YAML)

Core Modules:
    credentials: Credentials, request signing and credential loading
    request: Request building and query-string flattening
    retry: Call options, retry decision and backoff
    transport: aiohttp / requests senders and the retrying transport
    response: Response resolution and error classification
    client: CoinbaseClient tying the pipeline together
    serialization: JSON serializer
    errors: Exception hierarchy
    config: Configuration loading and validation

Example:
    >>> from coinbase_core.client import CoinbaseClient
    >>> from coinbase_core.credentials import load_credentials
    >>>
    >>> creds = load_credentials()
    >>> async with CoinbaseClient(creds, "https://api.exchange.coinbase.com") as client:
    ...     accounts = await client.send_request_async("GET", "/accounts", response_type=list)
"""

__version__ = "0.1.0"
__all__ = [
    "credentials",
    "request",
    "retry",
    "transport",
    "response",
    "client",
    "serialization",
    "errors",
    "config",
    "logging_setup",
]
