"""End-to-end demo of the request pipeline.

Shows:
1. Structured logging
2. Loading configuration and credentials
3. A signed GET with query parameters
4. A signed POST with per-call retry options
5. Handling the classified errors
"""
import asyncio
import sys
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

# Add parent directory to path so we can import coinbase_core
sys.path.insert(0, str(Path(__file__).parent.parent))

from coinbase_core.client import CoinbaseClient
from coinbase_core.config import ClientConfig
from coinbase_core.credentials import load_credentials
from coinbase_core.errors import CoinbaseAPIError, CoinbaseServiceError, CoinbaseTransportError
from coinbase_core.logging_setup import logger, setup_logging
from coinbase_core.retry import CallOptions
from coinbase_core.serialization import CoinbaseModel


class Product(CoinbaseModel):
    id: str
    base_currency: Optional[str] = None
    quote_currency: Optional[str] = None


class LimitOrder(CoinbaseModel):
    product_id: str
    side: str
    price: Decimal
    size: Decimal
    type: str = "limit"
    time_in_force: str = "GTC"


async def main():
    config_file = Path(__file__).parent.parent / "config.yaml"
    if config_file.exists():
        config = ClientConfig.from_yaml(str(config_file))
    else:
        config = ClientConfig()
    setup_logging(log_file=config.logging.log_file, level=config.logging.log_level)
    logger.info("=== Coinbase Client Demo ===")

    try:
        creds = load_credentials()
    except ValueError as e:
        logger.error(f"Failed to load credentials: {e}")
        return

    async with CoinbaseClient.from_config(config, creds) as client:
        try:
            products = await client.send_request_async("GET", "/products", response_type=List[Product])
            logger.info(f"Loaded {len(products)} products")

            order = LimitOrder(product_id="BTC-USD", side="buy", price=Decimal("20000"), size=Decimal("0.001"))
            result = await client.send_request_async(
                "POST",
                "/orders",
                order,
                response_type=dict,
                call_options=CallOptions(should_retry_on_status_codes=True, retryable_status_codes={429, 503}),
            )
            logger.info(f"Order placed | id={result.get('id')}")
        except CoinbaseServiceError as e:
            logger.error(f"API rejected request | status={e.status_code} message={e.message}")
        except CoinbaseTransportError as e:
            logger.error(f"API unreachable | attempts={e.attempts} error={e}")
        except CoinbaseAPIError as e:
            logger.error(f"Request failed | error={e}")


if __name__ == "__main__":
    asyncio.run(main())
