from __future__ import annotations

import asyncio
import logging
import sys

import aexchange
from aexchange.retriers import RetryStrategy
from aexchange.validators import StatusCodeValidator

logger: logging.Logger = logging.getLogger(__name__)

# Use httpbin.org for real HTTP testing
HTTPBIN_URL = "https://httpbin.org"


def make_client() -> aexchange.Client:
    return aexchange.Client(
        aexchange.ClientConfig(
            validators=[StatusCodeValidator(range(200, 300))],
            retriers=[RetryStrategy(backoff_base=0.5)],
        )
    )


async def check_get() -> None:
    logger.info("Checking get...")
    async with make_client() as client:
        payload = await (
            client.get(f"{HTTPBIN_URL}/get", expecting=dict)
            .adapt_query_items([("breed", "corgi")])
            .run()
        )
    assert payload["args"] == {"breed": "corgi"}


async def check_post() -> None:
    logger.info("Checking post...")
    async with make_client() as client:
        payload = await client.post(f"{HTTPBIN_URL}/post", {"name": "Rex"}, expecting=dict).run()
    assert payload["json"] == {"name": "Rex"}


async def check_status_code() -> None:
    logger.info("Checking status code validation...")
    async with make_client() as client:
        try:
            await client.get(f"{HTTPBIN_URL}/status/404").run()
        except aexchange.StatusCodeValidationError as exc:
            assert exc.code == 404
        else:
            msg = "expected a StatusCodeValidationError"
            raise AssertionError(msg)


def main() -> None:
    r"""Run all package checks to validate installation and
    functionality."""
    try:
        asyncio.run(check_get())
        asyncio.run(check_post())
        asyncio.run(check_status_code())

        logger.info("✅ All package checks passed successfully!")
    except Exception:
        logger.exception("❌ Package check failed")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
