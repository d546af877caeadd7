from __future__ import annotations

import asyncio
import logging
import sys

import apirequest
from apirequest import AsyncAPIClient, RequestConfig, RequestDescriptor

logger: logging.Logger = logging.getLogger(__name__)

# Use httpbin.org for real HTTP testing
HTTPBIN_URL = "https://httpbin.org"


def check_request_async() -> None:
    logger.info("Checking request_async...")
    response = asyncio.run(
        apirequest.request_async(RequestConfig(request=RequestDescriptor(url=f"{HTTPBIN_URL}/get")))
    )
    assert response.status == 200


def check_async_api_client() -> None:
    logger.info("Checking AsyncAPIClient...")

    async def post() -> int:
        async with AsyncAPIClient() as client:
            response = await client.request(
                RequestDescriptor(url=f"{HTTPBIN_URL}/post", method="POST", body={"a": 1})
            )
        return response.status

    assert asyncio.run(post()) == 200


def main() -> None:
    r"""Run all package checks to validate installation and
    functionality."""
    try:
        check_request_async()
        check_async_api_client()

        logger.info("✅ All package checks passed successfully!")
    except Exception:
        logger.exception("❌ Package check failed")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
