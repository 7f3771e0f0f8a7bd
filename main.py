"""
Command-line entry point for the portfolio API client.

    python main.py GET /projects page=1
    python main.py POST /contact '{"portfolioId": "p1", "name": "A", ...}'
"""

import asyncio
import json
import sys

from loguru import logger

from portfolio_client.services import (
    APIClient,
    APIClientError,
    ClientEvent,
    RequestQueuedError,
    resolve_config,
)

USAGE = "usage: python main.py METHOD PATH [key=value ...| JSON_BODY]"


def parse_args(argv: list[str]) -> tuple[str, str, dict | None, object]:
    """Split argv into method, path, query params and JSON body."""
    if len(argv) < 2:
        raise ValueError(USAGE)

    method, path, rest = argv[0].upper(), argv[1], argv[2:]
    if method == "GET":
        params = dict(item.split("=", 1) for item in rest if "=" in item)
        return method, path, params or None, None

    body = json.loads(rest[0]) if rest else None
    return method, path, None, body


def log_events(client: APIClient) -> None:
    """Mirror client lifecycle events into the log."""
    client.on(ClientEvent.REQUEST_ERROR, lambda e: logger.warning(f"{e.method} {e.url}: {e.error}"))
    client.on(ClientEvent.QUEUE_FAILED, lambda e: logger.error(f"Dropped {e.request.id}: {e.error}"))
    client.on(ClientEvent.QUEUE_SUCCESS, lambda e: logger.info(f"Replayed {e.request.id}"))


async def main(argv: list[str]) -> int:
    """Run one request and print the response envelope."""
    try:
        method, path, params, body = parse_args(argv)
    except ValueError as e:
        logger.error(str(e))
        return 2

    async with APIClient(resolve_config(platform="cli")) as client:
        log_events(client)
        try:
            response = await client.request(method, path, params=params, json=body)
        except RequestQueuedError as e:
            logger.info(f"Request queued: {e}")
            return 0
        except APIClientError as e:
            logger.error(f"Request failed: {e}")
            return 1

    print(json.dumps(response.to_wire(), indent=2, ensure_ascii=False))
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main(sys.argv[1:])))


if __name__ == "__main__":
    cli()
