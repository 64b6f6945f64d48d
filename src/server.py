"""Protean Engine runner for the storefront domain.

Runs the workers that deliver events asynchronously when the production
overlay sets event_processing to "async":
- OutboxProcessor: polls the outbox table and publishes events to Redis Streams
- StreamSubscriptions: read Redis Streams and invoke the notification and
  category count handlers

Usage:
    python src/server.py
"""

import argparse
import asyncio

from protean.server.engine import Engine

from storefront.domain import storefront
from storefront.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def run():
    storefront.init()
    logger.info("Starting storefront engine", domain=storefront.name)
    await Engine(storefront).run()


def main():
    parser = argparse.ArgumentParser(description="Storefront Engine runner")
    parser.add_argument("--log-dir", default="logs", help="Directory for rotating log files")
    args = parser.parse_args()

    configure_logging(args.log_dir)
    asyncio.run(run())


if __name__ == "__main__":
    main()
