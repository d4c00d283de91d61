"""Headless ingestion worker: polls the hotlist and keeps the data file current.

Runs without the HTTP API. Usage: ``python worker.py``
"""

import asyncio
import logging

from config import configure_logging, settings
from services.runtime import build_services

logger = logging.getLogger(__name__)


async def run_worker() -> None:
    # Without readers there is nothing to cache; merge against the file each round
    services = build_services(settings, use_cache=False)
    await services.start()
    try:
        await asyncio.Event().wait()
    finally:
        await services.stop()


def main() -> None:
    configure_logging(settings)
    problems = settings.validate()
    if problems:
        logger.warning("Configuration problems: %s", "; ".join(problems))
    try:
        asyncio.run(run_worker())
    except KeyboardInterrupt:
        logger.info("Worker stopped")


if __name__ == "__main__":
    main()
