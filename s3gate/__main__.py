"""Run the storage server: `python -m s3gate`."""

import asyncio
import logging

from s3gate.app import build_container, build_entrypoint, setup_observability
from s3gate.configs.app import AppConfig
from s3gate.configs.base import StorageConfigurationError

logger = logging.getLogger("s3gate")


async def main() -> None:
    """Load the config, then serve until interrupted."""
    try:
        config = AppConfig.from_env()
    except StorageConfigurationError as exc:
        raise SystemExit(str(exc)) from exc

    observability = setup_observability(config)
    entrypoint = build_entrypoint(config, build_container(config), observability)

    async with entrypoint:
        logger.info("Starting s3gate for bucket %s", config.s3.bucket)
        await entrypoint.run()


def run() -> None:
    """Console script entry."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
