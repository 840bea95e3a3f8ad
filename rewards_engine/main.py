"""Command line entry point for rewards engine maintenance"""
import argparse
import asyncio
import logging
import sys

from rewards_engine.config import LOG_LEVEL, validate_config
from rewards_engine.db.connection import db
from rewards_engine.db.schema import init_schema
from rewards_engine.scheduler.streak_decay import run_streak_decay
from rewards_engine.services.container import init_container

logger = logging.getLogger(__name__)


async def run(command: str) -> None:
    logger.info("Validating configuration...")
    validate_config()

    logger.info("Initializing database connection pool...")
    await db.init_pool()
    try:
        if command == "init-db":
            await init_schema(db)
        elif command == "reset-streaks":
            await run_streak_decay(init_container(db))
    finally:
        logger.info("Closing database connection...")
        await db.close_pool()


def main() -> int:
    parser = argparse.ArgumentParser(description="Rewards engine maintenance")
    parser.add_argument(
        "command",
        choices=["init-db", "reset-streaks"],
        help="init-db: create rewards tables; reset-streaks: run the streak decay job once"
    )
    args = parser.parse_args()

    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL)
    )

    try:
        asyncio.run(run(args.command))
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
