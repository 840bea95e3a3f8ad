"""
Streak Decay Job

Zeroes every activity streak whose last activity is older than the decay
window (STREAK_DECAY_HOURS). Runs once per invocation; schedule it with cron
or any external scheduler:

    python -m rewards_engine.scheduler.streak_decay
"""

import asyncio
import logging
import sys
from typing import Optional

from rewards_engine.config import LOG_LEVEL, validate_config
from rewards_engine.db.connection import Database, db
from rewards_engine.services.container import ServiceContainer

logger = logging.getLogger(__name__)


async def run_streak_decay(container: ServiceContainer) -> int:
    """
    Reset expired streaks once

    Returns:
        Number of streaks reset
    """
    logger.info("Running streak decay job")
    count = await container.streak_service.reset_expired_streaks()
    logger.info(f"Streak decay job finished: {count} streaks reset")
    return count


async def main(database: Optional[Database] = None) -> int:
    """Job entry point; returns the process exit code"""
    database = database or db
    try:
        logger.info("Validating configuration...")
        validate_config()

        logger.info("Initializing database connection pool...")
        await database.init_pool()

        await run_streak_decay(ServiceContainer(db=database))
        return 0

    except Exception as e:
        logger.error(f"Streak decay job failed: {e}", exc_info=True)
        return 1
    finally:
        logger.info("Closing database connection...")
        await database.close_pool()


if __name__ == "__main__":
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL)
    )
    sys.exit(asyncio.run(main()))
