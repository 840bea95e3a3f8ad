"""Rewards tables

Creates the tables owned by the rewards engine. Safe to call multiple times
(uses IF NOT EXISTS). The bookings, referrals, reviews, reputation_scores and
referral_codes tables belong to the marketplace application and are only read.
"""

import logging

from rewards_engine.db.connection import Database

logger = logging.getLogger(__name__)


SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS xp_accounts (
        user_id TEXT PRIMARY KEY,
        total_xp INTEGER NOT NULL DEFAULT 0 CHECK (total_xp >= 0),
        customer_points INTEGER NOT NULL DEFAULT 0,
        stylist_points INTEGER NOT NULL DEFAULT 0,
        owner_points INTEGER NOT NULL DEFAULT 0,
        referral_score NUMERIC(12, 2) NOT NULL DEFAULT 0,
        tier TEXT NOT NULL DEFAULT 'BRONZE',
        current_streak INTEGER NOT NULL DEFAULT 0,
        longest_streak INTEGER NOT NULL DEFAULT 0,
        streak_type TEXT NOT NULL DEFAULT 'bookings',
        last_activity_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_xp_accounts_total_xp
        ON xp_accounts (total_xp DESC)
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_xp_accounts_streak_activity
        ON xp_accounts (last_activity_at)
        WHERE current_streak > 0
    """,
    """
    CREATE TABLE IF NOT EXISTS xp_events (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id TEXT NOT NULL,
        event_type TEXT NOT NULL,
        xp_awarded INTEGER NOT NULL,
        category TEXT NOT NULL,
        correlation_id TEXT,
        metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
        created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_xp_events_user_created
        ON xp_events (user_id, created_at DESC)
    """,
    """
    CREATE UNIQUE INDEX IF NOT EXISTS uq_xp_events_correlation
        ON xp_events (user_id, event_type, correlation_id)
        WHERE correlation_id IS NOT NULL
    """,
    """
    CREATE TABLE IF NOT EXISTS user_badges (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id TEXT NOT NULL,
        badge_type TEXT NOT NULL,
        earned_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
        metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
        CONSTRAINT uq_user_badges_user_badge UNIQUE (user_id, badge_type)
    )
    """,
)


async def init_schema(database: Database) -> None:
    """Create rewards tables and indexes if they don't exist"""
    async with database.transaction() as conn:
        async with conn.cursor() as cur:
            for statement in SCHEMA_STATEMENTS:
                await cur.execute(statement)

    logger.info(f"Rewards schema ready ({len(SCHEMA_STATEMENTS)} statements applied)")
