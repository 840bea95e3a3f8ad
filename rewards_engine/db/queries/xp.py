"""XP ledger queries"""
import json
import logging
from datetime import datetime
from typing import Any, Optional

import psycopg

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = """
    user_id, total_xp, customer_points, stylist_points, owner_points,
    referral_score, tier, current_streak, longest_streak, streak_type,
    last_activity_at, created_at, updated_at
"""


async def get_xp_account(conn: psycopg.AsyncConnection, user_id: str) -> Optional[dict]:
    """
    Get a user's XP account

    Returns:
        Account row as dict, or None if the user has never earned XP or
        recorded activity
    """
    async with conn.cursor() as cur:
        await cur.execute(
            f"""
            SELECT {_ACCOUNT_COLUMNS}
            FROM xp_accounts
            WHERE user_id = %s
            """,
            (user_id,)
        )
        row = await cur.fetchone()
        return dict(row) if row else None


async def ensure_xp_account(
    conn: psycopg.AsyncConnection,
    user_id: str,
    streak_type: str,
    now: datetime
) -> None:
    """Create an empty XP account if the user has none"""
    async with conn.cursor() as cur:
        await cur.execute(
            """
            INSERT INTO xp_accounts (user_id, streak_type, created_at, updated_at)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (user_id) DO NOTHING
            """,
            (user_id, streak_type, now, now)
        )
        if cur.rowcount:
            logger.info(f"Created new XP account for user {user_id}")


async def get_xp_account_for_update(conn: psycopg.AsyncConnection, user_id: str) -> Optional[dict]:
    """
    Get a user's XP account and lock the row until the transaction ends

    Must be called inside Database.transaction().
    """
    async with conn.cursor() as cur:
        await cur.execute(
            f"""
            SELECT {_ACCOUNT_COLUMNS}
            FROM xp_accounts
            WHERE user_id = %s
            FOR UPDATE
            """,
            (user_id,)
        )
        row = await cur.fetchone()
        return dict(row) if row else None


async def increment_xp(
    conn: psycopg.AsyncConnection,
    user_id: str,
    amount: int,
    customer_points: int,
    referral_score: float,
    now: datetime
) -> dict:
    """
    Atomically add XP to a user's account, creating it on first award

    The increment happens in the database (total_xp = total_xp + amount), so
    concurrent awards never lose an update. The row stays locked until the
    surrounding transaction ends.

    Returns:
        {'user_id': str, 'total_xp': int, 'tier': str} where tier is the
        stored tier, not yet recalculated for the new total
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            INSERT INTO xp_accounts (
                user_id, total_xp, customer_points, referral_score, tier, created_at, updated_at
            )
            VALUES (%s, %s, %s, %s, 'BRONZE', %s, %s)
            ON CONFLICT (user_id) DO UPDATE
            SET total_xp = xp_accounts.total_xp + EXCLUDED.total_xp,
                customer_points = xp_accounts.customer_points + EXCLUDED.customer_points,
                referral_score = xp_accounts.referral_score + EXCLUDED.referral_score,
                updated_at = EXCLUDED.updated_at
            RETURNING user_id, total_xp, tier
            """,
            (user_id, amount, customer_points, referral_score, now, now)
        )
        row = await cur.fetchone()
        return dict(row)


async def set_tier(conn: psycopg.AsyncConnection, user_id: str, tier: str, now: datetime) -> None:
    """Persist a user's tier"""
    async with conn.cursor() as cur:
        await cur.execute(
            """
            UPDATE xp_accounts
            SET tier = %s,
                updated_at = %s
            WHERE user_id = %s
            """,
            (tier, now, user_id)
        )


async def insert_xp_event(
    conn: psycopg.AsyncConnection,
    user_id: str,
    event_type: str,
    xp_awarded: int,
    category: str,
    correlation_id: Optional[str],
    metadata: Optional[dict[str, Any]],
    now: datetime
) -> Optional[str]:
    """
    Append an XP event to the audit trail

    Args:
        correlation_id: Optional caller id for the business event; at most
            one event per (user, event type, correlation id) is stored

    Returns:
        Event ID (UUID string), or None if an event with the same
        correlation id was already recorded
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            INSERT INTO xp_events (
                user_id, event_type, xp_awarded, category, correlation_id, metadata, created_at
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (user_id, event_type, correlation_id) WHERE correlation_id IS NOT NULL
            DO NOTHING
            RETURNING id
            """,
            (
                user_id,
                event_type,
                xp_awarded,
                category,
                correlation_id,
                json.dumps(metadata or {}),
                now
            )
        )
        result = await cur.fetchone()
        return str(result['id']) if result else None


async def get_xp_events(conn: psycopg.AsyncConnection, user_id: str, limit: int = 20) -> list[dict]:
    """
    Get recent XP events for user

    Returns:
        List of events ordered by created_at DESC
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            SELECT id::text AS id, user_id, event_type, xp_awarded, category,
                   correlation_id, metadata, created_at
            FROM xp_events
            WHERE user_id = %s
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (user_id, limit)
        )
        rows = await cur.fetchall()
        return [dict(row) for row in rows]


async def get_xp_leaderboard(conn: psycopg.AsyncConnection, limit: int = 100) -> list[dict]:
    """
    Get users ranked by total XP

    Returns:
        [{'user_id': str, 'total_xp': int, 'tier': str}, ...] highest first
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            SELECT user_id, total_xp, tier
            FROM xp_accounts
            ORDER BY total_xp DESC, user_id
            LIMIT %s
            """,
            (limit,)
        )
        rows = await cur.fetchall()
        return [dict(row) for row in rows]
