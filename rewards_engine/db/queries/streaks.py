"""Streak queries"""
import logging
from datetime import datetime

import psycopg

logger = logging.getLogger(__name__)


async def update_streak(
    conn: psycopg.AsyncConnection,
    user_id: str,
    current_streak: int,
    longest_streak: int,
    last_activity_at: datetime,
    now: datetime
) -> None:
    """
    Update streak data

    Args:
        user_id: User ID
        current_streak: New consecutive-activity count
        longest_streak: Running maximum
        last_activity_at: Time of this activity
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            UPDATE xp_accounts
            SET current_streak = %s,
                longest_streak = %s,
                last_activity_at = %s,
                updated_at = %s
            WHERE user_id = %s
            """,
            (current_streak, longest_streak, last_activity_at, now, user_id)
        )


async def reset_expired_streaks(conn: psycopg.AsyncConnection, cutoff: datetime, now: datetime) -> int:
    """
    Zero current_streak for every account inactive since before cutoff

    Returns:
        Number of accounts reset
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            UPDATE xp_accounts
            SET current_streak = 0,
                updated_at = %s
            WHERE current_streak > 0
            AND last_activity_at < %s
            """,
            (now, cutoff)
        )
        return cur.rowcount


async def get_streak_leaderboard(conn: psycopg.AsyncConnection, limit: int = 50) -> list[dict]:
    """
    Get users with an ongoing streak, longest current streak first

    Returns:
        [{'user_id': str, 'current_streak': int, 'longest_streak': int}, ...]
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            SELECT user_id, current_streak, longest_streak
            FROM xp_accounts
            WHERE current_streak > 0
            ORDER BY current_streak DESC, user_id
            LIMIT %s
            """,
            (limit,)
        )
        rows = await cur.fetchall()
        return [dict(row) for row in rows]
