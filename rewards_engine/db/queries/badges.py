"""Badge queries"""
import json
import logging
from datetime import datetime
from typing import Optional

import psycopg

logger = logging.getLogger(__name__)


async def get_user_badges(conn: psycopg.AsyncConnection, user_id: str) -> list[dict]:
    """
    Get user's earned badges

    Returns:
        [{'user_id', 'badge_type', 'earned_at', 'metadata'}, ...] newest first
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            SELECT user_id, badge_type, earned_at, metadata
            FROM user_badges
            WHERE user_id = %s
            ORDER BY earned_at DESC
            """,
            (user_id,)
        )
        rows = await cur.fetchall()
        return [dict(row) for row in rows]


async def insert_user_badge(
    conn: psycopg.AsyncConnection,
    user_id: str,
    badge_type: str,
    metadata: Optional[dict],
    now: datetime
) -> bool:
    """
    Record a badge for a user

    Returns:
        True if newly awarded, False if the user already had it
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            INSERT INTO user_badges (user_id, badge_type, earned_at, metadata)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (user_id, badge_type) DO NOTHING
            RETURNING id
            """,
            (user_id, badge_type, now, json.dumps(metadata or {}))
        )
        result = await cur.fetchone()
        return result is not None  # True if inserted, False if already existed
