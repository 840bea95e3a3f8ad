"""
Marketplace statistics used by badge rules and the referral summary

These read tables owned by the booking, review and referral parts of the
marketplace. The rewards engine never writes to them.
"""
import logging
from typing import Optional

import psycopg

logger = logging.getLogger(__name__)

COMPLETED_BOOKING_STATUSES = ("COMPLETED", "SETTLED")


async def count_completed_bookings(conn: psycopg.AsyncConnection, user_id: str) -> int:
    """Count completed bookings where the user was the customer or the stylist"""
    async with conn.cursor() as cur:
        await cur.execute(
            """
            SELECT COUNT(*) AS count
            FROM bookings
            WHERE (customer_id = %s OR stylist_id = %s)
            AND status = ANY(%s)
            """,
            (user_id, user_id, list(COMPLETED_BOOKING_STATUSES))
        )
        row = await cur.fetchone()
        return row['count'] if row else 0


async def count_referrals(conn: psycopg.AsyncConnection, user_id: str, active_only: bool = False) -> int:
    """Count users referred by user_id (optionally only active referees)"""
    async with conn.cursor() as cur:
        if active_only:
            await cur.execute(
                """
                SELECT COUNT(*) AS count
                FROM referrals
                WHERE referrer_id = %s
                AND referee_is_active = true
                """,
                (user_id,)
            )
        else:
            await cur.execute(
                """
                SELECT COUNT(*) AS count
                FROM referrals
                WHERE referrer_id = %s
                """,
                (user_id,)
            )
        row = await cur.fetchone()
        return row['count'] if row else 0


async def get_recent_review_ratings(conn: psycopg.AsyncConnection, user_id: str, limit: int = 10) -> list[int]:
    """
    Ratings of the most recent reviews the user received, newest first

    Ratings use the 10-50 scale (45 == 4.5 stars).
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            SELECT overall_rating
            FROM reviews
            WHERE reviewee_id = %s
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (user_id, limit)
        )
        rows = await cur.fetchall()
        return [row['overall_rating'] for row in rows]


async def get_reputation(conn: psycopg.AsyncConnection, user_id: str) -> Optional[dict]:
    """
    Get the user's verification status from their reputation record

    Returns:
        {'is_verified': bool} or None
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            SELECT is_verified
            FROM reputation_scores
            WHERE user_id = %s
            """,
            (user_id,)
        )
        row = await cur.fetchone()
        return dict(row) if row else None


async def get_referral_code(conn: psycopg.AsyncConnection, user_id: str) -> Optional[str]:
    """Get the user's referral code (custom code wins), or None"""
    async with conn.cursor() as cur:
        await cur.execute(
            """
            SELECT COALESCE(custom_code, code) AS code
            FROM referral_codes
            WHERE user_id = %s
            """,
            (user_id,)
        )
        row = await cur.fetchone()
        return row['code'] if row else None


async def get_referral_rank(conn: psycopg.AsyncConnection, referral_score: float) -> dict:
    """
    Where a referral score sits among all referrers

    Returns:
        {'total': int, 'lower': int} - users with a positive score, and those
        of them scoring below referral_score
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            SELECT
                COUNT(*) FILTER (WHERE referral_score > 0) AS total,
                COUNT(*) FILTER (WHERE referral_score > 0 AND referral_score < %s) AS lower
            FROM xp_accounts
            """,
            (referral_score,)
        )
        row = await cur.fetchone()
        return {
            'total': row['total'] if row else 0,
            'lower': row['lower'] if row else 0,
        }
