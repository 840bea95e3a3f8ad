"""
Database queries - Re-export all functions from one module.

All query functions take an open psycopg connection as their first argument,
so callers decide the transaction scope (Database.connection() for reads,
Database.transaction() for writes that must land together).

Module organization:
- xp.py: XP accounts, XP event ledger, XP leaderboard
- streaks.py: Streak counters, decay sweep, streak leaderboard
- badges.py: Earned badges
- stats.py: Read-only marketplace statistics (bookings, reviews, referrals)
"""

# XP ledger
from rewards_engine.db.queries.xp import (
    get_xp_account,
    ensure_xp_account,
    get_xp_account_for_update,
    increment_xp,
    set_tier,
    insert_xp_event,
    get_xp_events,
    get_xp_leaderboard,
)

# Streaks
from rewards_engine.db.queries.streaks import (
    update_streak,
    reset_expired_streaks,
    get_streak_leaderboard,
)

# Badges
from rewards_engine.db.queries.badges import (
    get_user_badges,
    insert_user_badge,
)

# Marketplace statistics
from rewards_engine.db.queries.stats import (
    count_completed_bookings,
    count_referrals,
    get_recent_review_ratings,
    get_reputation,
    get_referral_code,
    get_referral_rank,
)

__all__ = [
    "get_xp_account",
    "ensure_xp_account",
    "get_xp_account_for_update",
    "increment_xp",
    "set_tier",
    "insert_xp_event",
    "get_xp_events",
    "get_xp_leaderboard",
    "update_streak",
    "reset_expired_streaks",
    "get_streak_leaderboard",
    "get_user_badges",
    "insert_user_badge",
    "count_completed_bookings",
    "count_referrals",
    "get_recent_review_ratings",
    "get_reputation",
    "get_referral_code",
    "get_referral_rank",
]
