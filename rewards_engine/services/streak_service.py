"""
StreakService - Activity streak tracking

A streak counts activities that each follow the previous one within the decay
window. Streak bonuses are written in the same transaction as the streak update,
and the badge engine runs once both have committed.
"""

import logging
from datetime import timedelta
from typing import List, Optional

import psycopg

from rewards_engine.config import STREAK_DECAY_HOURS, STREAK_TYPE
from rewards_engine.db import queries
from rewards_engine.exceptions import DatabaseError, wrap_external_exception
from rewards_engine.models.rewards import (
    StreakInfo,
    StreakLeaderboardEntry,
    StreakResult,
    XPCategory,
    XPEventType,
)
from rewards_engine.rewards.streak_system import compute_streak_update, streak_bonus_due
from rewards_engine.rewards.xp_system import apply_award
from rewards_engine.services.xp_service import clamp_limit
from rewards_engine.utils.datetime_helpers import Clock, hours_between, is_within_window, now_utc

logger = logging.getLogger(__name__)


class StreakService:
    """
    Service for activity streaks.

    Responsibilities:
    - Updating a user's streak on activity
    - Paying streak bonuses on whole weeks of streak
    - Resetting streaks that outlived the decay window
    - Streak read models
    """

    def __init__(
        self,
        db,
        xp_service,
        clock: Clock = now_utc,
        decay_window: Optional[timedelta] = None,
        streak_type: str = STREAK_TYPE
    ):
        """
        Initialize StreakService.

        Args:
            db: Database instance
            xp_service: XPService whose badge engine runs after streak bonuses
            clock: Current-time provider
            decay_window: Max gap between consecutive activities
                (default STREAK_DECAY_HOURS)
            streak_type: Activity the streak counts, stored on new accounts
        """
        self.db = db
        self.xp_service = xp_service
        self.clock = clock
        self.decay_window = decay_window or timedelta(hours=STREAK_DECAY_HOURS)
        self.streak_type = streak_type
        logger.debug("StreakService initialized")

    async def record_activity(self, user_id: str) -> StreakResult:
        """
        Record one activity for a user and update their streak

        The streak update and any streak bonus commit together, so a failed
        bonus leaves the streak untouched and the activity can be retried.

        Returns:
            StreakResult with the new streak values and any bonus XP paid
        """
        now = self.clock()
        award = None

        try:
            async with self.db.transaction() as conn:
                await queries.ensure_xp_account(conn, user_id, self.streak_type, now)
                account = await queries.get_xp_account_for_update(conn, user_id)

                update = compute_streak_update(
                    current_streak=account["current_streak"],
                    longest_streak=account["longest_streak"],
                    last_activity_at=account["last_activity_at"],
                    now=now,
                    window=self.decay_window,
                )

                await queries.update_streak(
                    conn, user_id, update.current_streak, update.longest_streak, now, now
                )

                bonus = streak_bonus_due(update.current_streak)
                if bonus:
                    award = await apply_award(
                        conn,
                        user_id=user_id,
                        event_type=XPEventType.BOOKING_STREAK,
                        category=XPCategory.STREAK,
                        amount=bonus,
                        now=now,
                        metadata={"streak_length": update.current_streak},
                    )
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="record_activity", user_id=user_id) from e

        if update.streak_broken:
            logger.info(
                f"User {user_id} lost a {account['current_streak']}-day streak after "
                f"{hours_between(account['last_activity_at'], now):.1f}h of inactivity"
            )

        logger.info(
            f"User {user_id} streak: {update.current_streak} (longest {update.longest_streak})"
        )

        xp_awarded = 0
        if award is not None:
            xp_awarded = award.xp_awarded
            logger.info(f"User {user_id} earned {xp_awarded} XP streak bonus at {update.current_streak}")
            if award.tier_upgrade:
                logger.info(f"User {user_id} upgraded to {award.tier_upgrade.value} (+{award.bonus_xp} bonus XP)")
            await self._check_badges_after_bonus(user_id, award.new_total)

        return StreakResult(
            current_streak=update.current_streak,
            longest_streak=update.longest_streak,
            streak_broken=update.streak_broken,
            xp_awarded=xp_awarded,
        )

    async def _check_badges_after_bonus(self, user_id: str, new_total: int) -> None:
        """Run the badge engine for a committed streak bonus; failures are logged, not raised"""
        badge_service = self.xp_service.badge_service
        if badge_service is None:
            return

        try:
            await badge_service.check_and_award_badges(
                user_id, XPEventType.BOOKING_STREAK, {"new_total": new_total}
            )
        except DatabaseError as e:
            # Badges are re-evaluated on the user's next award
            logger.warning(f"Badge check after streak bonus failed for user {user_id}: {e}")

    async def reset_expired_streaks(self) -> int:
        """
        Zero every streak whose last activity is older than the decay window

        Safe to run repeatedly and alongside record_activity.

        Returns:
            Number of streaks reset
        """
        now = self.clock()
        cutoff = now - self.decay_window

        try:
            async with self.db.transaction() as conn:
                count = await queries.reset_expired_streaks(conn, cutoff, now)
        except psycopg.Error as e:
            raise wrap_external_exception(
                e,
                operation="reset_expired_streaks",
                context={"cutoff": cutoff.isoformat()}
            ) from e

        logger.info(f"Reset {count} expired streaks (inactive since before {cutoff.isoformat()})")
        return count

    async def get_user_streak(self, user_id: str) -> StreakInfo:
        """
        Get user's streak as of now

        The user is active while their last activity is inside the decay
        window. A streak past the window reads as 0 even if the reset job has
        not run yet.
        """
        async with self.db.connection() as conn:
            account = await queries.get_xp_account(conn, user_id)

        if not account:
            return StreakInfo(
                current_streak=0,
                longest_streak=0,
                streak_type=self.streak_type,
                last_activity_at=None,
                is_active=False,
            )

        is_active = is_within_window(account["last_activity_at"], self.clock(), self.decay_window)

        return StreakInfo(
            current_streak=account["current_streak"] if is_active else 0,
            longest_streak=account["longest_streak"],
            streak_type=account["streak_type"],
            last_activity_at=account["last_activity_at"],
            is_active=is_active,
        )

    async def get_streak_leaderboard(self, limit: int = 50) -> List[StreakLeaderboardEntry]:
        """Get users with ongoing streaks, longest first (limit clamped to 1..100)"""
        async with self.db.connection() as conn:
            rows = await queries.get_streak_leaderboard(conn, clamp_limit(limit))

        return [
            StreakLeaderboardEntry(rank=index + 1, **row)
            for index, row in enumerate(rows)
        ]
