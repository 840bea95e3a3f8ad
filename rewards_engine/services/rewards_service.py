"""
RewardsService - Rewards dashboard read model

Combines XP, tier, streak, badges and referral standing into one view.
"""

import asyncio
import logging
from typing import List

from rewards_engine.db import queries
from rewards_engine.models.rewards import ReferralSummary, TierInfo, UserRewards, XPBuckets
from rewards_engine.rewards.tier_system import tier_table

logger = logging.getLogger(__name__)


class RewardsService:
    """
    Service for the rewards overview.

    Read-only; every value comes from XPService, StreakService, BadgeService
    or the referral tables.
    """

    def __init__(self, db, xp_service, streak_service, badge_service):
        self.db = db
        self.xp_service = xp_service
        self.streak_service = streak_service
        self.badge_service = badge_service
        logger.debug("RewardsService initialized")

    async def get_user_rewards(self, user_id: str) -> UserRewards:
        """
        Get everything the rewards dashboard shows for a user

        Returns:
            UserRewards with XP buckets, tier, progress, streak, earned
            badges, referral standing and tier benefits
        """
        summary, streak, badges, referral = await asyncio.gather(
            self.xp_service.get_user_xp_summary(user_id),
            self.streak_service.get_user_streak(user_id),
            self.badge_service.get_user_badges(user_id),
            self.get_referral_summary(user_id),
        )

        return UserRewards(
            user_id=user_id,
            xp=XPBuckets(
                total=summary.total_xp,
                customer_points=summary.customer_points,
                stylist_points=summary.stylist_points,
                owner_points=summary.owner_points,
            ),
            tier=summary.tier,
            tier_progress=summary.tier_progress,
            streak=streak,
            badges=badges,
            referral=referral,
            benefits=summary.benefits,
        )

    async def get_referral_summary(self, user_id: str) -> ReferralSummary:
        """
        Get user's referral score, counts, code and percentile

        Percentile is the share of users with a positive referral score who
        score below this user, 0-100. Users without a score sit at 0.
        """
        async with self.db.connection() as conn:
            account = await queries.get_xp_account(conn, user_id)
            count = await queries.count_referrals(conn, user_id)
            active_count = await queries.count_referrals(conn, user_id, active_only=True)
            code = await queries.get_referral_code(conn, user_id)

            score = float(account["referral_score"]) if account else 0.0
            percentile = 0
            if score > 0:
                rank = await queries.get_referral_rank(conn, score)
                if rank["total"]:
                    percentile = min(100, round(rank["lower"] / rank["total"] * 100))

        return ReferralSummary(
            score=score,
            count=count,
            active_count=active_count,
            code=code,
            percentile=percentile,
        )

    def get_tiers(self) -> List[TierInfo]:
        """Get every tier with its XP threshold and benefits, lowest first"""
        return tier_table()
