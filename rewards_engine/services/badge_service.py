"""
BadgeService - Badge unlocking and badge read models

Evaluates the declarative badge rules against a statistics snapshot and
awards each newly satisfied badge at most once per user. The storage-level
uniqueness of (user, badge) decides races: the losing attempt is reported as
"not newly awarded" and grants no XP.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import psycopg

from rewards_engine.config import HIGH_RATING_CUTOFF
from rewards_engine.db import queries
from rewards_engine.exceptions import ValidationError, wrap_external_exception
from rewards_engine.models.rewards import (
    BadgeStatus,
    BadgeType,
    EarnedBadge,
    XPCategory,
    XPEventType,
)
from rewards_engine.rewards.badge_catalog import BADGE_DEFINITIONS, get_badge
from rewards_engine.rewards.badge_rules import BadgeStats, count_consecutive_high_ratings, evaluate_rules
from rewards_engine.rewards.xp_system import apply_award, enum_value
from rewards_engine.utils.datetime_helpers import Clock, now_utc

logger = logging.getLogger(__name__)

# Reviews scanned for the consecutive high-rating run
RECENT_REVIEWS_SCANNED = 10


class BadgeService:
    """
    Service for badges.

    Responsibilities:
    - Building the statistics snapshot for badge rules
    - Awarding badges idempotently, with their XP reward
    - System-awarded special badges
    - Earned badges and catalog status
    """

    def __init__(self, db, clock: Clock = now_utc, high_rating_cutoff: int = HIGH_RATING_CUTOFF):
        """
        Initialize BadgeService.

        Args:
            db: Database instance
            clock: Current-time provider
            high_rating_cutoff: Lowest review rating (10-50 scale) that keeps
                a high-rating run going
        """
        self.db = db
        self.clock = clock
        self.high_rating_cutoff = high_rating_cutoff
        logger.debug("BadgeService initialized")

    async def check_and_award_badges(
        self,
        user_id: str,
        trigger_event: Union[XPEventType, str],
        context: Optional[Dict[str, Any]] = None
    ) -> List[BadgeType]:
        """
        Award every badge the user now qualifies for

        Args:
            user_id: User ID
            trigger_event: Event that caused the check (stored on the badge)
            context: {'new_total': int, 'correlation_id': str} from the award

        Returns:
            Badges newly awarded by this call
        """
        context = context or {}

        try:
            async with self.db.connection() as conn:
                existing = await queries.get_user_badges(conn, user_id)
                stats = await self._get_badge_stats(conn, user_id)
        except psycopg.Error as e:
            raise wrap_external_exception(
                e,
                operation="check_and_award_badges",
                user_id=user_id,
                context={"trigger_event": enum_value(trigger_event)}
            ) from e

        earned = {row["badge_type"] for row in existing}
        candidates = evaluate_rules(stats, earned)

        metadata = {"trigger_event": enum_value(trigger_event)}
        if context.get("correlation_id"):
            metadata["correlation_id"] = context["correlation_id"]

        awarded = []
        for badge_type in candidates:
            if await self.award_badge(user_id, badge_type, metadata):
                awarded.append(badge_type)

        return awarded

    async def award_badge(
        self,
        user_id: str,
        badge_type: Union[BadgeType, str],
        metadata: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Award a specific badge to a user

        The badge row and its XP reward are written in one transaction. The
        XP grant does not trigger another badge check.

        Returns:
            True if newly awarded, False if the user already had it

        Raises:
            ValidationError: Unknown badge type
        """
        badge = get_badge(badge_type)
        if badge is None:
            raise ValidationError(
                f"Unknown badge type {badge_type}",
                field="badge_type",
                value=str(badge_type),
                user_id=user_id,
                operation="award_badge"
            )

        now = self.clock()

        try:
            async with self.db.transaction() as conn:
                inserted = await queries.insert_user_badge(conn, user_id, badge.id.value, metadata, now)
                if inserted and badge.xp_reward > 0:
                    await apply_award(
                        conn,
                        user_id=user_id,
                        event_type=XPEventType.BADGE_EARNED,
                        category=XPCategory.SPECIAL,
                        amount=badge.xp_reward,
                        now=now,
                        metadata={"badge_type": badge.id.value},
                        correlation_id=f"badge:{badge.id.value}",
                    )
        except psycopg.Error as e:
            raise wrap_external_exception(
                e,
                operation="award_badge",
                user_id=user_id,
                context={"badge_type": badge.id.value}
            ) from e

        if not inserted:
            logger.info(f"User {user_id} already has badge {badge.id.value}")
            return False

        logger.info(f"User {user_id} earned badge: {badge.id.value} ({badge.name}) +{badge.xp_reward} XP")
        return True

    async def award_special_badge(self, user_id: str, badge_type: Union[BadgeType, str], reason: str) -> bool:
        """Award a badge that has no automatic rule (admin or system triggered)"""
        return await self.award_badge(user_id, badge_type, {"reason": reason, "awarded_by": "system"})

    async def get_user_badges(self, user_id: str) -> List[EarnedBadge]:
        """Get user's earned badges with catalog details, newest first"""
        async with self.db.connection() as conn:
            rows = await queries.get_user_badges(conn, user_id)

        badges = []
        for row in rows:
            definition = get_badge(row["badge_type"])
            if definition is None:
                logger.warning(f"User {user_id} has badge {row['badge_type']} missing from the catalog")
                continue
            badges.append(EarnedBadge(
                type=definition.id,
                name=definition.name,
                description=definition.description,
                earned_at=row["earned_at"],
                metadata=row.get("metadata"),
            ))
        return badges

    async def get_all_badges_with_status(self, user_id: str) -> List[BadgeStatus]:
        """Get the whole badge catalog with the user's earned status"""
        async with self.db.connection() as conn:
            rows = await queries.get_user_badges(conn, user_id)

        earned_at = {row["badge_type"]: row["earned_at"] for row in rows}

        return [
            BadgeStatus(
                type=badge.id,
                name=badge.name,
                description=badge.description,
                requirement=badge.requirement,
                xp_reward=badge.xp_reward,
                earned=badge.id.value in earned_at,
                earned_at=earned_at.get(badge.id.value),
            )
            for badge in BADGE_DEFINITIONS
        ]

    async def _get_badge_stats(self, conn, user_id: str) -> BadgeStats:
        """Snapshot of the statistics badge rules are evaluated against"""
        completed_bookings = await queries.count_completed_bookings(conn, user_id)
        referral_count = await queries.count_referrals(conn, user_id)
        ratings = await queries.get_recent_review_ratings(conn, user_id, RECENT_REVIEWS_SCANNED)
        reputation = await queries.get_reputation(conn, user_id)

        return BadgeStats(
            completed_bookings=completed_bookings,
            referral_count=referral_count,
            consecutive_high_ratings=count_consecutive_high_ratings(ratings, self.high_rating_cutoff),
            is_verified=bool(reputation["is_verified"]) if reputation else False,
        )
