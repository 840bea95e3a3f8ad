"""
XPService - XP awarding and XP read models

Awards XP for marketplace events, keeps tiers in step with the ledger, and
hands every award to the badge engine so milestone badges unlock immediately.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import psycopg

from rewards_engine.db import queries
from rewards_engine.exceptions import ValidationError, wrap_external_exception
from rewards_engine.models.rewards import (
    AwardResult,
    LeaderboardEntry,
    UserTier,
    XPAccount,
    XPCategory,
    XPEvent,
    XPEventType,
    XPSummary,
)
from rewards_engine.rewards.tier_system import benefits_of, progress_of
from rewards_engine.rewards.xp_system import apply_award, enum_value, resolve_xp_amount
from rewards_engine.utils.datetime_helpers import Clock, now_utc

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def clamp_limit(limit: int, maximum: int = MAX_PAGE_SIZE) -> int:
    """Clamp a caller-provided page size to 1..maximum"""
    return max(1, min(limit, maximum))


class XPService:
    """
    Service for the XP ledger.

    Responsibilities:
    - Resolving XP for events and applying it atomically
    - Tier upgrade bonuses
    - Triggering badge checks after each award
    - XP summary, history and leaderboard
    """

    def __init__(self, db, badge_service=None, clock: Clock = now_utc):
        """
        Initialize XPService.

        Args:
            db: Database instance (connection()/transaction() provider)
            badge_service: BadgeService to run after each award (optional)
            clock: Current-time provider
        """
        self.db = db
        self.badge_service = badge_service
        self.clock = clock
        logger.debug("XPService initialized")

    async def award_xp(
        self,
        user_id: str,
        event_type: Union[XPEventType, str],
        category: Union[XPCategory, str],
        custom_xp: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
        check_badges: bool = True
    ) -> AwardResult:
        """
        Award XP to a user for an event

        Args:
            user_id: User ID
            event_type: What happened (BOOKING_COMPLETED, REVIEW_LEFT, ...)
            category: Ledger category; decides the point bucket
            custom_xp: Explicit amount instead of the event's table amount
            metadata: Extra data stored on the XP event
            correlation_id: Business event id; a repeated id is not applied twice
            check_badges: Run the badge engine after the award

        Returns:
            AwardResult with the XP granted, the new total and the tier
            reached if the award upgraded the user

        Raises:
            ValidationError: custom_xp is negative
            DatabaseError: The award could not be stored (nothing was written)
        """
        if custom_xp is not None and custom_xp < 0:
            raise ValidationError(
                "XP override must not be negative",
                field="custom_xp",
                value=custom_xp,
                user_id=user_id,
                operation="award_xp"
            )

        amount = resolve_xp_amount(event_type, custom_xp)

        if amount == 0:
            account = await self._get_account(user_id)
            return AwardResult(xp_awarded=0, new_total=account["total_xp"] if account else 0)

        logger.info(
            f"Awarding {amount} XP to user {user_id} for {enum_value(event_type)} "
            f"({enum_value(category)})"
        )

        try:
            async with self.db.transaction() as conn:
                result = await apply_award(
                    conn,
                    user_id=user_id,
                    event_type=event_type,
                    category=category,
                    amount=amount,
                    now=self.clock(),
                    metadata=metadata,
                    correlation_id=correlation_id,
                )
        except psycopg.Error as e:
            raise wrap_external_exception(
                e,
                operation="award_xp",
                user_id=user_id,
                context={
                    "event_type": enum_value(event_type),
                    "category": enum_value(category),
                    "xp": amount,
                    "correlation_id": correlation_id,
                }
            ) from e

        if result.tier_upgrade:
            logger.info(f"User {user_id} upgraded to {result.tier_upgrade.value} (+{result.bonus_xp} bonus XP)")

        # Replays re-run the check so a badge missed by a failed first attempt is still awarded
        if check_badges and self.badge_service is not None:
            result.badges_awarded = await self.badge_service.check_and_award_badges(
                user_id,
                event_type,
                {"new_total": result.new_total, "correlation_id": correlation_id},
            )

        return result

    async def get_user_xp_summary(self, user_id: str) -> XPSummary:
        """
        Get user's XP totals, tier, progress and benefits

        Users without an account get Bronze defaults.
        """
        account = await self._get_account(user_id)

        if not account:
            return XPSummary(
                total_xp=0,
                customer_points=0,
                stylist_points=0,
                owner_points=0,
                tier=UserTier.BRONZE,
                tier_progress=0.0,
                benefits=benefits_of(UserTier.BRONZE),
            )

        account = XPAccount(**account)
        return XPSummary(
            total_xp=account.total_xp,
            customer_points=account.customer_points,
            stylist_points=account.stylist_points,
            owner_points=account.owner_points,
            tier=account.tier,
            tier_progress=progress_of(account.total_xp, account.tier),
            benefits=benefits_of(account.tier),
        )

    async def get_xp_history(self, user_id: str, limit: int = 20) -> List[XPEvent]:
        """
        Get recent XP events for a user, newest first

        Args:
            limit: Number of events (clamped to 1..100)
        """
        async with self.db.connection() as conn:
            rows = await queries.get_xp_events(conn, user_id, clamp_limit(limit))
        return [XPEvent(**row) for row in rows]

    async def get_xp_leaderboard(self, limit: int = 100) -> List[LeaderboardEntry]:
        """
        Get users ranked by total XP

        Args:
            limit: Number of entries (clamped to 1..100)
        """
        async with self.db.connection() as conn:
            rows = await queries.get_xp_leaderboard(conn, clamp_limit(limit))

        return [
            LeaderboardEntry(rank=index + 1, user_id=row["user_id"], total_xp=row["total_xp"], tier=row["tier"])
            for index, row in enumerate(rows)
        ]

    async def _get_account(self, user_id: str) -> Optional[dict]:
        async with self.db.connection() as conn:
            return await queries.get_xp_account(conn, user_id)
