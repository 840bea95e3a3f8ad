"""
XP Ledger

Applies XP grants to the ledger inside a caller-owned transaction.

XP Award Rules:
- Booking completed: 10 XP
- Review left / received: 2 / 3 XP
- Referral signup / activated: 10 / 50 XP
- Special event: 20 XP
- Streak bonuses: 5-25 XP (see streak_system)
- Badge unlocks: catalog reward
- Tier upgrade: 25 XP per tier crossed

Point buckets:
- booking, review -> customer points
- referral -> one tenth of the XP into the referral score
- streak, special -> total only
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union
import logging

import psycopg

from rewards_engine.db import queries
from rewards_engine.models.rewards import AwardResult, UserTier, XPCategory, XPEventType
from rewards_engine.rewards.constants import REFERRAL_SCORE_RATIO, XP_AWARDS
from rewards_engine.rewards.tier_system import tier_of, tiers_between

logger = logging.getLogger(__name__)

CUSTOMER_POINT_CATEGORIES = {XPCategory.BOOKING, XPCategory.REVIEW}


def enum_value(value: Union[Enum, str]) -> str:
    """Plain string for an enum member or string"""
    return value.value if isinstance(value, Enum) else str(value)


def resolve_xp_amount(event_type: Union[XPEventType, str], custom_xp: Optional[int] = None) -> int:
    """
    XP to grant for an event

    An explicit custom_xp wins. Event types missing from the XP table are a
    configuration problem: they grant nothing rather than failing the
    business action that triggered them.
    """
    if custom_xp is not None:
        return custom_xp

    try:
        amount = XP_AWARDS.get(XPEventType(enum_value(event_type)))
    except ValueError:
        amount = None

    if amount is None:
        logger.warning(f"No XP amount configured for event type {enum_value(event_type)}; awarding 0 XP")
        return 0
    return amount


def bucket_increments(category: Union[XPCategory, str], amount: int) -> Tuple[int, float]:
    """
    Point-bucket increments for an award

    Returns:
        (customer_points, referral_score)
    """
    try:
        category = XPCategory(enum_value(category))
    except ValueError:
        return 0, 0.0

    if category in CUSTOMER_POINT_CATEGORIES:
        return amount, 0.0
    if category == XPCategory.REFERRAL:
        return 0, amount * REFERRAL_SCORE_RATIO
    return 0, 0.0


async def apply_award(
    conn: psycopg.AsyncConnection,
    user_id: str,
    event_type: Union[XPEventType, str],
    category: Union[XPCategory, str],
    amount: int,
    now: datetime,
    metadata: Optional[Dict[str, Any]] = None,
    correlation_id: Optional[str] = None
) -> AwardResult:
    """
    Record one XP grant and any tier upgrades it causes

    Must run inside Database.transaction(): the event append, the ledger
    increment, the upgrade bonuses and the tier update land together or not
    at all.

    Tier upgrades are settled in a loop: every tier crossed appends one
    TIER_UPGRADED bonus, and the tier is re-checked after the bonuses until it
    is stable. Bonuses never recurse into another award.

    Returns:
        AwardResult without badges; duplicate=True (and nothing written) if
        correlation_id was already recorded for this user and event type
    """
    event_type_value = enum_value(event_type)

    event_id = await queries.insert_xp_event(
        conn, user_id, event_type_value, amount, enum_value(category),
        correlation_id, metadata, now
    )
    if event_id is None:
        account = await queries.get_xp_account(conn, user_id)
        logger.info(
            f"Skipped duplicate {event_type_value} award for user {user_id} "
            f"(correlation id {correlation_id})"
        )
        return AwardResult(
            xp_awarded=0,
            new_total=account["total_xp"] if account else 0,
            duplicate=True,
        )

    customer_points, referral_score = bucket_increments(category, amount)
    row = await queries.increment_xp(conn, user_id, amount, customer_points, referral_score, now)
    total_xp = row["total_xp"]
    current_tier = UserTier(row["tier"])

    tier_upgrade: Optional[UserTier] = None
    bonus_xp = 0
    upgrade_bonus = XP_AWARDS[XPEventType.TIER_UPGRADED]

    while True:
        target_tier = tier_of(total_xp)
        if target_tier == current_tier:
            break

        previous_tier = current_tier
        for crossed_tier in tiers_between(current_tier, target_tier):
            await queries.insert_xp_event(
                conn, user_id, XPEventType.TIER_UPGRADED.value, upgrade_bonus,
                XPCategory.SPECIAL.value, None,
                {"previous_tier": previous_tier.value, "new_tier": crossed_tier.value},
                now
            )
            row = await queries.increment_xp(conn, user_id, upgrade_bonus, 0, 0.0, now)
            total_xp = row["total_xp"]
            bonus_xp += upgrade_bonus
            tier_upgrade = crossed_tier
            previous_tier = crossed_tier

        await queries.set_tier(conn, user_id, target_tier.value, now)
        logger.info(
            f"User {user_id} tier changed {current_tier.value} -> {target_tier.value} "
            f"at {total_xp} XP"
        )
        current_tier = target_tier

    logger.info(
        f"Awarded {amount} XP to user {user_id} for {event_type_value}. "
        f"Total: {total_xp} XP, Tier: {current_tier.value}"
    )

    return AwardResult(
        xp_awarded=amount,
        new_total=total_xp,
        tier_upgrade=tier_upgrade,
        bonus_xp=bonus_xp,
    )
