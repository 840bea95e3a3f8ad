"""
Rewards constants

XP amounts per event, tier thresholds and tier benefits. These tables are
static; changing a value here changes it for every user on the next award.
"""

from typing import Dict, Tuple

from rewards_engine.models.rewards import TierBenefits, UserTier, XPEventType


# Ordered lowest to highest
TIER_ORDER: Tuple[UserTier, ...] = (
    UserTier.BRONZE,
    UserTier.SILVER,
    UserTier.GOLD,
    UserTier.PLATINUM,
    UserTier.DIAMOND,
)

XP_AWARDS: Dict[XPEventType, int] = {
    XPEventType.BOOKING_COMPLETED: 10,
    XPEventType.BOOKING_STREAK: 5,  # Streak bonuses pass their own amount
    XPEventType.REVIEW_LEFT: 2,
    XPEventType.REVIEW_RECEIVED: 3,
    XPEventType.SPECIAL_EVENT: 20,
    XPEventType.PUNCTUALITY_BONUS: 3,
    XPEventType.DISPUTE_RESOLVED: 5,
    XPEventType.REFERRAL_SIGNUP: 10,
    XPEventType.REFERRAL_ACTIVATED: 50,  # When referee completes first booking
    XPEventType.BADGE_EARNED: 5,  # Badge unlocks pass the catalog reward
    XPEventType.TIER_UPGRADED: 25,
}

# Minimum XP for each tier
TIER_THRESHOLDS: Dict[UserTier, int] = {
    UserTier.BRONZE: 0,
    UserTier.SILVER: 500,
    UserTier.GOLD: 2000,
    UserTier.PLATINUM: 5000,
    UserTier.DIAMOND: 10000,
}

TIER_BENEFITS: Dict[UserTier, TierBenefits] = {
    UserTier.BRONZE: TierBenefits(
        fee_discount=0,
        priority_booking=False,
        priority_support=False,
        early_access=False,
        pool_access=False,
        can_create_pool=False,
    ),
    UserTier.SILVER: TierBenefits(
        fee_discount=0,
        priority_booking=True,
        priority_support=False,
        early_access=False,
        pool_access=False,
        can_create_pool=False,
    ),
    UserTier.GOLD: TierBenefits(
        fee_discount=5,
        priority_booking=True,
        priority_support=True,
        early_access=True,
        pool_access=False,
        can_create_pool=False,
    ),
    UserTier.PLATINUM: TierBenefits(
        fee_discount=10,
        priority_booking=True,
        priority_support=True,
        early_access=True,
        pool_access=True,
        can_create_pool=False,
    ),
    UserTier.DIAMOND: TierBenefits(
        fee_discount=15,
        priority_booking=True,
        priority_support=True,
        early_access=True,
        pool_access=True,
        can_create_pool=True,
    ),
}

# Streak length -> bonus XP, highest qualifying breakpoint wins
STREAK_BONUS_BREAKPOINTS: Tuple[Tuple[int, int], ...] = (
    (30, 25),
    (14, 15),
    (7, 10),
    (3, 5),
)

# Bonuses are only paid on whole weeks of streak
STREAK_BONUS_INTERVAL = 7

# Share of referral XP that feeds the referral score
REFERRAL_SCORE_RATIO = 0.1
