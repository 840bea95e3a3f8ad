"""Badge catalog

Static definitions of every badge. XP rewards here are metadata; the ledger
grant happens when the badge is awarded.
"""

from typing import Dict, List, Optional

from rewards_engine.models.rewards import Badge, BadgeType


BADGE_DEFINITIONS: List[Badge] = [
    # Booking milestones
    Badge(
        id=BadgeType.FIRST_BOOKING,
        name="First Steps",
        description="Complete your first booking",
        requirement="Complete 1 booking",
        xp_reward=10,
    ),
    Badge(
        id=BadgeType.TEN_BOOKINGS,
        name="Getting Started",
        description="Complete 10 bookings",
        requirement="Complete 10 bookings",
        xp_reward=25,
    ),
    Badge(
        id=BadgeType.FIFTY_BOOKINGS,
        name="Regular",
        description="Complete 50 bookings",
        requirement="Complete 50 bookings",
        xp_reward=50,
    ),
    Badge(
        id=BadgeType.HUNDRED_BOOKINGS,
        name="Veteran",
        description="Complete 100 bookings",
        requirement="Complete 100 bookings",
        xp_reward=100,
    ),
    # Performance
    Badge(
        id=BadgeType.PERFECT_TPS_MONTH,
        name="Punctuality Pro",
        description="Maintain perfect TPS for a month",
        requirement="100% TPS for 30 days",
        xp_reward=50,
    ),
    Badge(
        id=BadgeType.FIVE_STAR_STREAK,
        name="Five Star Streak",
        description="Receive 5 five-star reviews in a row",
        requirement="5 consecutive 5-star reviews",
        xp_reward=30,
    ),
    Badge(
        id=BadgeType.PUNCTUALITY_PRO,
        name="Always On Time",
        description="Be on time for 20 consecutive bookings",
        requirement="20 on-time arrivals",
        xp_reward=40,
    ),
    # Community
    Badge(
        id=BadgeType.TOP_REFERRER,
        name="Top Referrer",
        description="Be in the top 5% of referrers",
        requirement="Top 5% referral score",
        xp_reward=100,
    ),
    Badge(
        id=BadgeType.COMMUNITY_BUILDER,
        name="Community Builder",
        description="Refer 10 active users",
        requirement="10 successful referrals",
        xp_reward=75,
    ),
    # Special
    Badge(
        id=BadgeType.EARLY_ADOPTER,
        name="Early Adopter",
        description="Join during beta period",
        requirement="Join before public launch",
        xp_reward=50,
    ),
    Badge(
        id=BadgeType.VERIFIED_STYLIST,
        name="Verified Stylist",
        description="Complete identity verification",
        requirement="Pass verification process",
        xp_reward=25,
    ),
    Badge(
        id=BadgeType.PREMIUM_HOST,
        name="Premium Host",
        description="Achieve premium property status",
        requirement="4.8+ rating as property owner",
        xp_reward=50,
    ),
    Badge(
        id=BadgeType.MASTER_BRAIDER,
        name="Master Braider",
        description="Complete 50 braiding services with 4.5+ rating",
        requirement="50 braiding bookings at 4.5+ rating",
        xp_reward=75,
    ),
    # Seasonal
    Badge(
        id=BadgeType.HOLIDAY_HERO,
        name="Holiday Hero",
        description="Complete bookings during holiday season",
        requirement="Complete bookings Dec 20-Jan 5",
        xp_reward=20,
    ),
    Badge(
        id=BadgeType.SUMMER_STAR,
        name="Summer Star",
        description="Be a top performer during summer",
        requirement="Top 10% during summer months",
        xp_reward=30,
    ),
]

_BADGES_BY_TYPE: Dict[BadgeType, Badge] = {badge.id: badge for badge in BADGE_DEFINITIONS}


def get_badge(badge_type: BadgeType) -> Optional[Badge]:
    """Catalog entry for a badge type, or None if unknown"""
    try:
        return _BADGES_BY_TYPE.get(BadgeType(badge_type))
    except ValueError:
        return None
