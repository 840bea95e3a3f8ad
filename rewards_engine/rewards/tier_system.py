"""
Tier System

Pure functions mapping cumulative XP to a membership tier.

Tiers (minimum XP):
- Bronze: 0
- Silver: 500
- Gold: 2,000
- Platinum: 5,000
- Diamond: 10,000

Benefits per tier are fixed records used for display and entitlement checks.
"""

from typing import List, Optional

from rewards_engine.models.rewards import TierBenefits, TierInfo, UserTier
from rewards_engine.rewards.constants import TIER_BENEFITS, TIER_ORDER, TIER_THRESHOLDS


def tier_of(total_xp: int) -> UserTier:
    """Highest tier whose threshold is at or below total_xp"""
    tier = TIER_ORDER[0]
    for candidate in TIER_ORDER:
        if total_xp >= TIER_THRESHOLDS[candidate]:
            tier = candidate
    return tier


def next_tier(tier: UserTier) -> Optional[UserTier]:
    """Tier directly above `tier`, or None at the top"""
    index = TIER_ORDER.index(tier)
    if index == len(TIER_ORDER) - 1:
        return None
    return TIER_ORDER[index + 1]


def progress_of(total_xp: int, current_tier: UserTier) -> float:
    """
    Progress from current_tier towards the next tier, 0-100

    Linear between the two thresholds and clamped; always 100 at the top tier.
    """
    upcoming = next_tier(current_tier)
    if upcoming is None:
        return 100.0

    current_threshold = TIER_THRESHOLDS[current_tier]
    next_threshold = TIER_THRESHOLDS[upcoming]

    progress = (total_xp - current_threshold) / (next_threshold - current_threshold) * 100
    return min(max(progress, 0.0), 100.0)


def tiers_between(old_tier: UserTier, new_tier: UserTier) -> List[UserTier]:
    """
    Tiers crossed when moving from old_tier up to new_tier

    Excludes old_tier, includes new_tier. Empty when new_tier is not above
    old_tier.
    """
    old_index = TIER_ORDER.index(old_tier)
    new_index = TIER_ORDER.index(new_tier)
    return list(TIER_ORDER[old_index + 1:new_index + 1])


def benefits_of(tier: UserTier) -> TierBenefits:
    """Benefits record for a tier (a copy; the table is never mutated)"""
    return TIER_BENEFITS[tier].model_copy()


def tier_table() -> List[TierInfo]:
    """All tiers with their thresholds and benefits, lowest first"""
    return [
        TierInfo(tier=tier, min_xp=TIER_THRESHOLDS[tier], benefits=benefits_of(tier))
        for tier in TIER_ORDER
    ]
