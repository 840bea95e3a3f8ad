"""
Badge unlock rules

Each rule pairs a badge with a statistic read from a BadgeStats snapshot and
the minimum value that unlocks it. Adding a badge rule means adding a row to
BADGE_RULES; the engine has no per-badge branching.

Badges without a rule (EARLY_ADOPTER, HOLIDAY_HERO, ...) are only awarded
explicitly by the system.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from rewards_engine.models.rewards import BadgeType


@dataclass(frozen=True)
class BadgeStats:
    """Derived statistics the rules are evaluated against"""
    completed_bookings: int = 0
    referral_count: int = 0
    consecutive_high_ratings: int = 0
    is_verified: bool = False


@dataclass(frozen=True)
class BadgeRule:
    badge_type: BadgeType
    stat: Callable[[BadgeStats], int]
    threshold: int

    def is_satisfied(self, stats: BadgeStats) -> bool:
        return self.stat(stats) >= self.threshold


def _completed_bookings(stats: BadgeStats) -> int:
    return stats.completed_bookings


def _referral_count(stats: BadgeStats) -> int:
    return stats.referral_count


def _consecutive_high_ratings(stats: BadgeStats) -> int:
    return stats.consecutive_high_ratings


def _verified(stats: BadgeStats) -> int:
    return int(stats.is_verified)


BADGE_RULES: Tuple[BadgeRule, ...] = (
    # Booking milestones
    BadgeRule(BadgeType.FIRST_BOOKING, _completed_bookings, 1),
    BadgeRule(BadgeType.TEN_BOOKINGS, _completed_bookings, 10),
    BadgeRule(BadgeType.FIFTY_BOOKINGS, _completed_bookings, 50),
    BadgeRule(BadgeType.HUNDRED_BOOKINGS, _completed_bookings, 100),
    # Performance
    BadgeRule(BadgeType.FIVE_STAR_STREAK, _consecutive_high_ratings, 5),
    # Community
    BadgeRule(BadgeType.COMMUNITY_BUILDER, _referral_count, 10),
    # Special
    BadgeRule(BadgeType.VERIFIED_STYLIST, _verified, 1),
)


def count_consecutive_high_ratings(ratings: Iterable[int], cutoff: int) -> int:
    """
    Count ratings from the newest until the first one below cutoff

    Args:
        ratings: Review ratings, newest first
        cutoff: Minimum rating that keeps the run going
    """
    count = 0
    for rating in ratings:
        if rating < cutoff:
            break
        count += 1
    return count


def evaluate_rules(
    stats: BadgeStats,
    earned: Iterable[BadgeType],
    rules: Tuple[BadgeRule, ...] = BADGE_RULES
) -> List[BadgeType]:
    """
    Badges whose rule is satisfied and that the user doesn't have yet

    Rules are independent; the result keeps table order.
    """
    earned_set = set(earned)
    return [
        rule.badge_type
        for rule in rules
        if rule.badge_type not in earned_set and rule.is_satisfied(stats)
    ]
