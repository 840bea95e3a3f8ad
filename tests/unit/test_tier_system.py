"""Unit tests for tier calculation (rewards_engine/rewards/tier_system.py)"""
import pytest

from rewards_engine.models.rewards import UserTier
from rewards_engine.rewards.tier_system import (
    benefits_of,
    next_tier,
    progress_of,
    tier_of,
    tier_table,
    tiers_between,
)


# ============================================================================
# Tier Calculation Tests
# ============================================================================

@pytest.mark.parametrize("total_xp,expected", [
    (0, UserTier.BRONZE),
    (499, UserTier.BRONZE),
    (500, UserTier.SILVER),
    (1999, UserTier.SILVER),
    (2000, UserTier.GOLD),
    (4999, UserTier.GOLD),
    (5000, UserTier.PLATINUM),
    (9999, UserTier.PLATINUM),
    (10000, UserTier.DIAMOND),
    (250000, UserTier.DIAMOND),
])
def test_tier_of_thresholds(total_xp, expected):
    """Test tier boundaries are inclusive of the threshold"""
    assert tier_of(total_xp) == expected


def test_tier_of_is_non_decreasing():
    """Test more XP never means a lower tier"""
    order = [info.tier for info in tier_table()]
    previous = order.index(tier_of(0))
    for xp in range(0, 12001, 50):
        current = order.index(tier_of(xp))
        assert current >= previous
        previous = current


def test_next_tier():
    """Test next tier lookup and top tier"""
    assert next_tier(UserTier.BRONZE) == UserTier.SILVER
    assert next_tier(UserTier.PLATINUM) == UserTier.DIAMOND
    assert next_tier(UserTier.DIAMOND) is None


# ============================================================================
# Progress Tests
# ============================================================================

def test_progress_at_lower_threshold_is_zero():
    """Test progress starts at 0 at each tier's threshold"""
    assert progress_of(0, UserTier.BRONZE) == 0.0
    assert progress_of(500, UserTier.SILVER) == 0.0
    assert progress_of(2000, UserTier.GOLD) == 0.0


def test_progress_midway():
    """Test progress is linear between thresholds"""
    assert progress_of(250, UserTier.BRONZE) == 50.0
    assert progress_of(1250, UserTier.SILVER) == 50.0


def test_progress_approaches_100_near_next_threshold():
    """Test progress just below the next threshold"""
    progress = progress_of(1999, UserTier.SILVER)
    assert 99.0 < progress < 100.0


def test_progress_top_tier_is_100():
    """Test Diamond always reports full progress"""
    assert progress_of(10000, UserTier.DIAMOND) == 100.0
    assert progress_of(999999, UserTier.DIAMOND) == 100.0


def test_progress_is_clamped():
    """Test stale stored tier never yields progress outside 0-100"""
    assert progress_of(3000, UserTier.BRONZE) == 100.0
    assert progress_of(100, UserTier.GOLD) == 0.0


# ============================================================================
# Tier Crossing Tests
# ============================================================================

def test_tiers_between_single_step():
    """Test one tier crossed"""
    assert tiers_between(UserTier.BRONZE, UserTier.SILVER) == [UserTier.SILVER]


def test_tiers_between_multiple_steps():
    """Test every intermediate tier is listed in order"""
    assert tiers_between(UserTier.BRONZE, UserTier.PLATINUM) == [
        UserTier.SILVER,
        UserTier.GOLD,
        UserTier.PLATINUM,
    ]


def test_tiers_between_no_upgrade():
    """Test same or lower tier yields nothing"""
    assert tiers_between(UserTier.GOLD, UserTier.GOLD) == []
    assert tiers_between(UserTier.GOLD, UserTier.SILVER) == []


# ============================================================================
# Benefits Tests
# ============================================================================

def test_benefits_bronze_has_nothing():
    """Test Bronze has no perks"""
    benefits = benefits_of(UserTier.BRONZE)
    assert benefits.fee_discount == 0
    assert benefits.priority_booking is False
    assert benefits.pool_access is False


def test_benefits_diamond():
    """Test Diamond perks"""
    benefits = benefits_of(UserTier.DIAMOND)
    assert benefits.fee_discount == 15
    assert benefits.can_create_pool is True
    assert benefits.pool_access is True


def test_benefits_returns_copy():
    """Test callers cannot mutate the benefits table"""
    benefits = benefits_of(UserTier.GOLD)
    benefits.fee_discount = 99
    assert benefits_of(UserTier.GOLD).fee_discount == 5


def test_tier_table_order_and_thresholds():
    """Test tier table lists every tier lowest first"""
    table = tier_table()
    assert [info.tier for info in table] == [
        UserTier.BRONZE,
        UserTier.SILVER,
        UserTier.GOLD,
        UserTier.PLATINUM,
        UserTier.DIAMOND,
    ]
    assert [info.min_xp for info in table] == [0, 500, 2000, 5000, 10000]
