"""Rewards models: XP ledger, tiers, streaks and badges"""
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, Any
from datetime import datetime


class UserTier(str, Enum):
    """Membership tiers, lowest first"""
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    DIAMOND = "DIAMOND"


class XPEventType(str, Enum):
    """Events that can earn XP"""
    BOOKING_COMPLETED = "BOOKING_COMPLETED"
    BOOKING_STREAK = "BOOKING_STREAK"
    REVIEW_LEFT = "REVIEW_LEFT"
    REVIEW_RECEIVED = "REVIEW_RECEIVED"
    SPECIAL_EVENT = "SPECIAL_EVENT"
    PUNCTUALITY_BONUS = "PUNCTUALITY_BONUS"
    DISPUTE_RESOLVED = "DISPUTE_RESOLVED"
    REFERRAL_SIGNUP = "REFERRAL_SIGNUP"
    REFERRAL_ACTIVATED = "REFERRAL_ACTIVATED"
    BADGE_EARNED = "BADGE_EARNED"
    TIER_UPGRADED = "TIER_UPGRADED"


class XPCategory(str, Enum):
    """Ledger categories; decide which point bucket an award lands in"""
    BOOKING = "booking"
    REVIEW = "review"
    REFERRAL = "referral"
    STREAK = "streak"
    SPECIAL = "special"


class BadgeType(str, Enum):
    """Unlockable badges"""
    # Booking milestones
    FIRST_BOOKING = "FIRST_BOOKING"
    TEN_BOOKINGS = "TEN_BOOKINGS"
    FIFTY_BOOKINGS = "FIFTY_BOOKINGS"
    HUNDRED_BOOKINGS = "HUNDRED_BOOKINGS"
    # Performance
    PERFECT_TPS_MONTH = "PERFECT_TPS_MONTH"
    FIVE_STAR_STREAK = "FIVE_STAR_STREAK"
    PUNCTUALITY_PRO = "PUNCTUALITY_PRO"
    # Community
    TOP_REFERRER = "TOP_REFERRER"
    COMMUNITY_BUILDER = "COMMUNITY_BUILDER"
    # Special
    EARLY_ADOPTER = "EARLY_ADOPTER"
    VERIFIED_STYLIST = "VERIFIED_STYLIST"
    PREMIUM_HOST = "PREMIUM_HOST"
    MASTER_BRAIDER = "MASTER_BRAIDER"
    # Seasonal
    HOLIDAY_HERO = "HOLIDAY_HERO"
    SUMMER_STAR = "SUMMER_STAR"


# ==========================================
# Stored records
# ==========================================

class XPAccount(BaseModel):
    """Per-user XP ledger totals and streak state"""
    user_id: str
    total_xp: int = 0
    customer_points: int = 0
    stylist_points: int = 0
    owner_points: int = 0
    referral_score: float = 0.0
    tier: UserTier = UserTier.BRONZE
    current_streak: int = 0
    longest_streak: int = 0
    streak_type: str = "bookings"
    last_activity_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class XPEvent(BaseModel):
    """Immutable audit record of one XP grant"""
    id: str
    user_id: str
    event_type: str
    xp_awarded: int
    category: str
    correlation_id: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class Badge(BaseModel):
    """Badge catalog entry"""
    id: BadgeType
    name: str
    description: str
    requirement: str
    xp_reward: int


class TierBenefits(BaseModel):
    """Entitlements attached to a tier"""
    fee_discount: int  # Percentage discount on platform fees
    priority_booking: bool
    priority_support: bool
    early_access: bool
    pool_access: bool  # DeFi pool access
    can_create_pool: bool  # Can create community pools


# ==========================================
# Operation results
# ==========================================

class AwardResult(BaseModel):
    """Outcome of XPService.award_xp"""
    xp_awarded: int
    new_total: int
    tier_upgrade: Optional[UserTier] = None
    bonus_xp: int = 0  # Tier upgrade bonuses granted in the same award
    duplicate: bool = False  # Correlation id was already recorded
    badges_awarded: list[BadgeType] = Field(default_factory=list)


class StreakResult(BaseModel):
    """Outcome of StreakService.record_activity"""
    current_streak: int
    longest_streak: int
    streak_broken: bool
    xp_awarded: int


# ==========================================
# Read models
# ==========================================

class XPSummary(BaseModel):
    total_xp: int
    customer_points: int
    stylist_points: int
    owner_points: int
    tier: UserTier
    tier_progress: float
    benefits: TierBenefits


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    total_xp: int
    tier: UserTier


class StreakLeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    current_streak: int
    longest_streak: int


class StreakInfo(BaseModel):
    current_streak: int
    longest_streak: int
    streak_type: str
    last_activity_at: Optional[datetime] = None
    is_active: bool


class EarnedBadge(BaseModel):
    type: BadgeType
    name: str
    description: str
    earned_at: datetime
    metadata: Optional[dict] = None


class BadgeStatus(BaseModel):
    type: BadgeType
    name: str
    description: str
    requirement: str
    xp_reward: int
    earned: bool
    earned_at: Optional[datetime] = None


class TierInfo(BaseModel):
    tier: UserTier
    min_xp: int
    benefits: TierBenefits


class XPBuckets(BaseModel):
    total: int
    customer_points: int
    stylist_points: int
    owner_points: int


class ReferralSummary(BaseModel):
    score: float
    count: int
    active_count: int
    code: Optional[str] = None
    percentile: int


class UserRewards(BaseModel):
    """Combined rewards read model for dashboards"""
    user_id: str
    xp: XPBuckets
    tier: UserTier
    tier_progress: float
    streak: StreakInfo
    badges: list[EarnedBadge]
    referral: ReferralSummary
    benefits: TierBenefits
