"""
Rewards rules for the marketplace

Pure and ledger-level building blocks used by the services:
- Tier calculation and benefits
- XP ledger updates with tier-upgrade bonuses
- Streak transitions and streak bonuses
- Badge catalog and declarative unlock rules
"""

from rewards_engine.rewards.tier_system import tier_of, progress_of, benefits_of, tier_table
from rewards_engine.rewards.xp_system import apply_award, resolve_xp_amount
from rewards_engine.rewards.streak_system import compute_streak_update, streak_bonus_xp, streak_bonus_due
from rewards_engine.rewards.badge_catalog import BADGE_DEFINITIONS, get_badge
from rewards_engine.rewards.badge_rules import BADGE_RULES, BadgeStats, evaluate_rules

__all__ = [
    "tier_of",
    "progress_of",
    "benefits_of",
    "tier_table",
    "apply_award",
    "resolve_xp_amount",
    "compute_streak_update",
    "streak_bonus_xp",
    "streak_bonus_due",
    "BADGE_DEFINITIONS",
    "get_badge",
    "BADGE_RULES",
    "BadgeStats",
    "evaluate_rules",
]
