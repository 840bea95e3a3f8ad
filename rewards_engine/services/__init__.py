"""
Service layer for the rewards engine

- XPService: XP awards, tier upgrades, XP reads
- StreakService: activity streaks and the decay reset
- BadgeService: badge unlocking and badge reads
- RewardsService: combined rewards overview
"""

from rewards_engine.services.badge_service import BadgeService
from rewards_engine.services.xp_service import XPService
from rewards_engine.services.streak_service import StreakService
from rewards_engine.services.rewards_service import RewardsService
from rewards_engine.services.container import ServiceContainer, get_container, init_container

__all__ = [
    "BadgeService",
    "XPService",
    "StreakService",
    "RewardsService",
    "ServiceContainer",
    "get_container",
    "init_container",
]
