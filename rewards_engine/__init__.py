"""Rewards & Progression Engine

XP ledger, tiers, activity streaks and achievement badges for the marketplace.
"""

__version__ = "0.1.0"
