"""
Activity Streak Rules

Pure streak transitions, no DB access.

- First activity: streak starts at 1
- Activity within the decay window of the previous one: streak continues (+1)
- Activity after the window: streak resets to 1; reported as broken only
  when the lost streak was longer than 1
- Bonus XP on whole weeks of streak (7, 14, 21, ...), sized by the highest
  breakpoint reached (3/7/14/30 days)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from rewards_engine.rewards.constants import STREAK_BONUS_BREAKPOINTS, STREAK_BONUS_INTERVAL
from rewards_engine.utils.datetime_helpers import is_within_window


@dataclass(frozen=True)
class StreakUpdate:
    current_streak: int
    longest_streak: int
    streak_broken: bool


def compute_streak_update(
    current_streak: int,
    longest_streak: int,
    last_activity_at: Optional[datetime],
    now: datetime,
    window: timedelta
) -> StreakUpdate:
    """Streak values after one more activity at `now`"""
    streak_broken = False

    if last_activity_at is None:
        new_streak = 1
    elif is_within_window(last_activity_at, now, window):
        new_streak = current_streak + 1
    else:
        streak_broken = current_streak > 1
        new_streak = 1

    return StreakUpdate(
        current_streak=new_streak,
        longest_streak=max(new_streak, longest_streak),
        streak_broken=streak_broken,
    )


def streak_bonus_xp(streak_length: int) -> int:
    """Bonus for the highest breakpoint reached (0 below 3 days)"""
    for breakpoint, bonus in STREAK_BONUS_BREAKPOINTS:
        if streak_length >= breakpoint:
            return bonus
    return 0


def streak_bonus_due(streak_length: int) -> int:
    """
    Bonus XP to pay for reaching streak_length, or 0

    Only whole weeks of streak pay out.
    """
    if streak_length <= 0 or streak_length % STREAK_BONUS_INTERVAL != 0:
        return 0
    return streak_bonus_xp(streak_length)
