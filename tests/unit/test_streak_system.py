"""Unit tests for streak rules and StreakService"""
import pytest
from datetime import datetime, timedelta, timezone

from rewards_engine import exceptions
from rewards_engine.rewards.streak_system import (
    compute_streak_update,
    streak_bonus_due,
    streak_bonus_xp,
)

WINDOW = timedelta(hours=48)
NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Streak Transition Tests
# ============================================================================

def test_first_activity_starts_streak():
    """Test first activity creates streak of 1"""
    update = compute_streak_update(0, 0, None, NOW, WINDOW)

    assert update.current_streak == 1
    assert update.longest_streak == 1
    assert update.streak_broken is False


def test_activity_within_window_continues():
    """Test activity inside the decay window increments streak"""
    update = compute_streak_update(5, 10, NOW - timedelta(hours=30), NOW, WINDOW)

    assert update.current_streak == 6
    assert update.longest_streak == 10  # Unchanged
    assert update.streak_broken is False


def test_activity_exactly_at_window_continues():
    """Test the window boundary still counts as consecutive"""
    update = compute_streak_update(3, 3, NOW - WINDOW, NOW, WINDOW)

    assert update.current_streak == 4
    assert update.longest_streak == 4


def test_activity_after_window_breaks_streak():
    """Test gap longer than the window resets to 1"""
    update = compute_streak_update(5, 8, NOW - WINDOW - timedelta(seconds=1), NOW, WINDOW)

    assert update.current_streak == 1
    assert update.longest_streak == 8
    assert update.streak_broken is True


def test_single_day_streak_lapse_is_not_broken():
    """Test losing a 1-long streak is not reported as broken"""
    update = compute_streak_update(1, 4, NOW - timedelta(days=5), NOW, WINDOW)

    assert update.current_streak == 1
    assert update.streak_broken is False


def test_naive_last_activity_is_treated_as_utc():
    """Test naive stored timestamps compare against an aware clock"""
    last = (NOW - timedelta(hours=10)).replace(tzinfo=None)
    update = compute_streak_update(2, 2, last, NOW, WINDOW)

    assert update.current_streak == 3


# ============================================================================
# Streak Bonus Tests
# ============================================================================

@pytest.mark.parametrize("length,bonus", [
    (0, 0),
    (2, 0),
    (3, 5),
    (7, 10),
    (13, 10),
    (14, 15),
    (29, 15),
    (30, 25),
    (100, 25),
])
def test_streak_bonus_xp_breakpoints(length, bonus):
    """Test highest qualifying breakpoint wins"""
    assert streak_bonus_xp(length) == bonus


@pytest.mark.parametrize("length,bonus", [
    (3, 0),
    (6, 0),
    (7, 10),
    (14, 15),
    (21, 15),
    (28, 15),
    (30, 0),
    (35, 25),
])
def test_streak_bonus_due_only_on_whole_weeks(length, bonus):
    """Test bonuses are paid only every 7th day of streak"""
    assert streak_bonus_due(length) == bonus


# ============================================================================
# StreakService Tests
# ============================================================================

@pytest.mark.asyncio
async def test_record_activity_creates_account(container, store, clock, test_user_id):
    """Test first activity for an unknown user"""
    result = await container.streak_service.record_activity(test_user_id)

    assert result.current_streak == 1
    assert result.longest_streak == 1
    assert result.streak_broken is False
    assert result.xp_awarded == 0
    assert store.accounts[test_user_id]["last_activity_at"] == clock.now
    assert store.accounts[test_user_id]["total_xp"] == 0


@pytest.mark.asyncio
async def test_record_activity_twice_within_window(container, clock, test_user_id):
    """Test two activities inside the window each add 1"""
    await container.streak_service.record_activity(test_user_id)
    clock.advance(hours=47)
    result = await container.streak_service.record_activity(test_user_id)

    assert result.current_streak == 2
    assert result.longest_streak == 2


@pytest.mark.asyncio
async def test_record_activity_after_window_resets(container, clock, test_user_id):
    """Test activity after the window resets and reports the break"""
    service = container.streak_service
    for _ in range(3):
        await service.record_activity(test_user_id)
        clock.advance(hours=24)

    clock.advance(hours=49)
    result = await service.record_activity(test_user_id)

    assert result.current_streak == 1
    assert result.longest_streak == 3
    assert result.streak_broken is True


@pytest.mark.asyncio
async def test_record_activity_pays_weekly_bonus(container, store, clock, test_user_id):
    """Test 7th consecutive activity pays the 10 XP streak bonus"""
    service = container.streak_service
    results = []
    for _ in range(7):
        results.append(await service.record_activity(test_user_id))
        clock.advance(hours=24)

    assert [r.xp_awarded for r in results] == [0, 0, 0, 0, 0, 0, 10]
    assert results[-1].current_streak == 7

    bonus_events = store.events_for(test_user_id, "BOOKING_STREAK")
    assert len(bonus_events) == 1
    assert bonus_events[0]["xp_awarded"] == 10
    assert bonus_events[0]["category"] == "streak"
    assert bonus_events[0]["metadata"] == {"streak_length": 7}
    assert store.accounts[test_user_id]["total_xp"] == 10


@pytest.mark.asyncio
async def test_record_activity_storage_failure_raises(container, store, test_user_id):
    """Test storage failure is wrapped and nothing is written"""
    store.fail_on.add("update_streak")

    with pytest.raises(exceptions.ConnectionError) as exc_info:
        await container.streak_service.record_activity(test_user_id)

    assert exc_info.value.operation == "record_activity"
    assert test_user_id not in store.accounts


@pytest.mark.asyncio
async def test_record_activity_bonus_failure_rolls_back_streak(container, store, clock, test_user_id):
    """Test a failed streak bonus leaves the streak as it was so a retry counts once"""
    service = container.streak_service
    for _ in range(6):
        await service.record_activity(test_user_id)
        clock.advance(hours=24)

    store.fail_on.add("insert_xp_event")
    with pytest.raises(exceptions.ConnectionError):
        await service.record_activity(test_user_id)

    assert store.accounts[test_user_id]["current_streak"] == 6
    assert store.events_for(test_user_id, "BOOKING_STREAK") == []

    store.fail_on.clear()
    clock.advance(minutes=1)
    result = await service.record_activity(test_user_id)

    assert result.current_streak == 7
    assert result.xp_awarded == 10
    assert len(store.events_for(test_user_id, "BOOKING_STREAK")) == 1
    assert store.accounts[test_user_id]["total_xp"] == 10


@pytest.mark.asyncio
async def test_record_activity_bonus_runs_badge_check(container, store, clock, test_user_id):
    """Test streak bonus triggers the badge engine after commit"""
    store.completed_bookings[test_user_id] = 1
    service = container.streak_service
    for _ in range(7):
        await service.record_activity(test_user_id)
        clock.advance(hours=24)

    assert (test_user_id, "FIRST_BOOKING") in store.badges
    assert store.accounts[test_user_id]["total_xp"] == 10 + 10


@pytest.mark.asyncio
async def test_record_activity_badge_check_failure_keeps_bonus(container, store, clock, test_user_id):
    """Test a failing badge check after the bonus commit does not fail the activity"""
    store.completed_bookings[test_user_id] = 1
    service = container.streak_service
    for _ in range(6):
        await service.record_activity(test_user_id)
        clock.advance(hours=24)

    store.fail_on.add("get_user_badges")
    result = await service.record_activity(test_user_id)

    assert result.current_streak == 7
    assert result.xp_awarded == 10
    assert store.accounts[test_user_id]["total_xp"] == 10
    assert (test_user_id, "FIRST_BOOKING") not in store.badges


@pytest.mark.asyncio
async def test_reset_expired_streaks_only_touches_expired(container, store, clock):
    """Test sweep zeroes exactly the accounts past the window"""
    store.seed_account("fresh", current_streak=4, longest_streak=4,
                       last_activity_at=clock.now - timedelta(hours=10))
    store.seed_account("boundary", current_streak=2, longest_streak=2,
                       last_activity_at=clock.now - timedelta(hours=48))
    store.seed_account("stale-1", current_streak=6, longest_streak=9,
                       last_activity_at=clock.now - timedelta(hours=49))
    store.seed_account("stale-2", current_streak=1, longest_streak=1,
                       last_activity_at=clock.now - timedelta(days=30))
    store.seed_account("idle", current_streak=0, longest_streak=3,
                       last_activity_at=clock.now - timedelta(days=30))

    count = await container.streak_service.reset_expired_streaks()

    assert count == 2
    assert store.accounts["fresh"]["current_streak"] == 4
    assert store.accounts["boundary"]["current_streak"] == 2
    assert store.accounts["stale-1"]["current_streak"] == 0
    assert store.accounts["stale-1"]["longest_streak"] == 9
    assert store.accounts["stale-2"]["current_streak"] == 0


@pytest.mark.asyncio
async def test_reset_expired_streaks_is_idempotent(container, store, clock):
    """Test running the sweep twice resets nothing the second time"""
    store.seed_account("stale", current_streak=6, last_activity_at=clock.now - timedelta(days=3))

    assert await container.streak_service.reset_expired_streaks() == 1
    assert await container.streak_service.reset_expired_streaks() == 0


@pytest.mark.asyncio
async def test_get_user_streak_unknown_user(container):
    """Test defaults for a user without activity"""
    info = await container.streak_service.get_user_streak("nobody")

    assert info.current_streak == 0
    assert info.longest_streak == 0
    assert info.streak_type == "bookings"
    assert info.is_active is False


@pytest.mark.asyncio
async def test_get_user_streak_active(container, store, clock):
    """Test active streak is reported as stored"""
    last = clock.now - timedelta(hours=20)
    store.seed_account("u1", current_streak=5, longest_streak=7, last_activity_at=last)

    info = await container.streak_service.get_user_streak("u1")

    assert info.current_streak == 5
    assert info.longest_streak == 7
    assert info.last_activity_at == last
    assert info.is_active is True


@pytest.mark.asyncio
async def test_get_user_streak_expired_reads_zero(container, store, clock):
    """Test expired streak reads as 0 before the sweep has run"""
    store.seed_account("u1", current_streak=5, longest_streak=7,
                       last_activity_at=clock.now - timedelta(hours=72))

    info = await container.streak_service.get_user_streak("u1")

    assert info.current_streak == 0
    assert info.longest_streak == 7
    assert info.is_active is False
    assert store.accounts["u1"]["current_streak"] == 5  # Read does not write


@pytest.mark.asyncio
async def test_get_user_streak_recent_activity_is_active(container, store, clock):
    """Test activity inside the window marks the user active even with a zero streak"""
    store.seed_account("u1", current_streak=0, longest_streak=4,
                       last_activity_at=clock.now - timedelta(hours=5))

    info = await container.streak_service.get_user_streak("u1")

    assert info.is_active is True
    assert info.current_streak == 0
    assert info.longest_streak == 4


@pytest.mark.asyncio
async def test_get_streak_leaderboard(container, store, clock):
    """Test leaderboard ranks ongoing streaks"""
    store.seed_account("a", current_streak=3, longest_streak=3, last_activity_at=clock.now)
    store.seed_account("b", current_streak=9, longest_streak=12, last_activity_at=clock.now)
    store.seed_account("c", current_streak=0, longest_streak=20, last_activity_at=clock.now)

    board = await container.streak_service.get_streak_leaderboard()

    assert [(e.rank, e.user_id, e.current_streak) for e in board] == [(1, "b", 9), (2, "a", 3)]
    assert board[0].longest_streak == 12
