"""Daily streak tracking and the XP rewards tied to it."""
import logging
from dataclasses import replace
from datetime import date, datetime

from facta.models import QuizMode, StreakData

logger = logging.getLogger(__name__)

DAILY_REWARD_BASE = 10
DAILY_REWARD_PER_STREAK_DAY = 2
DAILY_REWARD_STREAK_CAP = 20

MILESTONES = (3, 7, 14, 30, 50, 100)
XP_PER_MILESTONE_DAY = 5

CHALLENGE_BONUS = {QuizMode.DAILY: 50, QuizMode.WEEKLY: 200}
PERFECT_BONUS = {QuizMode.DAILY: 25, QuizMode.WEEKLY: 100}


def day_key(day: date) -> str:
    return day.isoformat()


def update_streak(record: StreakData, now: datetime) -> StreakData:
    """Return a copy of ``record`` brought up to date for ``now``.

    Same calendar day: counts unchanged. Next calendar day: streak grows by one.
    Anything else (a gap, a clock that went backwards, or no previous
    activity at all): a new streak of one day starting today.
    """
    updated = replace(
        record,
        daily_rewards_claimed=set(record.daily_rewards_claimed),
        streak_milestones=set(record.streak_milestones),
    )
    today = now.date()

    if record.last_active_date is None:
        gap = None
    else:
        gap = (today - record.last_active_date.date()).days

    if gap == 0:
        pass
    elif gap == 1:
        updated.current_streak += 1
        if updated.streak_start_date is None:
            updated.streak_start_date = record.last_active_date.date()
    else:
        updated.current_streak = 1
        updated.streak_start_date = today

    updated.longest_streak = max(updated.longest_streak, updated.current_streak)
    if record.last_active_date is None or now > record.last_active_date:
        updated.last_active_date = now
    return updated


def daily_reward(record: StreakData, today: date) -> int:
    """XP for the first visit of the day; 0 once the day has been claimed."""
    if day_key(today) in record.daily_rewards_claimed:
        return 0
    streak_bonus = min(record.current_streak * DAILY_REWARD_PER_STREAK_DAY, DAILY_REWARD_STREAK_CAP)
    return DAILY_REWARD_BASE + streak_bonus


def claim_daily_reward(record: StreakData, today: date) -> None:
    record.daily_rewards_claimed.add(day_key(today))


def milestone_bonus(record: StreakData, current_streak: int) -> int:
    """Award every milestone reached but not yet rewarded, marking each claimed."""
    total = 0
    for milestone in MILESTONES:
        if milestone <= current_streak and milestone not in record.streak_milestones:
            total += milestone * XP_PER_MILESTONE_DAY
            record.streak_milestones.add(milestone)
            logger.info("Streak milestone %d reached", milestone)
    return total


def challenge_bonus(mode: QuizMode, score: int, total: int) -> int:
    """Bonus XP for finishing a daily or weekly challenge; 0 for other modes."""
    if mode not in CHALLENGE_BONUS:
        return 0
    bonus = CHALLENGE_BONUS[mode]
    if total > 0 and score == total:
        bonus += PERFECT_BONUS[mode]
    return bonus


def challenge_key(mode: QuizMode, today: date) -> str:
    """Completion key: one per day for daily challenges, one per ISO week for weekly."""
    if mode == QuizMode.WEEKLY:
        year, week, _ = today.isocalendar()
        return f"weekly-{year}-W{week:02d}"
    return f"daily-{day_key(today)}"
