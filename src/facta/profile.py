"""Profile statistics, XP and badges, recomputed on every profile load."""
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from facta import levels
from facta.models import Badge, StreakData, UserStats
from facta.streak import claim_daily_reward, daily_reward, milestone_bonus, update_streak

logger = logging.getLogger(__name__)

XP_PER_FACT_READ = 10
XP_PER_QUIZ = 25
XP_PER_STREAK_DAY = 5

# id, name, description, icon, color, unlock test
BADGE_CATALOG = [
    ("first-fact", "First fact", "Read your first fact", "📖", "blue",
     lambda s: s.total_facts_read >= 1),
    ("fact-reader", "Fact reader", "Read 10 facts", "📚", "green",
     lambda s: s.total_facts_read >= 10),
    ("quiz-master", "Quiz master", "Play 5 quizzes", "🧠", "purple",
     lambda s: s.total_quizzes >= 5),
    ("perfectionist", "Perfectionist", "Score 100% on a quiz", "⭐", "gold",
     lambda s: s.avg_quiz_score >= 100),
    ("streak-master", "Streak master", "Reach a streak of 5", "🔥", "red",
     lambda s: s.best_quiz_streak >= 5),
    ("dedicated", "Dedicated", "Read 50 facts", "💎", "silver",
     lambda s: s.total_facts_read >= 50),
    ("quiz-champion", "Quiz champion", "Play 20 quizzes", "🏆", "gold",
     lambda s: s.total_quizzes >= 20),
    ("knowledge-seeker", "Knowledge seeker", "Read 100 facts", "🎓", "bronze",
     lambda s: s.total_facts_read >= 100),
]


@dataclass
class Profile:
    stats: UserStats
    badges: list[Badge]
    streak: StreakData
    daily_reward_xp: int = 0
    milestone_xp: int = 0
    unlocked: list[Badge] = field(default_factory=list)


def average_quiz_score(history: list) -> int:
    """Integer mean of per-quiz percentages, every quiz weighted equally."""
    if not history:
        return 0
    return sum(r.percentage for r in history) // len(history)


def favorite_category(favorites: list) -> str | None:
    counts = Counter(f.category for f in favorites)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def total_xp(facts_read: int, quizzes: int, streak_days: int, bonus_xp: int = 0) -> int:
    return (
        facts_read * XP_PER_FACT_READ
        + quizzes * XP_PER_QUIZ
        + streak_days * XP_PER_STREAK_DAY
        + bonus_xp
    )


def evaluate_badges(stats: UserStats) -> list[Badge]:
    badges = []
    for badge_id, name, description, icon, color, unlocked in BADGE_CATALOG:
        is_unlocked = bool(unlocked(stats))
        badges.append(Badge(
            id=badge_id,
            name=name,
            description=description,
            icon=icon,
            color=color,
            is_unlocked=is_unlocked,
            unlocked_date=stats.join_date if is_unlocked and badge_id == "first-fact" else None,
        ))
    return badges


def mark_fact_read(store, fact_id: str, now: datetime | None = None) -> StreakData:
    """Record a read fact; reading counts as activity for the streak."""
    now = now or datetime.now()
    store.mark_read(fact_id, now)
    record = update_streak(store.load_streak_data(), now)
    store.save_streak_data(record)
    return record


def load_profile(store, now: datetime | None = None, previous_level: int | None = None) -> Profile:
    """Recompute the profile from everything in the store.

    Brings the streak up to date, claims today's reward and any newly
    reached milestones (both at most once), and banks them as bonus XP.
    Without ``previous_level`` the level saved by the last load is used.
    """
    now = now or datetime.now()
    today = now.date()

    read_facts = store.load_read_facts()
    history = store.load_quiz_history()
    favorites = store.load_favorites()

    record = update_streak(store.load_streak_data(), now)
    current_streak = record.current_streak
    reward = daily_reward(record, today)
    if reward:
        claim_daily_reward(record, today)
    milestones = milestone_bonus(record, current_streak)
    store.save_streak_data(record)

    stored_bonus = store.load_bonus_xp()
    xp = total_xp(len(read_facts), len(history), current_streak, stored_bonus) + reward + milestones
    if reward or milestones:
        store.add_bonus_xp(reward + milestones)
        logger.info("Awarded %d daily and %d milestone XP", reward, milestones)

    if previous_level is None:
        previous_level = store.load_last_level()
    new_level = levels.level(xp)
    store.save_last_level(new_level)
    stats = UserStats(
        streak_days=current_streak,
        total_facts_read=len(read_facts),
        total_quizzes=len(history),
        avg_quiz_score=average_quiz_score(history),
        best_quiz_streak=max((r.best_streak for r in history), default=0),
        badges_unlocked=0,
        favorite_category=favorite_category(favorites),
        join_date=store.get_or_set_join_date(today),
        total_xp=xp,
        level=new_level,
        previous_level=previous_level,
        has_leveled_up=new_level > previous_level,
    )
    badges = evaluate_badges(stats)
    unlocked = [b for b in badges if b.is_unlocked]
    stats.badges_unlocked = len(unlocked)

    return Profile(
        stats=stats,
        badges=badges,
        streak=record,
        daily_reward_xp=reward,
        milestone_xp=milestones,
        unlocked=unlocked,
    )
