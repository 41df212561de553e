"""Daily and weekly goals with progress tracking."""
from facta.models import Goal

NEAR_COMPLETION = 0.8


def daily_goals() -> list[Goal]:
    return [
        Goal("daily-read", "Read 3 facts today", 3, True, 50, "📖"),
        Goal("daily-quiz", "Finish a quiz today", 1, True, 75, "🧠"),
        Goal("daily-favorites", "Save 2 favorites today", 2, True, 40, "❤️"),
        Goal("daily-score", "Score 80% on a quiz", 1, True, 100, "⭐"),
    ]


def weekly_goals() -> list[Goal]:
    return [
        Goal("weekly-read", "Read 20 facts this week", 20, False, 200, "📚"),
        Goal("weekly-quiz", "Finish 5 quizzes this week", 5, False, 300, "🧠"),
        Goal("weekly-streak", "Keep a 7-day streak", 7, False, 500, "🔥"),
        Goal("weekly-favorites", "Save 10 favorites this week", 10, False, 150, "❤️"),
        Goal("weekly-score", "Score 90% on 3 quizzes", 3, False, 400, "🌟"),
    ]


def progress_fraction(goal: Goal) -> float:
    if goal.target <= 0:
        return 0.0
    return min(goal.progress / goal.target, 1.0)


def is_near_completion(goal: Goal) -> bool:
    return progress_fraction(goal) >= NEAR_COMPLETION and not goal.is_completed


def increment_progress(goal: Goal, amount: int = 1) -> bool:
    """Add progress; returns True if this call completed the goal."""
    if goal.is_completed:
        return False
    goal.progress += amount
    if goal.progress >= goal.target:
        goal.is_completed = True
        return True
    return False


def mark_complete(goals: list[Goal], goal_id: str) -> Goal | None:
    for goal in goals:
        if goal.id == goal_id:
            goal.is_completed = True
            return goal
    return None


def _bump(goals: list[Goal], suffix: str, amount: int = 1) -> list[Goal]:
    completed = []
    for goal in goals:
        if goal.id.endswith(suffix) and increment_progress(goal, amount):
            completed.append(goal)
    return completed


def record_fact_read(goals: list[Goal]) -> list[Goal]:
    return _bump(goals, "-read")


def record_favorite_saved(goals: list[Goal]) -> list[Goal]:
    return _bump(goals, "-favorites")


def record_quiz_finished(goals: list[Goal], result) -> list[Goal]:
    """Count a finished quiz; score goals need 80% (daily) or 90% (weekly)."""
    completed = _bump(goals, "-quiz")
    for goal in goals:
        if not goal.id.endswith("-score"):
            continue
        needed = 80 if goal.is_daily else 90
        if result.percentage >= needed and increment_progress(goal):
            completed.append(goal)
    return completed


def record_streak(goals: list[Goal], streak_days: int) -> list[Goal]:
    completed = []
    for goal in goals:
        if goal.id.endswith("-streak") and not goal.is_completed:
            goal.progress = streak_days
            if goal.progress >= goal.target:
                goal.is_completed = True
                completed.append(goal)
    return completed
