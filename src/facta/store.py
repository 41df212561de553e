"""Progress store: favorites, read marks, quiz history, streak and settings.

Each collection lives under its own key as a single JSON document. Reads
that fail or find a corrupt record fall back to the empty/default value;
writes that fail are logged and dropped.
"""
import json
import logging
import sqlite3
from datetime import date, datetime

from facta.db import read_value, write_value
from facta.models import Fact, QuizResult, StreakData, UserSettings

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"
READ_FACTS_KEY = "read_facts"
QUIZ_HISTORY_KEY = "quiz_history"
STREAK_KEY = "streak_data"
SETTINGS_KEY = "user_settings"
BONUS_XP_KEY = "bonus_xp"
JOIN_DATE_KEY = "join_date"
ONBOARDING_KEY = "onboarding_complete"
REMINDERS_KEY = "reminders"
CHALLENGES_KEY = "completed_challenges"
LAST_LEVEL_KEY = "last_level"

_DECODE_ERRORS = (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError)


class ProgressStore:
    def __init__(self, db_path: str):
        self.db_path = db_path

    # --- raw access ---

    def _load(self, key: str, default, decode=lambda data: data):
        try:
            raw = read_value(self.db_path, key)
        except sqlite3.Error as e:
            logger.warning("Could not read %s: %s", key, e)
            return default
        if raw is None:
            return default
        try:
            return decode(json.loads(raw))
        except _DECODE_ERRORS as e:
            logger.warning("Ignoring corrupt %s record: %s", key, e)
            return default

    def _save(self, key: str, data) -> None:
        try:
            write_value(self.db_path, key, json.dumps(data), datetime.now().isoformat())
        except sqlite3.Error as e:
            logger.error("Could not save %s: %s", key, e)

    # --- favorites ---

    def load_favorites(self) -> list[Fact]:
        return self._load(FAVORITES_KEY, [], lambda data: [Fact.from_dict(d) for d in data])

    def save_favorite(self, fact: Fact) -> None:
        favorites = self.load_favorites()
        if any(f.id == fact.id for f in favorites):
            return
        favorites.append(fact)
        self._save(FAVORITES_KEY, [f.to_dict() for f in favorites])

    def remove_favorite(self, fact_id: str) -> None:
        favorites = [f for f in self.load_favorites() if f.id != fact_id]
        self._save(FAVORITES_KEY, [f.to_dict() for f in favorites])

    # --- read marks ---

    def load_read_facts(self) -> dict[str, datetime]:
        return self._load(
            READ_FACTS_KEY, {},
            lambda data: {k: datetime.fromisoformat(v) for k, v in data.items()},
        )

    def mark_read(self, fact_id: str, when: datetime | None = None) -> None:
        read = self.load_read_facts()
        read[fact_id] = when or datetime.now()
        self._save(READ_FACTS_KEY, {k: v.isoformat() for k, v in read.items()})

    # --- quiz history ---

    def load_quiz_history(self) -> list[QuizResult]:
        return self._load(QUIZ_HISTORY_KEY, [], lambda data: [QuizResult.from_dict(d) for d in data])

    def save_quiz_result(self, result: QuizResult) -> None:
        history = self.load_quiz_history()
        history.append(result)
        self._save(QUIZ_HISTORY_KEY, [r.to_dict() for r in history])

    # --- streak ---

    def load_streak_data(self) -> StreakData:
        return self._load(STREAK_KEY, StreakData(), StreakData.from_dict)

    def save_streak_data(self, record: StreakData) -> None:
        self._save(STREAK_KEY, record.to_dict())

    # --- settings ---

    def load_user_settings(self) -> UserSettings:
        return self._load(SETTINGS_KEY, UserSettings(), UserSettings.from_dict)

    def save_user_settings(self, settings: UserSettings) -> None:
        self._save(SETTINGS_KEY, settings.to_dict())

    def is_onboarding_complete(self) -> bool:
        return bool(self._load(ONBOARDING_KEY, False))

    def set_onboarding_complete(self, complete: bool = True) -> None:
        self._save(ONBOARDING_KEY, complete)

    # --- bonus XP, join date, challenge completions ---

    def load_bonus_xp(self) -> int:
        return self._load(BONUS_XP_KEY, 0, int)

    def add_bonus_xp(self, amount: int) -> int:
        total = self.load_bonus_xp() + amount
        self._save(BONUS_XP_KEY, total)
        return total

    def get_or_set_join_date(self, today: date) -> date:
        joined = self._load(JOIN_DATE_KEY, None, date.fromisoformat)
        if joined is None:
            joined = today
            self._save(JOIN_DATE_KEY, today.isoformat())
        return joined

    def load_last_level(self) -> int:
        return self._load(LAST_LEVEL_KEY, 1, int)

    def save_last_level(self, lvl: int) -> None:
        self._save(LAST_LEVEL_KEY, lvl)

    def load_completed_challenges(self) -> set[str]:
        return self._load(CHALLENGES_KEY, set(), set)

    def mark_challenge_completed(self, key: str) -> None:
        completed = self.load_completed_challenges()
        completed.add(key)
        self._save(CHALLENGES_KEY, sorted(completed))

    # --- reminders ---

    def load_reminders(self) -> dict[str, str]:
        return self._load(REMINDERS_KEY, {}, dict)

    def save_reminders(self, reminders: dict[str, str]) -> None:
        self._save(REMINDERS_KEY, reminders)
