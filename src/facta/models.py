"""Data classes for the facts and quiz domain model."""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


class QuizMode(str, Enum):
    RECAP = "recap"
    TRUE_FALSE = "true_false"
    IMAGE = "image"
    FILL_BLANK = "fill_blank"
    BLITZ = "blitz"
    DAILY = "daily"
    WEEKLY = "weekly"
    CHALLENGE = "challenge"

    @property
    def display_name(self) -> str:
        return _MODE_NAMES[self]


_MODE_NAMES = {
    QuizMode.RECAP: "Recap quiz",
    QuizMode.TRUE_FALSE: "True or false",
    QuizMode.IMAGE: "Picture quiz",
    QuizMode.FILL_BLANK: "Fill in the blank",
    QuizMode.BLITZ: "Blitz",
    QuizMode.DAILY: "Daily challenge",
    QuizMode.WEEKLY: "Weekly challenge",
    QuizMode.CHALLENGE: "Challenge a friend",
}


@dataclass(frozen=True)
class FactTag:
    emoji: str
    label: str


@dataclass(frozen=True)
class Fact:
    id: str
    title: str
    content: str
    category: str
    tags: tuple = ()
    read_time: Optional[int] = None  # seconds
    is_premium: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "tags": [{"emoji": t.emoji, "label": t.label} for t in self.tags],
            "read_time": self.read_time,
            "is_premium": self.is_premium,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Fact":
        return cls(
            id=data["id"],
            title=data["title"],
            content=data["content"],
            category=data["category"],
            tags=tuple(FactTag(t["emoji"], t["label"]) for t in data.get("tags", [])),
            read_time=data.get("read_time"),
            is_premium=data.get("is_premium", False),
        )


# Answer shapes. A question carries exactly one of these.

@dataclass(frozen=True)
class ChoiceAnswer:
    options: tuple
    correct_index: int
    image_name: Optional[str] = None


@dataclass(frozen=True)
class BoolAnswer:
    correct: bool


@dataclass(frozen=True)
class TextAnswer:
    correct_text: str


AnswerKey = Union[ChoiceAnswer, BoolAnswer, TextAnswer]


@dataclass(frozen=True)
class QuizQuestion:
    id: str
    mode: QuizMode
    question: str
    answer: AnswerKey
    explanation: str = ""
    category: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "QuizQuestion":
        if "options" in data:
            answer = ChoiceAnswer(
                options=tuple(data["options"]),
                correct_index=data["correct_index"],
                image_name=data.get("image_name"),
            )
        elif "correct_answer" in data:
            answer = BoolAnswer(correct=bool(data["correct_answer"]))
        else:
            answer = TextAnswer(correct_text=data["correct_text"])
        return cls(
            id=data["id"],
            mode=QuizMode(data["mode"]),
            question=data["question"],
            answer=answer,
            explanation=data.get("explanation", ""),
            category=data.get("category", ""),
        )


@dataclass(frozen=True)
class QuizResult:
    id: str
    date: datetime
    mode: QuizMode
    score: int
    total: int
    best_streak: int

    @property
    def percentage(self) -> int:
        if self.total == 0:
            return 0
        return int(self.score / self.total * 100)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "mode": self.mode.value,
            "score": self.score,
            "total": self.total,
            "best_streak": self.best_streak,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizResult":
        return cls(
            id=data["id"],
            date=datetime.fromisoformat(data["date"]),
            mode=QuizMode(data["mode"]),
            score=int(data["score"]),
            total=int(data["total"]),
            best_streak=int(data["best_streak"]),
        )


@dataclass
class StreakData:
    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[datetime] = None
    streak_start_date: Optional[date] = None
    daily_rewards_claimed: set = field(default_factory=set)  # "YYYY-MM-DD"
    streak_milestones: set = field(default_factory=set)

    def to_dict(self) -> dict:
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_active_date": self.last_active_date.isoformat() if self.last_active_date else None,
            "streak_start_date": self.streak_start_date.isoformat() if self.streak_start_date else None,
            "daily_rewards_claimed": sorted(self.daily_rewards_claimed),
            "streak_milestones": sorted(self.streak_milestones),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StreakData":
        last = data.get("last_active_date")
        start = data.get("streak_start_date")
        return cls(
            current_streak=int(data.get("current_streak", 0)),
            longest_streak=int(data.get("longest_streak", 0)),
            last_active_date=datetime.fromisoformat(last) if last else None,
            streak_start_date=date.fromisoformat(start) if start else None,
            daily_rewards_claimed=set(data.get("daily_rewards_claimed", [])),
            streak_milestones={int(m) for m in data.get("streak_milestones", [])},
        )


@dataclass
class UserSettings:
    daily_fact_notifications: bool = True
    quiz_reminders: bool = True
    theme: str = "system"
    language: str = "en"
    display_name: str = "Guest"
    avatar: str = "initials"

    def to_dict(self) -> dict:
        return {
            "daily_fact_notifications": self.daily_fact_notifications,
            "quiz_reminders": self.quiz_reminders,
            "theme": self.theme,
            "language": self.language,
            "display_name": self.display_name,
            "avatar": self.avatar,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserSettings":
        return cls(**{k: data[k] for k in cls().to_dict() if k in data})


@dataclass
class UserStats:
    streak_days: int
    total_facts_read: int
    total_quizzes: int
    avg_quiz_score: int
    best_quiz_streak: int
    badges_unlocked: int
    favorite_category: Optional[str]
    join_date: date
    total_xp: int = 0
    level: int = 1
    previous_level: int = 1
    has_leveled_up: bool = False


@dataclass
class Badge:
    id: str
    name: str
    description: str
    icon: str
    color: str
    is_unlocked: bool = False
    unlocked_date: Optional[date] = None


@dataclass
class Goal:
    id: str
    description: str
    target: int
    is_daily: bool
    reward_xp: int
    icon: str = ""
    progress: int = 0
    is_completed: bool = False
