"""Bundled facts and quiz questions."""
import json
import random
from functools import lru_cache
from pathlib import Path

from facta.models import Fact, QuizMode, QuizQuestion

CONTENT_DIR = Path(__file__).parent / "content"

RECAP_COUNT = 5
TRUE_FALSE_COUNT = 10
IMAGE_COUNT = 5
FILL_BLANK_COUNT = 5
CHALLENGE_COUNT = 5
BLITZ_POOL_SIZE = 50


@lru_cache(maxsize=None)
def load_facts() -> tuple:
    data = json.loads((CONTENT_DIR / "facts.json").read_text(encoding="utf-8"))
    return tuple(Fact.from_dict(f) for f in data["facts"])


@lru_cache(maxsize=None)
def load_question_pools() -> dict:
    """Question pools keyed by the mode they were written for."""
    data = json.loads((CONTENT_DIR / "questions.json").read_text(encoding="utf-8"))
    return {
        QuizMode(name): tuple(QuizQuestion.from_dict(q) for q in questions)
        for name, questions in data.items()
    }


def _sample(pool, count: int, rng: random.Random) -> list:
    return rng.sample(list(pool), min(count, len(pool)))


def daily_fact() -> Fact:
    return load_facts()[0]


def discovery_facts(rng: random.Random | None = None) -> list[Fact]:
    rng = rng or random.Random()
    facts = list(load_facts()[1:])
    rng.shuffle(facts)
    return facts


def quiz_questions(mode: QuizMode, rng: random.Random | None = None) -> list[QuizQuestion]:
    """Shuffled question set sized for the given mode."""
    rng = rng or random.Random()
    pools = load_question_pools()
    true_false = pools.get(QuizMode.TRUE_FALSE, ())
    recap = pools.get(QuizMode.RECAP, ())

    if mode == QuizMode.TRUE_FALSE:
        return _sample(true_false, TRUE_FALSE_COUNT, rng)
    if mode == QuizMode.RECAP:
        return _sample(recap, RECAP_COUNT, rng)
    if mode == QuizMode.IMAGE:
        return _sample(pools.get(QuizMode.IMAGE, ()), IMAGE_COUNT, rng)
    if mode == QuizMode.FILL_BLANK:
        return _sample(pools.get(QuizMode.FILL_BLANK, ()), FILL_BLANK_COUNT, rng)
    if mode == QuizMode.CHALLENGE:
        return _sample(recap, CHALLENGE_COUNT, rng)
    if mode == QuizMode.BLITZ:
        everything = [q for pool in pools.values() for q in pool]
        return _sample(everything, BLITZ_POOL_SIZE, rng)
    if mode == QuizMode.DAILY:
        questions = _sample(true_false, 2, rng) + _sample(recap, 1, rng)
    else:
        # weekly
        questions = _sample(true_false, 6, rng) + _sample(recap, 4, rng)
    rng.shuffle(questions)
    return questions


class ContentProvider:
    """Content source handed to a quiz session."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def daily_fact(self) -> Fact:
        return daily_fact()

    def discovery_facts(self) -> list[Fact]:
        return discovery_facts(self.rng)

    def quiz_questions(self, mode: QuizMode) -> list[QuizQuestion]:
        return quiz_questions(mode, self.rng)


def filter_favorites(favorites: list[Fact], query: str = "", category: str | None = None) -> list[Fact]:
    """Favorites matching a case-insensitive text query and an optional category."""
    needle = query.strip().lower()
    matches = []
    for fact in favorites:
        if category and fact.category != category:
            continue
        if needle and needle not in fact.title.lower() and needle not in fact.content.lower():
            continue
        matches.append(fact)
    return matches
