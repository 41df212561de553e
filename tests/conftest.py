import pytest

from facta.db import init_db
from facta.models import BoolAnswer, ChoiceAnswer, QuizMode, QuizQuestion, TextAnswer
from facta.store import ProgressStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_facta.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    init_db(tmp_db)
    return ProgressStore(tmp_db)


class StubProvider:
    """Hands out the same question list for every mode."""

    def __init__(self, questions):
        self.questions = list(questions)
        self.requested = []

    def quiz_questions(self, mode):
        self.requested.append(mode)
        return list(self.questions)


@pytest.fixture
def provider_for():
    return StubProvider


@pytest.fixture
def tf_questions():
    def make(count, correct=True):
        return [
            QuizQuestion(id=f"tf{i}", mode=QuizMode.TRUE_FALSE, question=f"Statement {i}",
                         answer=BoolAnswer(correct), category="Science")
            for i in range(count)
        ]
    return make


@pytest.fixture
def recap_questions():
    def make(count):
        return [
            QuizQuestion(id=f"r{i}", mode=QuizMode.RECAP, question=f"Question {i}",
                         answer=ChoiceAnswer(options=("A", "B", "C", "D"), correct_index=0),
                         explanation="A is right.", category="History")
            for i in range(count)
        ]
    return make


@pytest.fixture
def blank_question():
    return QuizQuestion(id="fb1", mode=QuizMode.FILL_BLANK, question="Bananas are _____",
                        answer=TextAnswer("berries"), category="Botany")
