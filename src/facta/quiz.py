"""Quiz session engine: question flow, answer checking, timing and results."""
import logging
import threading
import uuid
from datetime import datetime
from enum import Enum

from facta.models import BoolAnswer, ChoiceAnswer, QuizMode, QuizQuestion, QuizResult, TextAnswer
from facta.streak import challenge_bonus, challenge_key
from facta.timer import Countdown

logger = logging.getLogger(__name__)

DEFAULT_SECONDS = 15
TIMER_SECONDS = {
    QuizMode.TRUE_FALSE: 12,
    QuizMode.BLITZ: 60,  # whole session, not per question
}


class Phase(str, Enum):
    OVERVIEW = "overview"
    PLAYING = "playing"
    RESULT = "result"
    HISTORY = "history"


class ChallengeStage(str, Enum):
    PLAYER1 = "player1"
    PLAYER2 = "player2"
    FINISHED = "finished"


def seconds_for(mode: QuizMode) -> int:
    return TIMER_SECONDS.get(mode, DEFAULT_SECONDS)


def is_correct(question: QuizQuestion, value) -> bool:
    """Check ``value`` against the question's answer key.

    Free text is compared trimmed and case-insensitively. A value of the
    wrong shape for the question (or None, as on a timeout) is wrong.
    """
    key = question.answer
    if isinstance(key, ChoiceAnswer):
        return isinstance(value, int) and not isinstance(value, bool) and value == key.correct_index
    if isinstance(key, BoolAnswer):
        return isinstance(value, bool) and value == key.correct
    if isinstance(key, TextAnswer):
        return isinstance(value, str) and value.strip().lower() == key.correct_text.strip().lower()
    raise TypeError(f"Unknown answer key: {key!r}")


class QuizSession:
    """One live quiz, driven by user actions and a one-second tick.

    ``provider`` supplies questions (``quiz_questions(mode)``), ``store``
    receives finished results and challenge bonuses. ``on_timer_start`` is
    called with a fresh token whenever the countdown (re)starts; whoever
    delivers ticks should pass that token back to :meth:`tick`.
    """

    def __init__(self, provider, store, clock=datetime.now, on_timer_start=None):
        self.provider = provider
        self.store = store
        self.clock = clock
        self.on_timer_start = on_timer_start
        self._countdown = Countdown()
        self._lock = threading.RLock()
        self.phase = Phase.OVERVIEW
        self.history: list[QuizResult] = []
        self._reset(None)

    def _reset(self, mode: QuizMode | None) -> None:
        self.mode = mode
        self.questions: list[QuizQuestion] = []
        self.index = 0
        self.score = 0
        self.streak = 0
        self.best_streak = 0
        self.time_left = seconds_for(mode) if mode else DEFAULT_SECONDS
        self.answered = False
        self.timed_out = False
        self.stage: ChallengeStage | None = None
        self.player_one_score = 0
        self.player_two_score = 0
        self.last_result: QuizResult | None = None
        self.bonus_xp = 0

    # --- derived values ---

    @property
    def current_question(self) -> QuizQuestion | None:
        if self.phase != Phase.PLAYING or self.index >= len(self.questions):
            return None
        return self.questions[self.index]

    @property
    def progress(self) -> float:
        if not self.questions:
            return 0.0
        return self.index / len(self.questions)

    @property
    def timer_running(self) -> bool:
        return self._countdown.running

    @property
    def timer_token(self) -> int | None:
        return self._countdown.token

    @property
    def winner(self) -> str | None:
        if self.stage != ChallengeStage.FINISHED:
            return None
        if self.player_one_score > self.player_two_score:
            return ChallengeStage.PLAYER1.value
        if self.player_two_score > self.player_one_score:
            return ChallengeStage.PLAYER2.value
        return "tie"

    # --- timer ---

    def _start_timer(self) -> None:
        token = self._countdown.start()
        if self.on_timer_start is not None:
            self.on_timer_start(token)

    def _cancel_timer(self) -> None:
        self._countdown.cancel()

    # --- operations ---

    def start(self, mode: QuizMode) -> None:
        with self._lock:
            self._cancel_timer()
            self._reset(mode)
            if mode == QuizMode.CHALLENGE:
                self.stage = ChallengeStage.PLAYER1
            self.questions = list(self.provider.quiz_questions(mode))
            self.phase = Phase.PLAYING
            logger.debug("Started %s quiz with %d questions", mode.value, len(self.questions))
            self._start_timer()

    def tick(self, token: int | None = None) -> bool:
        """Advance the clock by one second.

        Returns False when the tick was ignored: a stale token, no running
        countdown, or the session is not being played.
        """
        with self._lock:
            if token is None:
                token = self._countdown.token
            if token is None or not self._countdown.is_current(token):
                return False
            if self.phase != Phase.PLAYING:
                self._cancel_timer()
                return False

            self.time_left = max(0, self.time_left - 1)
            if self.time_left > 0:
                return True

            self._cancel_timer()
            if self.mode == QuizMode.BLITZ:
                attempted = self.index + (1 if self.answered else 0)
                self._finish(total=attempted)
            elif self.current_question is not None and not self.answered:
                self.streak = 0
                self.answered = True
                self.timed_out = True
            return True

    def answer(self, value) -> bool | None:
        """Submit an answer for the current question.

        Returns whether it was correct, or None when there is nothing to
        answer (no current question, or it was already answered or timed out).
        Raises ValueError for blank free-text input.
        """
        with self._lock:
            question = self.current_question
            if question is None or self.answered:
                return None
            if isinstance(question.answer, TextAnswer) and isinstance(value, str) and not value.strip():
                raise ValueError("Answer text must not be empty")

            correct = is_correct(question, value)
            if correct:
                self.score += 1
                self.streak += 1
                self.best_streak = max(self.best_streak, self.streak)
            else:
                self.streak = 0
            self.answered = True

            # Blitz keeps its session clock running across questions.
            if self.mode != QuizMode.BLITZ:
                self._cancel_timer()
            return correct

    def next(self) -> None:
        with self._lock:
            if self.phase != Phase.PLAYING:
                return
            self._advance()

    def _advance(self) -> None:
        if self.index + 1 < len(self.questions):
            self.index += 1
            self.answered = False
            self.timed_out = False
            if self.mode != QuizMode.BLITZ:
                self.time_left = seconds_for(self.mode)
                self._start_timer()
            return

        if self.mode == QuizMode.CHALLENGE:
            self._finish_challenge_pass()
        else:
            self._finish(total=len(self.questions))

    def _finish_challenge_pass(self) -> None:
        if self.stage == ChallengeStage.PLAYER1:
            self.player_one_score = self.score
            self.stage = ChallengeStage.PLAYER2
            self.index = 0
            self.score = 0
            self.streak = 0
            self.best_streak = 0
            self.answered = False
            self.timed_out = False
            self.time_left = seconds_for(self.mode)
            logger.debug("Player one scored %d, handing over", self.player_one_score)
            self._start_timer()
        else:
            self.player_two_score = self.score
            self.stage = ChallengeStage.FINISHED
            self.phase = Phase.RESULT
            self._cancel_timer()

    def _finish(self, total: int) -> None:
        self._cancel_timer()
        now = self.clock()
        result = QuizResult(
            id=str(uuid.uuid4()),
            date=now,
            mode=self.mode,
            score=self.score,
            total=total,
            best_streak=self.best_streak,
        )
        self.store.save_quiz_result(result)
        self.history.append(result)
        self.last_result = result

        if self.mode in (QuizMode.DAILY, QuizMode.WEEKLY):
            key = challenge_key(self.mode, now.date())
            if key in self.store.load_completed_challenges():
                logger.info("%s already completed, no bonus", self.mode.display_name)
            else:
                self.bonus_xp = challenge_bonus(self.mode, result.score, result.total)
                self.store.add_bonus_xp(self.bonus_xp)
                self.store.mark_challenge_completed(key)
                logger.info("%s complete: %d bonus XP", self.mode.display_name, self.bonus_xp)

        self.phase = Phase.RESULT
        logger.debug("Quiz finished %d/%d", result.score, result.total)

    def show_history(self) -> list[QuizResult]:
        with self._lock:
            self._cancel_timer()
            self.history = self.store.load_quiz_history()
            self.phase = Phase.HISTORY
            return self.history

    def back_to_overview(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._reset(None)
            self.phase = Phase.OVERVIEW
