# tests/test_quiz.py
from datetime import datetime

import pytest

from facta.models import QuizMode
from facta.quiz import ChallengeStage, Phase, QuizSession, is_correct, seconds_for

FIXED_NOW = datetime(2026, 10, 19, 12, 0)


def make_session(store, provider):
    return QuizSession(provider, store, clock=lambda: FIXED_NOW)


def test_start_resets_and_plays(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(5)))
    session.start(QuizMode.RECAP)
    assert session.phase == Phase.PLAYING
    assert session.index == 0
    assert session.score == 0
    assert session.time_left == 15
    assert session.timer_running
    assert session.current_question.id == "r0"


def test_timer_durations_per_mode():
    assert seconds_for(QuizMode.TRUE_FALSE) == 12
    assert seconds_for(QuizMode.BLITZ) == 60
    assert seconds_for(QuizMode.RECAP) == 15
    assert seconds_for(QuizMode.CHALLENGE) == 15


def test_true_false_six_right_then_four_wrong(store, provider_for, tf_questions):
    session = make_session(store, provider_for(tf_questions(10, correct=True)))
    session.start(QuizMode.TRUE_FALSE)
    assert session.time_left == 12
    for i in range(10):
        session.answer(i < 6)
        session.next()
    assert session.phase == Phase.RESULT
    result = session.last_result
    assert result.score == 6
    assert result.total == 10
    assert result.best_streak == 6
    assert result.percentage == 60
    assert store.load_quiz_history() == [result]


def test_answer_cancels_timer_and_stale_tick_is_ignored(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(3)))
    session.start(QuizMode.RECAP)
    token = session.timer_token
    session.tick(token)
    assert session.time_left == 14
    session.answer(0)
    assert not session.timer_running
    assert session.tick(token) is False
    assert session.time_left == 14


def test_next_restarts_timer_with_new_token(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(3)))
    session.start(QuizMode.RECAP)
    first = session.timer_token
    session.tick()
    session.answer(1)
    session.next()
    assert session.index == 1
    assert session.time_left == 15
    assert session.timer_running
    assert session.timer_token != first
    assert session.tick(first) is False


def test_per_question_timeout_counts_as_wrong_without_advancing(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(3)))
    session.start(QuizMode.RECAP)
    session.answer(0)
    session.next()
    assert session.streak == 1
    for _ in range(15):
        session.tick()
    assert session.time_left == 0
    assert session.timed_out
    assert session.streak == 0
    assert session.index == 1
    assert session.phase == Phase.PLAYING
    assert not session.timer_running
    # Late answers are ignored, the clock never goes negative
    assert session.answer(0) is None
    assert session.tick() is False
    assert session.time_left == 0
    session.next()
    assert session.index == 2
    assert session.time_left == 15


def test_blitz_ends_after_sixty_ticks(store, provider_for, tf_questions):
    session = make_session(store, provider_for(tf_questions(30)))
    session.start(QuizMode.BLITZ)
    assert session.time_left == 60
    for _ in range(59):
        session.tick()
    assert session.phase == Phase.PLAYING
    session.tick()
    assert session.phase == Phase.RESULT
    assert session.last_result.total == 0
    assert session.last_result.percentage == 0
    assert not session.timer_running


def test_blitz_answer_keeps_clock_running(store, provider_for, tf_questions):
    session = make_session(store, provider_for(tf_questions(5)))
    session.start(QuizMode.BLITZ)
    session.tick()
    token = session.timer_token
    assert session.answer(True) is True
    assert session.index == 0
    assert session.timer_running
    session.next()
    assert session.index == 1
    assert session.time_left == 59
    assert session.timer_token == token


def test_blitz_timeout_counts_attempted_questions(store, provider_for, tf_questions):
    session = make_session(store, provider_for(tf_questions(30)))
    session.start(QuizMode.BLITZ)
    for value in (True, True):
        session.answer(value)
        session.next()
    session.answer(False)
    for _ in range(60):
        session.tick()
    result = session.last_result
    assert session.phase == Phase.RESULT
    assert result.score == 2
    assert result.total == 3
    assert result.best_streak == 2


def test_blitz_running_out_of_questions_finishes(store, provider_for, tf_questions):
    session = make_session(store, provider_for(tf_questions(2)))
    session.start(QuizMode.BLITZ)
    for _ in range(2):
        session.answer(True)
        session.next()
    assert session.phase == Phase.RESULT
    assert session.last_result.total == 2


def test_challenge_two_passes(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(5)))
    session.start(QuizMode.CHALLENGE)
    assert session.stage == ChallengeStage.PLAYER1

    for answer in (0, 0, 0, 1, 1):
        session.answer(answer)
        session.next()
    assert session.stage == ChallengeStage.PLAYER2
    assert session.phase == Phase.PLAYING
    assert session.player_one_score == 3
    assert session.score == 0
    assert session.index == 0
    assert session.streak == 0
    assert session.time_left == 15
    assert session.timer_running

    for answer in (0, 0, 1, 0, 0):
        session.answer(answer)
        session.next()
    assert session.stage == ChallengeStage.FINISHED
    assert session.phase == Phase.RESULT
    assert session.player_one_score == 3
    assert session.player_two_score == 4
    assert session.winner == "player2"
    assert not session.timer_running
    assert store.load_quiz_history() == []


def test_empty_question_set_gives_zero_result(store, provider_for):
    session = make_session(store, provider_for([]))
    session.start(QuizMode.RECAP)
    assert session.phase == Phase.PLAYING
    assert session.current_question is None
    assert session.progress == 0.0
    assert session.answer(0) is None
    session.next()
    assert session.phase == Phase.RESULT
    assert session.last_result.total == 0
    assert session.last_result.percentage == 0


def test_daily_challenge_awards_bonus(store, provider_for, tf_questions):
    session = make_session(store, provider_for(tf_questions(3)))
    session.start(QuizMode.DAILY)
    for _ in range(3):
        session.answer(True)
        session.next()
    assert session.phase == Phase.RESULT
    assert session.bonus_xp == 75
    assert store.load_bonus_xp() == 75
    assert "daily-2026-10-19" in store.load_completed_challenges()


def test_weekly_challenge_without_perfect_score(store, provider_for, tf_questions):
    session = make_session(store, provider_for(tf_questions(10)))
    session.start(QuizMode.WEEKLY)
    for i in range(10):
        session.answer(i != 0)
        session.next()
    assert session.bonus_xp == 200
    assert store.load_bonus_xp() == 200


def test_regular_mode_awards_no_bonus(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(1)))
    session.start(QuizMode.RECAP)
    session.answer(0)
    session.next()
    assert session.bonus_xp == 0
    assert store.load_bonus_xp() == 0


def test_restart_while_playing_fully_resets(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(5)))
    session.start(QuizMode.RECAP)
    session.answer(0)
    session.next()
    session.answer(0)
    old_token = session.timer_token
    session.start(QuizMode.RECAP)
    assert session.score == 0
    assert session.streak == 0
    assert session.index == 0
    assert session.time_left == 15
    assert session.tick(old_token) is False


def test_answer_only_counts_once(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(2)))
    session.start(QuizMode.RECAP)
    assert session.answer(0) is True
    assert session.answer(0) is None
    assert session.score == 1


def test_fill_blank_answers(store, provider_for, blank_question):
    session = make_session(store, provider_for([blank_question]))
    session.start(QuizMode.FILL_BLANK)
    with pytest.raises(ValueError):
        session.answer("   ")
    assert session.answer("  BERRIES ") is True
    assert session.score == 1


def test_is_correct_rejects_wrong_shapes(recap_questions, tf_questions, blank_question):
    choice = recap_questions(1)[0]
    boolean = tf_questions(1, correct=False)[0]
    assert is_correct(choice, 0)
    assert not is_correct(choice, True)  # bool is not an index
    assert not is_correct(choice, None)
    assert is_correct(boolean, False)
    assert not is_correct(boolean, 0)
    assert not is_correct(blank_question, 1)


def test_back_to_overview_cancels_timer(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(3)))
    session.start(QuizMode.RECAP)
    token = session.timer_token
    session.back_to_overview()
    assert session.phase == Phase.OVERVIEW
    assert not session.timer_running
    assert session.questions == []
    assert session.tick(token) is False


def test_show_history_loads_saved_results(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(1)))
    session.start(QuizMode.RECAP)
    session.answer(0)
    session.next()
    other = make_session(store, provider_for([]))
    history = other.show_history()
    assert other.phase == Phase.HISTORY
    assert len(history) == 1
    assert history[0].score == 1
    other.back_to_overview()
    assert other.phase == Phase.OVERVIEW


def test_progress_fraction(store, provider_for, recap_questions):
    session = make_session(store, provider_for(recap_questions(4)))
    session.start(QuizMode.RECAP)
    session.answer(0)
    session.next()
    assert session.progress == 0.25


def test_timer_start_callback_receives_live_token(store, provider_for, recap_questions):
    tokens = []
    session = QuizSession(provider_for(recap_questions(2)), store, on_timer_start=tokens.append)
    session.start(QuizMode.RECAP)
    session.answer(0)
    session.next()
    assert len(tokens) == 2
    assert tokens[-1] == session.timer_token
    assert session.tick(tokens[0]) is False
    assert session.tick(tokens[1]) is True


def test_daily_challenge_replay_same_day_awards_nothing(store, provider_for, tf_questions):
    for expected in (75, 0):
        session = make_session(store, provider_for(tf_questions(3)))
        session.start(QuizMode.DAILY)
        for _ in range(3):
            session.answer(True)
            session.next()
        assert session.bonus_xp == expected
    assert store.load_bonus_xp() == 75
    assert len(store.load_quiz_history()) == 2


def test_weekly_challenge_pays_once_per_week(store, provider_for, tf_questions):
    days = [datetime(2026, 10, 19, 9, 0), datetime(2026, 10, 25, 9, 0), datetime(2026, 10, 26, 9, 0)]
    bonuses = []
    for day in days:
        session = QuizSession(provider_for(tf_questions(2)), store, clock=lambda day=day: day)
        session.start(QuizMode.WEEKLY)
        for _ in range(2):
            session.answer(True)
            session.next()
        bonuses.append(session.bonus_xp)
    assert bonuses == [300, 0, 300]
