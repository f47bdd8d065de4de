"""Unit tests for the progression ledger state machine"""

import pytest
from finquest.domain.exceptions import InvalidArgumentError, NotFoundError, UnauthenticatedError
from finquest.domain.progression import (
    DEFAULT_DISPLAY_NAME,
    ProgressionLedger,
    level_for_coins,
)


def test_first_pass_awards_coins_and_retake_awards_nothing(ledger, store):
    """Passing at exactly 70% completes the lesson; a perfect retake earns nothing"""
    first = ledger.record_quiz_result("alice", "money-basics", 7, 10)

    assert first.passed is True
    assert first.is_new_completion is True
    assert first.coins_earned == 35  # floor(50 * 0.7)

    retake = ledger.record_quiz_result("alice", "money-basics", 10, 10)

    assert retake.passed is True
    assert retake.is_new_completion is False
    assert retake.coins_earned == 0

    progress = store.get_user_progress("alice")
    assert progress.total_coins == 35
    assert progress.completed_lesson_ids == ("money-basics",)


def test_failed_attempt_changes_nothing(ledger, store):
    """60% is below the pass mark"""
    outcome = ledger.record_quiz_result("bob", "understanding-interest", 6, 10)

    assert outcome.passed is False
    assert outcome.is_new_completion is False
    assert outcome.coins_earned == 0

    progress = store.get_user_progress("bob")
    assert progress.total_coins == 0
    assert progress.completed_lesson_ids == ()


def test_fail_then_pass_awards_on_first_pass(ledger):
    """A lesson failed first still pays out on the first passing attempt"""
    assert ledger.record_quiz_result("carol", "understanding-interest", 5, 10).coins_earned == 0

    outcome = ledger.record_quiz_result("carol", "understanding-interest", 8, 10)

    assert outcome.passed is True
    assert outcome.is_new_completion is True
    assert outcome.coins_earned == 80


def test_failed_retake_after_completion(ledger, store):
    """Failing a completed lesson keeps it completed and earns nothing"""
    ledger.record_quiz_result("dave", "money-basics", 10, 10)
    outcome = ledger.record_quiz_result("dave", "money-basics", 1, 10)

    assert outcome.passed is False
    assert outcome.is_new_completion is False
    assert outcome.coins_earned == 0
    assert store.get_user_progress("dave").completed_lesson_ids == ("money-basics",)


def test_coins_floor_fractional_reward(ledger):
    """Reward scales with the score ratio and is floored"""
    # floor(125 * 2/3) = 83
    assert ledger.record_quiz_result("erin", "loans-and-emi", 2, 3).coins_earned == 83


def test_level_tracks_coins(ledger, store):
    """level == coins // 100 + 1 after every mutation"""
    ledger.record_quiz_result("frank", "loans-and-emi", 10, 10)
    progress = store.get_user_progress("frank")
    assert (progress.total_coins, progress.level) == (125, 2)

    ledger.record_quiz_result("frank", "understanding-interest", 10, 10)
    ledger.record_simulation_run("frank")
    progress = store.get_user_progress("frank")
    assert (progress.total_coins, progress.level) == (250, 3)
    assert progress.level == level_for_coins(progress.total_coins)


def test_completed_lessons_keep_insertion_order(ledger, store):
    """Completions are listed in the order they happened"""
    for lesson_id in ("loans-and-emi", "money-basics", "understanding-interest"):
        ledger.record_quiz_result("gina", lesson_id, 9, 10)

    assert store.get_user_progress("gina").completed_lesson_ids == (
        "loans-and-emi",
        "money-basics",
        "understanding-interest",
    )


def test_every_attempt_is_audited(ledger, store, clock):
    """Quiz records are appended whatever the outcome"""
    ledger.record_quiz_result("hank", "money-basics", 2, 10)
    ledger.record_quiz_result("hank", "money-basics", 9, 10)
    ledger.record_quiz_result("hank", "money-basics", 10, 10)

    assert [(r.score, r.total_questions) for r in store.quiz_records] == [(2, 10), (9, 10), (10, 10)]
    assert all(r.user_id == "hank" and r.lesson_id == "money-basics" for r in store.quiz_records)
    assert all(r.submitted_at == clock.now() for r in store.quiz_records)


@pytest.mark.parametrize("score,total", [(1, 0), (0, -3), (-1, 10), (11, 10)])
def test_invalid_scores_rejected_before_any_change(ledger, store, score, total):
    """Malformed scores never touch state"""
    with pytest.raises(InvalidArgumentError):
        ledger.record_quiz_result("ivan", "money-basics", score, total)

    assert store.progress == {}
    assert store.quiz_records == []


def test_unknown_lesson(ledger, store):
    """Unknown lessons are NotFound and leave no trace"""
    with pytest.raises(NotFoundError):
        ledger.record_quiz_result("judy", "no-such-lesson", 5, 5)

    assert store.progress == {}
    assert store.quiz_records == []


@pytest.mark.parametrize("user_id", [None, ""])
def test_anonymous_mutations_rejected(ledger, user_id):
    """Mutating calls need an authenticated user"""
    with pytest.raises(UnauthenticatedError):
        ledger.record_quiz_result(user_id, "money-basics", 10, 10)
    with pytest.raises(NotFoundError):
        ledger.record_simulation_run(user_id)


def test_simulation_run_is_repeatable(ledger):
    """Every simulator run pays the bonus"""
    for _ in range(3):
        progress = ledger.record_simulation_run("kim")

    assert progress.total_coins == 75
    assert progress.level == 1
    assert progress.completed_lesson_ids == ()


def test_simulation_run_crosses_level(store, catalog, clock):
    """A configured bonus can push the user to the next level"""
    ledger = ProgressionLedger(store, catalog, clock=clock, backoff_base=0.0, simulation_bonus=60)
    ledger.record_simulation_run("lee")
    progress = ledger.record_simulation_run("lee")

    assert (progress.total_coins, progress.level) == (120, 2)


def test_get_progress_before_first_interaction(ledger):
    """No record until the user does something"""
    assert ledger.get_progress("nobody") is None


def test_ensure_progress_is_idempotent(ledger, store, clock):
    """Creating twice yields one record with initial values"""
    first = ledger.ensure_progress("mia", "Mia")
    second = ledger.ensure_progress("mia", "Someone Else")

    assert first == second
    assert len(store.progress) == 1
    assert first.display_name == "Mia"
    assert (first.total_coins, first.level, first.completed_lesson_ids) == (0, 1, ())
    assert first.last_active_date == clock.today()


def test_lazily_created_profile_gets_default_name(ledger):
    ledger.record_quiz_result("ned", "money-basics", 1, 10)
    assert ledger.get_progress("ned").display_name == DEFAULT_DISPLAY_NAME


def test_rename(ledger):
    """Display name changes without touching progression"""
    ledger.record_quiz_result("olga", "money-basics", 10, 10)
    renamed = ledger.rename("olga", "  Olga P.  ")

    assert renamed.display_name == "Olga P."
    assert renamed.total_coins == 50


def test_rename_requires_existing_profile(ledger):
    with pytest.raises(NotFoundError):
        ledger.rename("pat", "Pat")


def test_rename_rejects_blank_name(ledger):
    ledger.ensure_progress("quinn")
    with pytest.raises(InvalidArgumentError):
        ledger.rename("quinn", "   ")


def test_streak_follows_consecutive_active_days(ledger, store, clock):
    """Completions on consecutive days extend the streak, a gap resets it"""
    ledger.record_quiz_result("rita", "money-basics", 10, 10)
    assert store.get_user_progress("rita").current_streak == 1

    clock.advance(days=1)
    ledger.record_quiz_result("rita", "understanding-interest", 10, 10)
    progress = store.get_user_progress("rita")
    assert progress.current_streak == 2
    assert progress.last_active_date == clock.today()

    clock.advance(days=3)
    ledger.record_quiz_result("rita", "loans-and-emi", 10, 10)
    assert store.get_user_progress("rita").current_streak == 1


def test_retake_does_not_touch_activity(ledger, store, clock):
    """Only new completions move last_active_date"""
    ledger.record_quiz_result("sam", "money-basics", 10, 10)
    completed_on = clock.today()
    clock.advance(days=1)
    ledger.record_quiz_result("sam", "money-basics", 10, 10)

    progress = store.get_user_progress("sam")
    assert progress.last_active_date == completed_on
    assert progress.current_streak == 1


def test_leaderboard_reads_fresh_snapshot(ledger):
    """Ranking reflects every recorded mutation"""
    ledger.record_quiz_result("tom", "loans-and-emi", 10, 10)
    ledger.record_quiz_result("uma", "money-basics", 10, 10)
    ledger.record_simulation_run("uma")

    entries = ledger.leaderboard(10)
    assert [(e.rank, e.progress.user_id, e.progress.total_coins) for e in entries] == [
        (1, "tom", 125),
        (2, "uma", 75),
    ]
