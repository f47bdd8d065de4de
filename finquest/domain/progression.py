"""Progression ledger - turns quiz results and simulator use into coins, levels and completions"""

import logging
import math
import time
from dataclasses import replace
from datetime import date
from fractions import Fraction
from typing import Callable, List, Optional, Protocol, Tuple, TypeVar

from finquest.domain.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
    UnavailableError,
)
from finquest.domain.leaderboard import rank
from finquest.domain.models import LessonSpec, QuizOutcome, QuizRecord, RankedEntry, UserProgress
from finquest.utils.clock import Clock, SystemClock, is_previous_day

logger = logging.getLogger(__name__)

PASS_THRESHOLD = Fraction(7, 10)
COINS_PER_LEVEL = 100
DEFAULT_SIMULATION_BONUS = 25
DEFAULT_DISPLAY_NAME = "Student"

T = TypeVar("T")


class LessonCatalog(Protocol):
    """Lookup of lesson rewards, keyed by stable lesson id"""

    def lookup_lesson(self, lesson_id: str) -> LessonSpec:
        """Raises NotFoundError for unknown lessons"""
        ...


class ProgressStore(Protocol):
    """
    Persistence provider for progression state.

    compare_and_set_user_progress must write only when the stored version
    still equals expected_version, raising ConflictError otherwise, and return
    the stored value with its new version.
    """

    def get_user_progress(self, user_id: str) -> Optional[UserProgress]:
        ...

    def create_user_progress(self, user_id: str, initial: UserProgress) -> Optional[UserProgress]:
        """Returns None when a record for user_id already exists"""
        ...

    def compare_and_set_user_progress(
        self, user_id: str, expected_version: int, new_value: UserProgress
    ) -> UserProgress:
        ...

    def append_quiz_record(self, record: QuizRecord) -> None:
        ...

    def list_all_user_progress(self) -> List[UserProgress]:
        ...


def level_for_coins(total_coins: int) -> int:
    """Level 1 at 0-99 coins, level 2 at 100-199, ..."""
    return total_coins // COINS_PER_LEVEL + 1


def next_streak(progress: UserProgress, today: date) -> int:
    """Consecutive-day activity streak after being active `today`"""
    last = progress.last_active_date
    if progress.current_streak == 0 or last is None:
        return 1
    if last == today:
        return progress.current_streak
    if is_previous_day(last, today):
        return progress.current_streak + 1
    return 1


def validate_score(score: int, total_questions: int) -> Fraction:
    """Score ratio as an exact fraction"""
    if total_questions <= 0:
        raise InvalidArgumentError(f"total_questions must be positive, got {total_questions}")
    if score < 0 or score > total_questions:
        raise InvalidArgumentError(f"score must be within [0, {total_questions}], got {score}")
    return Fraction(score, total_questions)


def require_user(user_id: Optional[str]) -> str:
    """The caller's user id; UnauthenticatedError when there is none"""
    if not user_id:
        raise UnauthenticatedError("Not authenticated")
    return user_id


class ProgressionLedger:
    """
    Authoritative owner of per-user progress.

    Every mutation is an optimistic read-decide-write against a versioned
    record: the decision is recomputed from a fresh read whenever the store
    reports a conflicting concurrent write, up to max_retries attempts.
    """

    def __init__(
        self,
        store: ProgressStore,
        catalog: LessonCatalog,
        clock: Clock | None = None,
        max_retries: int = 5,
        backoff_base: float = 0.05,
        simulation_bonus: int = DEFAULT_SIMULATION_BONUS,
    ):
        self.store = store
        self.catalog = catalog
        self.clock = clock or SystemClock()
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.simulation_bonus = simulation_bonus

    def get_progress(self, user_id: str) -> Optional[UserProgress]:
        """Current progress, None if the user never interacted"""
        return self.store.get_user_progress(user_id)

    def ensure_progress(self, user_id: Optional[str], display_name: str | None = None) -> UserProgress:
        """Create the user's progress record if missing; idempotent"""
        user_id = require_user(user_id)
        stored, _ = self._transact(user_id, lambda current: (None, None), display_name=display_name)
        return stored

    def rename(self, user_id: Optional[str], display_name: str) -> UserProgress:
        """Change the display name of an existing profile"""
        user_id = require_user(user_id)
        name = (display_name or "").strip()
        if not name:
            raise InvalidArgumentError("display_name must not be blank")

        stored, _ = self._transact(
            user_id,
            lambda current: (replace(current, display_name=name), None),
            create_missing=False,
        )
        return stored

    def record_quiz_result(
        self,
        user_id: Optional[str],
        lesson_id: str,
        score: int,
        total_questions: int,
    ) -> QuizOutcome:
        """
        Record a quiz submission and award the lesson's coins on its first pass.

        Coins are granted once per (user, lesson): a retake after completion
        earns nothing, whatever its score. The attempt itself is always
        appended to the audit trail.

        Raises:
            InvalidArgumentError: total_questions <= 0 or score out of range
            NotFoundError: unknown lesson or no authenticated user
            UnavailableError: persistence failure or retries exhausted
        """
        user_id = require_user(user_id)
        ratio = validate_score(score, total_questions)
        lesson = self.catalog.lookup_lesson(lesson_id)
        passed = ratio >= PASS_THRESHOLD
        today = self.clock.today()

        def decide(current: UserProgress) -> Tuple[Optional[UserProgress], QuizOutcome]:
            was_already_completed = lesson_id in current.completed_lesson_ids
            if was_already_completed or not passed:
                return None, QuizOutcome(passed=passed, coins_earned=0, is_new_completion=False)

            coins_earned = math.floor(lesson.coin_reward * ratio)
            total_coins = current.total_coins + coins_earned
            updated = replace(
                current,
                total_coins=total_coins,
                level=level_for_coins(total_coins),
                completed_lesson_ids=current.completed_lesson_ids + (lesson_id,),
                current_streak=next_streak(current, today),
                last_active_date=today,
            )
            return updated, QuizOutcome(passed=True, coins_earned=coins_earned, is_new_completion=True)

        _, outcome = self._transact(user_id, decide)

        self.store.append_quiz_record(
            QuizRecord(
                user_id=user_id,
                lesson_id=lesson_id,
                score=score,
                total_questions=total_questions,
                submitted_at=self.clock.now(),
            )
        )
        return outcome

    def record_simulation_run(self, user_id: Optional[str], bonus: int | None = None) -> UserProgress:
        """Award the fixed simulator bonus; every call pays out"""
        user_id = require_user(user_id)
        bonus = self.simulation_bonus if bonus is None else bonus
        if bonus < 0:
            raise InvalidArgumentError(f"bonus must not be negative, got {bonus}")

        def decide(current: UserProgress) -> Tuple[UserProgress, None]:
            total_coins = current.total_coins + bonus
            return replace(current, total_coins=total_coins, level=level_for_coins(total_coins)), None

        stored, _ = self._transact(user_id, decide)
        return stored

    def leaderboard(self, limit: int) -> List[RankedEntry]:
        """Rank a fresh snapshot of every user's progress"""
        return rank(self.store.list_all_user_progress(), limit)

    def _ensure_exists(self, user_id: str, display_name: str | None) -> UserProgress:
        existing = self.store.get_user_progress(user_id)
        if existing is not None:
            return existing

        created = self.store.create_user_progress(
            user_id,
            UserProgress(
                user_id=user_id,
                display_name=display_name or DEFAULT_DISPLAY_NAME,
                last_active_date=self.clock.today(),
            ),
        )
        if created is not None:
            logger.info("Created progress record", extra={"user_id": user_id})
            return created

        # Lost the creation race; the winner's record is what we mutate
        existing = self.store.get_user_progress(user_id)
        if existing is None:
            raise ConflictError(f"Progress record for {user_id} vanished after concurrent create")
        return existing

    def _transact(
        self,
        user_id: str,
        decide: Callable[[UserProgress], Tuple[Optional[UserProgress], T]],
        display_name: str | None = None,
        create_missing: bool = True,
    ) -> Tuple[UserProgress, T]:
        """
        Run decide() against the latest progress and write its result conditionally.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base, ... between attempts
        - Retries only on ConflictError
        - Raises UnavailableError once max_retries attempts all conflicted
        """
        attempt = 0
        while True:
            try:
                if create_missing:
                    current = self._ensure_exists(user_id, display_name)
                else:
                    current = self.store.get_user_progress(user_id)
                    if current is None:
                        raise NotFoundError(f"Profile not found for {user_id}")

                updated, result = decide(current)
                if updated is None or updated == current:
                    return current, result

                stored = self.store.compare_and_set_user_progress(user_id, current.version, updated)
                return stored, result

            except ConflictError as e:
                attempt += 1
                if attempt >= self.max_retries:
                    logger.error(
                        "Progress update retries exhausted",
                        extra={"user_id": user_id, "attempts": attempt},
                    )
                    raise UnavailableError(
                        f"Could not update progress for {user_id} after {attempt} attempts"
                    ) from e

                logger.warning(
                    "Progress update conflicted, retrying",
                    extra={"user_id": user_id, "attempt": attempt},
                )
                time.sleep(self.backoff_base * (2 ** (attempt - 1)))
