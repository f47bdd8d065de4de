"""Data access layer for progression state, lessons and simulator runs"""

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from finquest.infrastructure.database.models import (
    Lesson,
    LoanSimulationRow,
    QuizQuestion,
    QuizRecordRow,
    UserProgressRow,
)
from finquest.infrastructure.observability.metrics import ledger_conflict_counter
from finquest.domain.exceptions import ConflictError, NotFoundError, UnavailableError
from finquest.domain.models import LessonSpec, LoanSimulation, QuizRecord, UserProgress


@contextmanager
def translate_db_errors(operation: str) -> Iterator[None]:
    """Surface driver/connection failures as UnavailableError"""
    try:
        yield
    except SQLAlchemyError as e:
        logging.error(f"Database error during {operation}: {e}")
        raise UnavailableError(f"Persistence unavailable during {operation}") from e


def to_progress(row: UserProgressRow) -> UserProgress:
    return UserProgress(
        user_id=row.user_id,
        display_name=row.display_name,
        total_coins=row.total_coins,
        level=row.level,
        completed_lesson_ids=tuple(row.completed_lesson_ids or ()),
        current_streak=row.current_streak,
        last_active_date=row.last_active_date,
        version=row.version,
    )


class SqlProgressStore:
    """Optimistically-locked progress persistence on a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    def get_user_progress(self, user_id: str) -> Optional[UserProgress]:
        """Fetch progress, bypassing the identity map so retries see committed state"""
        with translate_db_errors("get_user_progress"):
            row = (
                self.db.query(UserProgressRow)
                .filter(UserProgressRow.user_id == user_id)
                .populate_existing()
                .first()
            )
        return to_progress(row) if row else None

    def create_user_progress(self, user_id: str, initial: UserProgress) -> Optional[UserProgress]:
        """Insert the first record for a user; None if another writer got there first"""
        row = UserProgressRow(
            user_id=user_id,
            display_name=initial.display_name,
            total_coins=initial.total_coins,
            level=initial.level,
            completed_lesson_ids=list(initial.completed_lesson_ids),
            current_streak=initial.current_streak,
            last_active_date=initial.last_active_date,
            version=0,
        )
        with translate_db_errors("create_user_progress"):
            try:
                # Savepoint keeps the rest of the request's transaction intact on a duplicate
                with self.db.begin_nested():
                    self.db.add(row)
            except IntegrityError:
                return None
        return to_progress(row)

    def compare_and_set_user_progress(
        self, user_id: str, expected_version: int, new_value: UserProgress
    ) -> UserProgress:
        """Conditional UPDATE on (user_id, version); zero matched rows means a lost race"""
        with translate_db_errors("compare_and_set_user_progress"):
            matched = (
                self.db.query(UserProgressRow)
                .filter(
                    UserProgressRow.user_id == user_id,
                    UserProgressRow.version == expected_version,
                )
                .update(
                    {
                        UserProgressRow.display_name: new_value.display_name,
                        UserProgressRow.total_coins: new_value.total_coins,
                        UserProgressRow.level: new_value.level,
                        UserProgressRow.completed_lesson_ids: list(new_value.completed_lesson_ids),
                        UserProgressRow.current_streak: new_value.current_streak,
                        UserProgressRow.last_active_date: new_value.last_active_date,
                        UserProgressRow.version: expected_version + 1,
                    },
                    synchronize_session=False,
                )
            )

        if matched == 0:
            ledger_conflict_counter.inc()
            raise ConflictError(f"Progress for {user_id} changed since version {expected_version}")

        return replace(new_value, user_id=user_id, version=expected_version + 1)

    def append_quiz_record(self, record: QuizRecord) -> None:
        """Append an immutable quiz submission"""
        with translate_db_errors("append_quiz_record"):
            self.db.add(
                QuizRecordRow(
                    user_id=record.user_id,
                    lesson_id=record.lesson_id,
                    score=record.score,
                    total_questions=record.total_questions,
                    submitted_at=record.submitted_at,
                )
            )
            self.db.flush()

    def list_all_user_progress(self) -> List[UserProgress]:
        """Snapshot of every user's progress"""
        with translate_db_errors("list_all_user_progress"):
            rows = self.db.query(UserProgressRow).populate_existing().all()
        return [to_progress(row) for row in rows]

    def list_quiz_records(self, user_id: str) -> List[QuizRecord]:
        """A user's quiz submissions, oldest first"""
        with translate_db_errors("list_quiz_records"):
            rows = (
                self.db.query(QuizRecordRow)
                .filter(QuizRecordRow.user_id == user_id)
                .order_by(QuizRecordRow.submitted_at)
                .all()
            )
        return [
            QuizRecord(
                user_id=r.user_id,
                lesson_id=r.lesson_id,
                score=r.score,
                total_questions=r.total_questions,
                submitted_at=r.submitted_at,
            )
            for r in rows
        ]


class LessonRepository:
    """Repository for the lesson catalog; also serves as the ledger's LessonCatalog"""

    def __init__(self, db: Session):
        self.db = db

    def lookup_lesson(self, lesson_id: str) -> LessonSpec:
        """Reward lookup for an active lesson"""
        lesson = self.get_lesson(lesson_id)
        return LessonSpec(lesson_id=lesson.lesson_id, coin_reward=lesson.coin_reward)

    def get_lesson(self, lesson_id: str) -> Lesson:
        with translate_db_errors("get_lesson"):
            lesson = (
                self.db.query(Lesson)
                .filter(Lesson.lesson_id == lesson_id, Lesson.is_active.is_(True))
                .first()
            )
        if not lesson:
            raise NotFoundError(f"Lesson not found: {lesson_id}")
        return lesson

    def list_lessons(self, category: str | None = None) -> List[Lesson]:
        """Active lessons, optionally within one category"""
        with translate_db_errors("list_lessons"):
            query = self.db.query(Lesson).filter(Lesson.is_active.is_(True))
            if category:
                query = query.filter(Lesson.category == category)
            return query.order_by(Lesson.coin_reward, Lesson.lesson_id).all()

    def count_active_lessons(self) -> int:
        with translate_db_errors("count_active_lessons"):
            return self.db.query(func.count(Lesson.lesson_id)).filter(Lesson.is_active.is_(True)).scalar()

    def list_categories(self) -> List[Dict[str, object]]:
        """Per-category lesson count and total coins on offer"""
        with translate_db_errors("list_categories"):
            rows = (
                self.db.query(Lesson.category, func.count(Lesson.lesson_id), func.sum(Lesson.coin_reward))
                .filter(Lesson.is_active.is_(True))
                .group_by(Lesson.category)
                .order_by(Lesson.category)
                .all()
            )
        return [
            {"name": category, "count": count, "total_coins": int(total or 0)}
            for category, count, total in rows
        ]

    def get_questions(self, lesson_id: str) -> List[QuizQuestion]:
        """Quiz questions in display order"""
        return list(self.get_lesson(lesson_id).questions)

    def replace_catalog(self, lessons: List[Lesson]) -> None:
        """Drop every lesson (and its questions) and insert `lessons`"""
        with translate_db_errors("replace_catalog"):
            for existing in self.db.query(Lesson).all():
                self.db.delete(existing)
            self.db.flush()
            self.db.add_all(lessons)
            self.db.flush()


class SimulationRepository:
    """Repository for saved loan simulator runs"""

    def __init__(self, db: Session):
        self.db = db

    def create_simulation(self, simulation: LoanSimulation) -> LoanSimulation:
        """Persist a simulator run"""
        row = LoanSimulationRow(
            user_id=simulation.user_id,
            principal=simulation.principal,
            annual_rate_percent=simulation.annual_rate_percent,
            term_months=simulation.term_months,
            installment_amount=simulation.installment_amount,
            total_paid=simulation.total_paid,
            total_interest=simulation.total_interest,
            simulation_type=simulation.simulation_type,
            created_at=simulation.created_at,
        )
        with translate_db_errors("create_simulation"):
            self.db.add(row)
            self.db.flush()  # Get ID without committing
        return replace(simulation, simulation_id=str(row.id))

    def get_simulations_by_user(self, user_id: str, limit: int = 10) -> List[LoanSimulation]:
        """Most recent runs for a user, newest first"""
        with translate_db_errors("get_simulations_by_user"):
            rows = (
                self.db.query(LoanSimulationRow)
                .filter(LoanSimulationRow.user_id == user_id)
                .order_by(LoanSimulationRow.created_at.desc())
                .limit(limit)
                .all()
            )
        return [
            LoanSimulation(
                user_id=r.user_id,
                principal=r.principal,
                annual_rate_percent=r.annual_rate_percent,
                term_months=r.term_months,
                installment_amount=r.installment_amount,
                total_paid=r.total_paid,
                total_interest=r.total_interest,
                simulation_type=r.simulation_type,
                created_at=r.created_at,
                simulation_id=str(r.id),
            )
            for r in rows
        ]

    def count_by_user(self, user_id: str) -> int:
        with translate_db_errors("count_by_user"):
            return (
                self.db.query(func.count(LoanSimulationRow.id))
                .filter(LoanSimulationRow.user_id == user_id)
                .scalar()
            )
