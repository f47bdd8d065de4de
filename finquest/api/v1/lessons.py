"""/v1/lessons - lesson catalog, quiz questions and quiz submissions"""

import time
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finquest.api.v1.schemas import (
    CategorySchema,
    LessonSchema,
    QuestionSchema,
    QuizAttemptRequest,
    QuizAttemptResponse,
    SeedResponse,
)
from finquest.api.dependencies import authenticated_user, current_user, get_ledger, get_request_id
from finquest.api.errors import to_http_error
from finquest.infrastructure.database.session import get_db
from finquest.infrastructure.database.repositories import LessonRepository, SqlProgressStore
from finquest.infrastructure.database.seed import seed_lessons
from finquest.infrastructure.observability.metrics import record_quiz_outcome
from finquest.infrastructure.observability.logging import log_quiz_result
from finquest.domain.exceptions import DomainException
from finquest.domain.progression import ProgressionLedger

router = APIRouter()


@router.get("/lessons", response_model=List[LessonSchema])
def list_lessons(
    request: Request,
    category: Optional[str] = Query(None, description="Only lessons in this category"),
    user_id: Optional[str] = Depends(current_user),
    db: Session = Depends(get_db),
):
    """Active lessons, flagged with whether the caller already completed them"""
    try:
        lessons = LessonRepository(db).list_lessons(category)
        progress = SqlProgressStore(db).get_user_progress(user_id) if user_id else None
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    completed = set(progress.completed_lesson_ids) if progress else set()

    return [
        LessonSchema(
            lesson_id=lesson.lesson_id,
            title=lesson.title,
            description=lesson.description,
            category=lesson.category,
            difficulty=lesson.difficulty,
            content=lesson.content,
            coin_reward=lesson.coin_reward,
            estimated_minutes=lesson.estimated_minutes,
            is_completed=lesson.lesson_id in completed,
        )
        for lesson in lessons
    ]


@router.get("/lessons/categories", response_model=List[CategorySchema])
def list_categories(request: Request, db: Session = Depends(get_db)):
    """Lesson count and coins on offer per category"""
    try:
        return [CategorySchema(**category) for category in LessonRepository(db).list_categories()]
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))


@router.post("/lessons/seed", response_model=SeedResponse)
def seed(
    request: Request,
    user_id: str = Depends(authenticated_user),
    db: Session = Depends(get_db),
):
    """Replace the catalog with the sample lessons"""
    try:
        created = seed_lessons(db)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))

    logging.info("Lesson catalog seeded", extra={"user_id": user_id, "lessons_created": created})
    return SeedResponse(lessons_created=created)


@router.get("/lessons/{lesson_id}/questions", response_model=List[QuestionSchema])
def get_questions(
    lesson_id: str,
    request: Request,
    user_id: str = Depends(authenticated_user),
    db: Session = Depends(get_db),
):
    """Quiz questions for a lesson"""
    try:
        questions = LessonRepository(db).get_questions(lesson_id)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    return [
        QuestionSchema(
            question=q.question,
            options=q.options,
            correct_answer=q.correct_answer,
            explanation=q.explanation,
            points=q.points,
        )
        for q in questions
    ]


@router.post("/lessons/{lesson_id}/attempts", response_model=QuizAttemptResponse)
def submit_attempt(
    lesson_id: str,
    request_body: QuizAttemptRequest,
    request: Request,
    user_id: str = Depends(authenticated_user),
    db: Session = Depends(get_db),
    ledger: ProgressionLedger = Depends(get_ledger),
):
    """
    Record a quiz attempt.

    Coins are awarded only on the first passing attempt (70% or better);
    retakes of a completed lesson earn nothing.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        outcome = ledger.record_quiz_result(
            user_id,
            lesson_id,
            request_body.score,
            request_body.total_questions,
        )
        db.commit()

    except DomainException as e:
        db.rollback()
        raise to_http_error(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_quiz_outcome(outcome.passed, outcome.is_new_completion, outcome.coins_earned)
    log_quiz_result(
        request_id,
        user_id,
        lesson_id,
        outcome.passed,
        outcome.coins_earned,
        outcome.is_new_completion,
        duration_ms,
    )

    return QuizAttemptResponse(
        passed=outcome.passed,
        coins_earned=outcome.coins_earned,
        is_new_completion=outcome.is_new_completion,
    )
