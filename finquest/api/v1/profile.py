"""/v1/profile - the caller's progression state and statistics"""

from typing import Optional
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from finquest.api.v1.schemas import (
    ProfileCreateRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    ProgressSchema,
    StatsSchema,
)
from finquest.api.dependencies import authenticated_user, get_ledger, get_request_id
from finquest.api.errors import to_http_error
from finquest.infrastructure.database.session import get_db
from finquest.infrastructure.database.repositories import LessonRepository, SimulationRepository, SqlProgressStore
from finquest.domain.exceptions import DomainException
from finquest.domain.models import UserProgress
from finquest.domain.progression import ProgressionLedger
from finquest.domain.stats import summarize

router = APIRouter()


def progress_schema(progress: UserProgress) -> ProgressSchema:
    return ProgressSchema(
        user_id=progress.user_id,
        display_name=progress.display_name,
        total_coins=progress.total_coins,
        level=progress.level,
        completed_lesson_ids=list(progress.completed_lesson_ids),
        current_streak=progress.current_streak,
        last_active_date=progress.last_active_date,
    )


@router.post("/profile", response_model=ProgressSchema)
def create_profile(
    request: Request,
    request_body: Optional[ProfileCreateRequest] = None,
    user_id: str = Depends(authenticated_user),
    db: Session = Depends(get_db),
    ledger: ProgressionLedger = Depends(get_ledger),
):
    """Create the caller's profile if it does not exist yet; returns the current one either way"""
    display_name = request_body.display_name if request_body else None
    try:
        progress = ledger.ensure_progress(user_id, display_name)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))

    return progress_schema(progress)


@router.get("/profile", response_model=Optional[ProfileResponse])
def get_profile(
    request: Request,
    user_id: str = Depends(authenticated_user),
    db: Session = Depends(get_db),
    ledger: ProgressionLedger = Depends(get_ledger),
):
    """
    Caller's progress with completion and quiz statistics.

    Returns null when the caller never interacted with the platform.
    """
    try:
        progress = ledger.get_progress(user_id)
        if progress is None:
            return None

        stats = summarize(
            progress,
            active_lesson_count=LessonRepository(db).count_active_lessons(),
            quiz_records=SqlProgressStore(db).list_quiz_records(user_id),
            simulation_count=SimulationRepository(db).count_by_user(user_id),
        )
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    return ProfileResponse(
        progress=progress_schema(progress),
        stats=StatsSchema(
            total_lessons=stats.total_lessons,
            completed_lessons=stats.completed_lessons,
            completion_rate=stats.completion_rate,
            total_quizzes=stats.total_quizzes,
            average_score=stats.average_score,
            total_simulations=stats.total_simulations,
        ),
    )


@router.patch("/profile", response_model=ProgressSchema)
def update_profile(
    request_body: ProfileUpdateRequest,
    request: Request,
    user_id: str = Depends(authenticated_user),
    db: Session = Depends(get_db),
    ledger: ProgressionLedger = Depends(get_ledger),
):
    """Change the caller's display name"""
    try:
        progress = ledger.rename(user_id, request_body.display_name)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_error(e, get_request_id(request))

    return progress_schema(progress)
