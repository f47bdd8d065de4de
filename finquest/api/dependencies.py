"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session
from finquest.config import settings
from finquest.domain.progression import ProgressionLedger
from finquest.infrastructure.database.repositories import LessonRepository, SqlProgressStore
from finquest.infrastructure.database.session import get_db
from finquest.utils.clock import Clock, SystemClock


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def current_user(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Authenticated user id forwarded by the auth layer, None when anonymous"""
    return x_user_id or None


def authenticated_user(user_id: Optional[str] = Depends(current_user)) -> str:
    """Reject anonymous callers on user-scoped routes"""
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


def get_clock() -> Clock:
    """Provide the wall clock"""
    return SystemClock()


def get_ledger(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)) -> ProgressionLedger:
    """Provide a progression ledger bound to the request's session"""
    return ProgressionLedger(
        store=SqlProgressStore(db),
        catalog=LessonRepository(db),
        clock=clock,
        max_retries=settings.ledger_max_retries,
        backoff_base=settings.ledger_backoff_base,
        simulation_bonus=settings.simulation_bonus_coins,
    )
