"""GET /v1/leaderboard - users ranked by coins"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from finquest.api.v1.schemas import LeaderboardEntrySchema, LeaderboardResponse
from finquest.api.dependencies import get_ledger, get_request_id
from finquest.api.errors import to_http_error
from finquest.config import settings
from finquest.domain.exceptions import DomainException
from finquest.domain.progression import ProgressionLedger

router = APIRouter()


@router.get("/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard(
    request: Request,
    limit: Optional[int] = Query(None, description="Number of users to return"),
    ledger: ProgressionLedger = Depends(get_ledger),
):
    """
    Top users by total coins.

    Ties are ordered by user id so repeated calls return the same ranking.
    """
    try:
        entries = ledger.leaderboard(limit if limit is not None else settings.leaderboard_default_limit)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    return LeaderboardResponse(
        entries=[
            LeaderboardEntrySchema(
                rank=entry.rank,
                user_id=entry.progress.user_id,
                display_name=entry.progress.display_name,
                total_coins=entry.progress.total_coins,
                level=entry.progress.level,
            )
            for entry in entries
        ]
    )
