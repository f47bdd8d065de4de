"""Ranked view over a snapshot of every user's progress"""

from typing import Iterable, List
from finquest.domain.models import RankedEntry, UserProgress
from finquest.domain.exceptions import InvalidArgumentError


def rank(all_progress: Iterable[UserProgress], limit: int) -> List[RankedEntry]:
    """
    Order users by coins, highest first, and keep the top `limit`.

    Ties are broken by user_id ascending so the result does not depend on
    storage iteration order.
    """
    if limit <= 0:
        raise InvalidArgumentError(f"limit must be positive, got {limit}")

    ordered = sorted(all_progress, key=lambda p: (-p.total_coins, p.user_id))

    return [
        RankedEntry(progress=progress, rank=position)
        for position, progress in enumerate(ordered[:limit], start=1)
    ]
