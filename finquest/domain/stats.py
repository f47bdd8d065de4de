"""Profile statistics derived from progress and the quiz audit trail"""

from typing import Sequence
from finquest.utils.rounding import round_half_up
from finquest.domain.models import ProgressStats, QuizRecord, UserProgress


def summarize(
    progress: UserProgress,
    active_lesson_count: int,
    quiz_records: Sequence[QuizRecord],
    simulation_count: int,
) -> ProgressStats:
    """
    Completion rate and average quiz score, both as whole percentages.

    Both rates are 0 when there is nothing to divide by.
    """
    completed = len(progress.completed_lesson_ids)

    completion_rate = (
        round_half_up(completed / active_lesson_count * 100) if active_lesson_count > 0 else 0
    )

    if quiz_records:
        mean_ratio = sum(r.score / r.total_questions for r in quiz_records) / len(quiz_records)
        average_score = round_half_up(mean_ratio * 100)
    else:
        average_score = 0

    return ProgressStats(
        total_lessons=active_lesson_count,
        completed_lessons=completed,
        completion_rate=completion_rate,
        total_quizzes=len(quiz_records),
        average_score=average_score,
        total_simulations=simulation_count,
    )
