"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Tuple


@dataclass(frozen=True)
class LoanQuery:
    """Loan parameters fed to the amortization calculator"""

    principal: float
    annual_rate_percent: float
    term_months: int


@dataclass(frozen=True)
class ScheduleEntry:
    """One period of an amortization schedule, whole currency units"""

    period_index: int
    installment: int
    principal_portion: int
    interest_portion: int
    remaining_balance: int


@dataclass(frozen=True)
class AmortizationResult:
    """EMI, totals and the first-year schedule for a loan (summary figures unrounded)"""

    installment_amount: float
    total_paid: float
    total_interest: float
    monthly_rate_percent: float
    schedule: List[ScheduleEntry]


@dataclass(frozen=True)
class LoanOffer:
    """Named loan offer to compare against others for the same principal"""

    label: str
    annual_rate_percent: float
    term_months: int


@dataclass(frozen=True)
class ComparedOffer:
    """Loan offer augmented with its cost and savings relative to the worst offer"""

    label: str
    annual_rate_percent: float
    term_months: int
    installment_amount: float
    total_paid: float
    total_interest: float
    savings_vs_worst: float


@dataclass(frozen=True)
class LessonSpec:
    """Lesson catalog entry as seen by the ledger"""

    lesson_id: str
    coin_reward: int


@dataclass(frozen=True)
class UserProgress:
    """Versioned per-user progression state (coins, level, completed lessons)"""

    user_id: str
    display_name: str
    total_coins: int = 0
    level: int = 1
    completed_lesson_ids: Tuple[str, ...] = ()
    current_streak: int = 0
    last_active_date: date | None = None
    version: int = 0


@dataclass(frozen=True)
class QuizRecord:
    """Immutable audit fact for a single quiz submission"""

    user_id: str
    lesson_id: str
    score: int
    total_questions: int
    submitted_at: datetime


@dataclass(frozen=True)
class QuizOutcome:
    """Result of recording a quiz submission"""

    passed: bool
    coins_earned: int
    is_new_completion: bool


@dataclass(frozen=True)
class RankedEntry:
    """Leaderboard row"""

    progress: UserProgress
    rank: int


@dataclass(frozen=True)
class LoanSimulation:
    """Saved simulator run"""

    user_id: str
    principal: float
    annual_rate_percent: float
    term_months: int
    installment_amount: int
    total_paid: int
    total_interest: int
    simulation_type: str
    created_at: datetime | None = None
    simulation_id: str | None = None


@dataclass
class ProgressStats:
    """Aggregate profile statistics shown next to a user's progress"""

    total_lessons: int
    completed_lessons: int
    completion_rate: int
    total_quizzes: int
    average_score: int
    total_simulations: int
