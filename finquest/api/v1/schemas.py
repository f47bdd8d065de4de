"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from typing import List, Literal, Optional


class LoanRequest(BaseModel):
    """Request body for POST /v1/simulator/calculate"""

    principal: float = Field(..., description="Loan amount in whole currency units")
    annual_rate_percent: float = Field(..., description="Nominal annual interest rate, e.g. 8.5")
    term_months: int = Field(..., description="Number of monthly installments")


class ScheduleEntrySchema(BaseModel):
    """Single period of the amortization schedule"""

    period_index: int
    installment: int
    principal_portion: int
    interest_portion: int
    remaining_balance: int


class LoanResponse(BaseModel):
    """Response for POST /v1/simulator/calculate"""

    installment_amount: int
    total_paid: int
    total_interest: int
    monthly_rate_percent: float
    schedule: List[ScheduleEntrySchema]


class OfferSchema(BaseModel):
    """Loan offer to compare"""

    label: str = Field(..., min_length=1)
    annual_rate_percent: float
    term_months: int


class CompareRequest(BaseModel):
    """Request body for POST /v1/simulator/compare"""

    principal: float
    offers: List[OfferSchema] = Field(default_factory=list)


class ComparedOfferSchema(BaseModel):
    """Offer with computed cost and savings against the most expensive offer"""

    label: str
    annual_rate_percent: float
    term_months: int
    installment_amount: int
    total_paid: int
    total_interest: int
    savings_vs_worst: int


class CompareResponse(BaseModel):
    """Response for POST /v1/simulator/compare"""

    principal: float
    offers: List[ComparedOfferSchema]


class SimulationRequest(LoanRequest):
    """Request body for POST /v1/simulator/simulations"""

    simulation_type: Literal["personal", "home", "car", "education"] = "personal"


class SimulationSchema(BaseModel):
    """Saved simulator run"""

    simulation_id: str
    principal: float
    annual_rate_percent: float
    term_months: int
    installment_amount: int
    total_paid: int
    total_interest: int
    simulation_type: str
    created_at: str


class SimulationResponse(BaseModel):
    """Response for POST /v1/simulator/simulations"""

    simulation: SimulationSchema
    coins_awarded: int
    total_coins: int
    level: int


class SimulationHistoryResponse(BaseModel):
    """Response for GET /v1/simulator/simulations"""

    user_id: str
    simulations: List[SimulationSchema]


class QuizAttemptRequest(BaseModel):
    """Request body for POST /v1/lessons/{lesson_id}/attempts"""

    score: int = Field(..., description="Correct answers")
    total_questions: int = Field(..., description="Questions asked")


class QuizAttemptResponse(BaseModel):
    """Response for POST /v1/lessons/{lesson_id}/attempts"""

    passed: bool
    coins_earned: int
    is_new_completion: bool


class LessonSchema(BaseModel):
    """Lesson listing entry with the caller's completion flag"""

    lesson_id: str
    title: str
    description: str
    category: str
    difficulty: str
    content: str
    coin_reward: int
    estimated_minutes: int
    is_completed: bool = False


class CategorySchema(BaseModel):
    """Lesson category summary"""

    name: str
    count: int
    total_coins: int


class QuestionSchema(BaseModel):
    """Quiz question"""

    question: str
    options: List[str]
    correct_answer: int
    explanation: str
    points: int


class SeedResponse(BaseModel):
    """Response for POST /v1/lessons/seed"""

    lessons_created: int


class ProgressSchema(BaseModel):
    """User progression state"""

    user_id: str
    display_name: str
    total_coins: int
    level: int
    completed_lesson_ids: List[str]
    current_streak: int
    last_active_date: Optional[date] = None


class StatsSchema(BaseModel):
    """Aggregate profile statistics"""

    total_lessons: int
    completed_lessons: int
    completion_rate: int
    total_quizzes: int
    average_score: int
    total_simulations: int


class ProfileResponse(BaseModel):
    """Response for GET /v1/profile"""

    progress: ProgressSchema
    stats: StatsSchema


class ProfileUpdateRequest(BaseModel):
    """Request body for PATCH /v1/profile"""

    display_name: str = Field(..., min_length=1, max_length=80)


class ProfileCreateRequest(BaseModel):
    """Request body for POST /v1/profile"""

    display_name: Optional[str] = Field(default=None, max_length=80)


class LeaderboardEntrySchema(BaseModel):
    """Single ranked user"""

    rank: int
    user_id: str
    display_name: str
    total_coins: int
    level: int


class LeaderboardResponse(BaseModel):
    """Response for GET /v1/leaderboard"""

    entries: List[LeaderboardEntrySchema]
