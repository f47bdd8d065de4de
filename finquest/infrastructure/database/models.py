"""SQLAlchemy ORM models for progression state, the lesson catalog and simulator runs"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Integer, ForeignKey, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class UserProgressRow(Base):
    """Versioned progression record, one per user"""

    __tablename__ = "user_progress"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, unique=True, index=True)
    display_name = Column(Text, nullable=False)
    total_coins = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    completed_lesson_ids = Column(JSON, nullable=False, default=list)
    current_streak = Column(Integer, nullable=False, default=0)
    last_active_date = Column(Date, nullable=True)
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class QuizRecordRow(Base):
    """Append-only quiz submission audit trail"""

    __tablename__ = "quiz_record"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    lesson_id = Column(String(64), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=False)


class Lesson(Base):
    """Financial literacy lesson"""

    __tablename__ = "lesson"

    lesson_id = Column(String(64), primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(32), nullable=False, index=True)
    difficulty = Column(String(32), nullable=False, index=True)
    content = Column(Text, nullable=False)
    coin_reward = Column(Integer, nullable=False)
    estimated_minutes = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    questions = relationship(
        "QuizQuestion",
        back_populates="lesson",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.position",
    )


class QuizQuestion(Base):
    """Multiple-choice question attached to a lesson"""

    __tablename__ = "quiz_question"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    lesson_id = Column(String(64), ForeignKey("lesson.lesson_id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    question = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)
    correct_answer = Column(Integer, nullable=False)
    explanation = Column(Text, nullable=False)
    points = Column(Integer, nullable=False, default=10)

    lesson = relationship("Lesson", back_populates="questions")


class LoanSimulationRow(Base):
    """Saved loan simulator run"""

    __tablename__ = "loan_simulation"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    principal = Column(Float, nullable=False)
    annual_rate_percent = Column(Float, nullable=False)
    term_months = Column(Integer, nullable=False)
    installment_amount = Column(Integer, nullable=False)
    total_paid = Column(Integer, nullable=False)
    total_interest = Column(Integer, nullable=False)
    simulation_type = Column(String(32), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
