"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finquest.api.main import create_app
from finquest.api.dependencies import get_clock
from finquest.infrastructure.database.models import Base, Lesson
from finquest.infrastructure.database.session import get_db
from finquest.domain.progression import ProgressionLedger
from tests.fakes import FixedClock, InMemoryProgressStore, StaticCatalog


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at 2024-03-15 09:30 UTC"""
    return FixedClock()


@pytest.fixture
def client(db: Session, clock: FixedClock) -> TestClient:
    """Create FastAPI test client with test database and fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app)


@pytest.fixture
def lesson_rows(db: Session) -> list[Lesson]:
    """Two active lessons and one retired lesson"""
    lessons = [
        Lesson(
            lesson_id="budgeting-101",
            title="Budgeting 101",
            description="Plan where your money goes",
            category="budgeting",
            difficulty="beginner",
            content="A budget is a plan for your income.",
            coin_reward=50,
            estimated_minutes=10,
            is_active=True,
        ),
        Lesson(
            lesson_id="compound-interest",
            title="Compound Interest",
            description="Interest on interest",
            category="interest",
            difficulty="intermediate",
            content="Compound interest grows on principal plus accrued interest.",
            coin_reward=100,
            estimated_minutes=20,
            is_active=True,
        ),
        Lesson(
            lesson_id="retired-lesson",
            title="Retired",
            description="No longer offered",
            category="budgeting",
            difficulty="beginner",
            content="-",
            coin_reward=500,
            estimated_minutes=5,
            is_active=False,
        ),
    ]
    db.add_all(lessons)
    db.commit()
    return lessons


@pytest.fixture
def store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture
def catalog() -> StaticCatalog:
    """coin rewards keyed by lesson id"""
    return StaticCatalog({"money-basics": 50, "understanding-interest": 100, "loans-and-emi": 125})


@pytest.fixture
def ledger(store: InMemoryProgressStore, catalog: StaticCatalog, clock: FixedClock) -> ProgressionLedger:
    """Ledger over in-memory collaborators, no backoff between retries"""
    return ProgressionLedger(store=store, catalog=catalog, clock=clock, max_retries=5, backoff_base=0.0)
