"""
Pytest configuration and shared fixtures for all tests
In-memory database, fake chat models and deterministic estimators
"""

import os

# Must be set before salescast.core.config builds its settings singleton
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""

from datetime import date

import httpx
import numpy as np
import openai
import pytest
from langchain_core.messages import AIMessage
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salescast.db.models import Category, SalesTotalByCategory
from salescast.db.schemas import SeriesPoint
from salescast.db.session import Base
from salescast.services.llm_service import ForecastProvider
from salescast.services.trend_service import TrendEstimator

VALID_KEY = "sk-test-0123456789abcdef"
OPENAI_URL = "https://api.openai.com/v1/chat/completions"


class FakeChat:
    """Stands in for ChatOpenAI: records construction kwargs and messages."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.kwargs: dict = {}
        self.messages: list = []
        self.calls = 0

    def __call__(self, **kwargs):
        self.kwargs = kwargs
        return self

    def invoke(self, messages):
        self.calls += 1
        self.messages = messages
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


def status_error(cls, status: int):
    request = httpx.Request("POST", OPENAI_URL)
    return cls(f"status {status}", response=httpx.Response(status, request=request), body=None)


def connection_error(cls=openai.APIConnectionError):
    return cls(request=httpx.Request("POST", OPENAI_URL))


def response_validation_error():
    request = httpx.Request("POST", OPENAI_URL)
    return openai.APIResponseValidationError(response=httpx.Response(200, request=request), body=None)


@pytest.fixture
def fake_chat():
    return FakeChat()


@pytest.fixture
def provider(fake_chat):
    return ForecastProvider(model="gpt-test", timeout=30.0, chat_factory=fake_chat)


@pytest.fixture
def flat_estimator():
    """Trend estimator without seasonality or noise, for exact assertions."""
    return TrendEstimator(seasonality=0.0, volatility=0.0)


@pytest.fixture
def seeded_estimator():
    return TrendEstimator(rng=np.random.default_rng(42))


@pytest.fixture
def monthly_series():
    totals = [1000.0, 1100.0, 1050.0, 1200.0, 1300.0, 1250.0, 1400.0]
    return [SeriesPoint(period=f"2024-{m:02d}", total=t) for m, t in enumerate(totals, start=1)]


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def seeded_db(db_session):
    """
    Two categories over early January 2024:
    - a refund (negative total) on 2024-01-02
    - two transactions for the same day/category (test summing)
    - one row outside the usual query window
    """
    db_session.add_all([Category(id=1, name="Electronics"), Category(id=2, name="Grocery")])
    db_session.add_all(
        [
            SalesTotalByCategory(date_recorded=date(2024, 1, 1), sale_transaction_id=1, category_id=1, total_amount=100.0),
            SalesTotalByCategory(date_recorded=date(2024, 1, 1), sale_transaction_id=2, category_id=1, total_amount=50.0),
            SalesTotalByCategory(date_recorded=date(2024, 1, 1), sale_transaction_id=2, category_id=2, total_amount=20.0),
            SalesTotalByCategory(date_recorded=date(2024, 1, 2), sale_transaction_id=3, category_id=1, total_amount=-30.0),
            SalesTotalByCategory(date_recorded=date(2024, 1, 8), sale_transaction_id=4, category_id=2, total_amount=200.0),
            SalesTotalByCategory(date_recorded=date(2024, 3, 15), sale_transaction_id=5, category_id=2, total_amount=75.0),
        ]
    )
    db_session.commit()
    return db_session
