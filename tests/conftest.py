"""
Shared fixtures: an in-memory database and fake Google Analytics collaborators.

These tests do NOT require network access or a real database.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_DIR", "logs")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from analytics_overview.connectors.google_analytics_connector import GoalDefinition
from analytics_overview.models.base import init_db
from analytics_overview.services.overview_store import OverviewStore


class FakeAnalytics:
    """Stands in for GoogleAnalyticsConnector.

    Responses are keyed by (metrics, dimensions); unknown queries return no rows.
    """

    def __init__(self, responses=None, goals=None, fail_when=None):
        self.responses = responses or {}
        self.goals = [GoalDefinition(name=name) for name in (goals or [])]
        self.fail_when = fail_when
        self.calls = []
        self.goal_list_calls = 0

    async def get_results(self, timespan, start_offset, metrics, dimensions=None, sort=None, filters=None, max_results=None):
        call = {
            "timespan": timespan,
            "start_offset": start_offset,
            "metrics": metrics,
            "dimensions": dimensions,
            "sort": sort,
            "filters": filters,
            "max_results": max_results,
        }
        self.calls.append(call)
        if self.fail_when and self.fail_when(call):
            raise RuntimeError(f"Remote failure on {metrics}")
        return self.responses.get((metrics, dimensions), [])

    async def list_goals(self):
        self.goal_list_calls += 1
        return list(self.goals)

    def queried_dimensions(self):
        return [call["dimensions"] for call in self.calls]


class FakeCredentials:
    def __init__(self, token_set=True):
        self.token_set = token_set

    def token_is_set(self):
        return self.token_set


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db):
    return OverviewStore(db)
