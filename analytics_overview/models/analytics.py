"""
Analytics Overview Models

Aggregated Google Analytics summaries refreshed by the overview updater:
per-window overviews with their top referrals, top searches and goals,
the trailing daily series and the "last updated" marker.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from analytics_overview.models.base import Base


class AnalyticsConfig(Base):
    """Singleton holding the last time the updater ran"""
    __tablename__ = "analytics_config"

    id = Column(Integer, primary_key=True, index=True)

    last_update = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<AnalyticsConfig last_update={self.last_update}>"


class AnalyticsDailyOverview(Base):
    """Visits per day over the trailing year (singleton)"""
    __tablename__ = "analytics_daily_overviews"

    id = Column(Integer, primary_key=True, index=True)

    data = Column(Text, nullable=True)
    # JSON: [{"key": "2023-01-15", "data": 42}, ...]

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<AnalyticsDailyOverview {self.id}>"


class AnalyticsOverview(Base):
    """One reporting window (timespan/start offset) and its metrics"""
    __tablename__ = "analytics_overviews"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String, nullable=False)

    # Window: from `timespan` days ago up to `start_offset` days ago
    timespan = Column(Integer, nullable=False, default=0)
    start_offset = Column(Integer, nullable=False, default=0)
    use_day_data = Column(Boolean, nullable=False, default=False)

    # Summary metrics
    visits = Column(Integer, default=0)
    pageviews = Column(Integer, default=0)

    # Visitor types
    new_visits = Column(Integer, default=0)
    returning_visits = Column(Integer, default=0)

    # Traffic sources
    traffic_direct = Column(Integer, default=0)
    traffic_search_engine = Column(Integer, default=0)
    traffic_referral = Column(Integer, default=0)

    day_data = Column(Text, nullable=True)
    # JSON: [{"key": "0h", "data": 2}, ...]

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    referrals = relationship(
        "AnalyticsTopReferral",
        back_populates="overview",
        cascade="all, delete-orphan",
        order_by="AnalyticsTopReferral.id",
    )
    searches = relationship(
        "AnalyticsTopSearch",
        back_populates="overview",
        cascade="all, delete-orphan",
        order_by="AnalyticsTopSearch.id",
    )
    goals = relationship(
        "AnalyticsGoal",
        back_populates="overview",
        cascade="all, delete-orphan",
        order_by="AnalyticsGoal.position",
    )

    def __repr__(self):
        return f"<AnalyticsOverview {self.title} ({self.timespan}d, -{self.start_offset}d)>"


class AnalyticsTopReferral(Base):
    """Referring site ranked by visits within an overview window"""
    __tablename__ = "analytics_top_referrals"

    id = Column(Integer, primary_key=True, index=True)
    overview_id = Column(Integer, ForeignKey("analytics_overviews.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String, nullable=False)
    visits = Column(Integer, default=0)

    overview = relationship("AnalyticsOverview", back_populates="referrals")

    def __repr__(self):
        return f"<AnalyticsTopReferral {self.name}: {self.visits}>"


class AnalyticsTopSearch(Base):
    """Site search keyword ranked by unique searches within an overview window"""
    __tablename__ = "analytics_top_searches"

    id = Column(Integer, primary_key=True, index=True)
    overview_id = Column(Integer, ForeignKey("analytics_overviews.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String, nullable=False)
    visits = Column(Integer, default=0)

    overview = relationship("AnalyticsOverview", back_populates="searches")

    def __repr__(self):
        return f"<AnalyticsTopSearch {self.name}: {self.visits}>"


class AnalyticsGoal(Base):
    """Goal completions within an overview window"""
    __tablename__ = "analytics_goals"

    id = Column(Integer, primary_key=True, index=True)
    overview_id = Column(Integer, ForeignKey("analytics_overviews.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String, nullable=False)
    position = Column(Integer, nullable=False)
    # 1-based goal number, matches goal<N>Completions

    visits = Column(Integer, default=0)
    graph_data = Column(Text, nullable=True)
    # JSON: [{"timestamp": "2023-01-01", "visits": 3}, ...]

    overview = relationship("AnalyticsOverview", back_populates="goals")

    def __repr__(self):
        return f"<AnalyticsGoal {self.position}: {self.name}>"
