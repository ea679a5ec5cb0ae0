"""
Overview Store

Persistence for the analytics overview updater: loads overviews and the
singletons, replaces child collections and commits each overview.

Child replacement is always delete-all, flush, then insert, so a run never
leaves records from a previous run next to the new ones. Everything done for
one overview belongs to the same transaction and is committed by `persist()`.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from analytics_overview.models.analytics import (
    AnalyticsConfig,
    AnalyticsDailyOverview,
    AnalyticsGoal,
    AnalyticsOverview,
    AnalyticsTopReferral,
    AnalyticsTopSearch,
)
from analytics_overview.utils.logger import log

# (title, timespan, start_offset, use_day_data)
DEFAULT_OVERVIEWS: List[Tuple[str, int, int, bool]] = [
    ("Today", 1, 0, True),
    ("Yesterday", 2, 1, True),
    ("Last 7 days", 7, 0, False),
    ("Last 30 days", 30, 0, False),
    ("Last 12 months", 365, 0, False),
]


class OverviewStore:
    """Record store adapter around a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    # Lookups

    def get_all_overviews(self) -> List[AnalyticsOverview]:
        """All configured overviews in store order"""
        return self.db.query(AnalyticsOverview).order_by(AnalyticsOverview.id).all()

    def get_daily_overview(self) -> AnalyticsDailyOverview:
        """The daily overview singleton, created on first use"""
        daily_overview = self.db.query(AnalyticsDailyOverview).order_by(AnalyticsDailyOverview.id).first()
        if not daily_overview:
            daily_overview = AnalyticsDailyOverview()
            self.db.add(daily_overview)
        return daily_overview

    def get_config(self) -> AnalyticsConfig:
        """The config singleton, created on first use"""
        config = self.db.query(AnalyticsConfig).order_by(AnalyticsConfig.id).first()
        if not config:
            config = AnalyticsConfig()
            self.db.add(config)
        return config

    def set_updated(self, timestamp: Optional[datetime] = None) -> datetime:
        """Stamp the last-update marker and commit it"""
        config = self.get_config()
        config.last_update = timestamp or datetime.utcnow()
        self.db.commit()
        return config.last_update

    def seed_default_overviews(self) -> int:
        """Create the standard overviews when none exist yet

        Returns:
            Number of overviews created
        """
        if self.db.query(AnalyticsOverview).count():
            return 0

        for title, timespan, start_offset, use_day_data in DEFAULT_OVERVIEWS:
            self.db.add(AnalyticsOverview(
                title=title,
                timespan=timespan,
                start_offset=start_offset,
                use_day_data=use_day_data,
            ))
        self.db.commit()

        log.info(f"Seeded {len(DEFAULT_OVERVIEWS)} default analytics overviews")
        return len(DEFAULT_OVERVIEWS)

    # Child collections

    def _clear(self, children: list) -> None:
        for child in list(children):
            self.db.delete(child)
        children.clear()
        self.db.flush()

    def replace_referrals(self, overview: AnalyticsOverview, referrals: Iterable[Tuple[str, int]]) -> None:
        """Replace the overview's top referrals with (name, visits) pairs"""
        self._clear(overview.referrals)
        for name, visits in referrals:
            overview.referrals.append(AnalyticsTopReferral(name=name, visits=visits))

    def replace_searches(self, overview: AnalyticsOverview, searches: Iterable[Tuple[str, int]]) -> None:
        """Replace the overview's top searches with (name, visits) pairs"""
        self._clear(overview.searches)
        for name, visits in searches:
            overview.searches.append(AnalyticsTopSearch(name=name, visits=visits))

    def clear_goals(self, overview: AnalyticsOverview) -> None:
        """Delete every goal of the overview"""
        self._clear(overview.goals)

    def add_goal(self, overview: AnalyticsOverview, name: str, position: int, visits: int, graph_data: str) -> AnalyticsGoal:
        goal = AnalyticsGoal(name=name, position=position, visits=visits, graph_data=graph_data)
        overview.goals.append(goal)
        return goal

    # Transactions

    def persist(self, record) -> None:
        """Add the record to the session and commit"""
        self.db.add(record)
        self.db.commit()

    @contextmanager
    def transaction(self):
        """Roll back uncommitted work if the block raises, then re-raise"""
        try:
            yield self
        except Exception:
            self.db.rollback()
            raise
