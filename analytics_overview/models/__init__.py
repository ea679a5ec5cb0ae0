"""Database models for the analytics overview updater"""

from analytics_overview.models.analytics import (
    AnalyticsConfig,
    AnalyticsDailyOverview,
    AnalyticsOverview,
    AnalyticsTopReferral,
    AnalyticsTopSearch,
    AnalyticsGoal
)
