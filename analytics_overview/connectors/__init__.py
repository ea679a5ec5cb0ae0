"""Data source connectors"""
from analytics_overview.connectors.google_analytics_connector import GoalDefinition, GoogleAnalyticsConnector

__all__ = ["GoalDefinition", "GoogleAnalyticsConnector"]
