"""
Helper utilities
"""
from datetime import date, datetime, timedelta
from typing import Any, List, Optional
import json


def calculate_date_range(timespan: int, start_offset: int = 0, today: Optional[date] = None) -> tuple[str, str]:
    """Date range for a report window.

    Runs from `timespan` days ago up to `start_offset` days ago, formatted
    YYYY-MM-DD as the Core Reporting API expects.
    """
    today = today or datetime.now().date()
    start_date = today - timedelta(days=timespan)
    end_date = today - timedelta(days=start_offset)
    return start_date.strftime("%Y-%m-%d"), end_date.strftime("%Y-%m-%d")


def serialize_series(points: List[Any]) -> str:
    """Compact JSON for series stored as opaque text columns"""
    return json.dumps(points, separators=(",", ":"))
