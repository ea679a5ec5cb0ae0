"""
Google Analytics data connector
Runs Core Reporting API v3 queries and lists goal definitions
through the Management API.
"""
from dataclasses import dataclass
from typing import Any, List, Optional
from googleapiclient.discovery import build
from analytics_overview.connectors.base_connector import BaseConnector
from analytics_overview.utils.credentials import GoogleClientHelper
from analytics_overview.utils.helpers import calculate_date_range
from analytics_overview.utils.logger import log


@dataclass(frozen=True)
class GoalDefinition:
    """Goal configured on the Analytics view"""
    name: str
    goal_id: Optional[str] = None


class GoogleAnalyticsConnector(BaseConnector):
    """Connector for the Google Analytics Core Reporting and Management APIs"""

    def __init__(self, client_helper: Optional[GoogleClientHelper] = None):
        super().__init__("Google Analytics")
        self.client_helper = client_helper or GoogleClientHelper()
        self.service = None

    async def connect(self) -> bool:
        """Establish connection to Google Analytics"""
        try:
            credentials = self.client_helper.get_credentials()
            self.service = build('analytics', 'v3', credentials=credentials, cache_discovery=False)
            log.info(f"Connected to Google Analytics profile {self.client_helper.profile_id}")
            return True
        except Exception as e:
            log.error(f"Failed to connect to Google Analytics: {str(e)}")
            return False

    async def validate_connection(self) -> bool:
        """Validate Google Analytics connection"""
        try:
            if not self.service:
                await self.connect()

            self.service.management().accountSummaries().list(max_results=1).execute()
            return True
        except Exception as e:
            log.error(f"Google Analytics connection validation failed: {str(e)}")
            return False

    async def _get_service(self):
        if not self.service and not await self.connect():
            raise ConnectionError(f"Connection failed for {self.name}")
        return self.service

    async def get_results(
        self,
        timespan: int,
        start_offset: int,
        metrics: str,
        dimensions: Optional[str] = None,
        sort: Optional[str] = None,
        filters: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> List[List[Any]]:
        """
        Run a report over the window [today - timespan, today - start_offset].

        Returns:
            The report rows; an empty list when the report has no rows
        """
        service = await self._get_service()
        start_date, end_date = calculate_date_range(timespan, start_offset)

        params = {
            "ids": f"ga:{self.client_helper.profile_id}",
            "start_date": start_date,
            "end_date": end_date,
            "metrics": metrics,
        }
        if dimensions:
            params["dimensions"] = dimensions
        if sort:
            params["sort"] = sort
        if filters:
            params["filters"] = filters
        if max_results:
            params["max_results"] = max_results

        response = service.data().ga().get(**params).execute()
        self._record_query()

        return response.get("rows") or []

    async def list_goals(self) -> List[GoalDefinition]:
        """Goal definitions for the configured account/property/profile, in remote order"""
        service = await self._get_service()

        response = service.management().goals().list(
            accountId=self.client_helper.account_id,
            webPropertyId=self.client_helper.property_id,
            profileId=self.client_helper.profile_id,
        ).execute()
        self._record_query()

        return [
            GoalDefinition(name=item.get("name", ""), goal_id=item.get("id"))
            for item in response.get("items") or []
        ]
