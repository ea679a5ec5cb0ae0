"""
Base connector class for all data sources
"""
from abc import ABC, abstractmethod
from typing import Any, Dict
from datetime import datetime
from analytics_overview.utils.logger import log


class BaseConnector(ABC):
    """Base class for all data source connectors"""

    def __init__(self, name: str):
        self.name = name
        self.last_query = None
        self.query_count = 0

    @abstractmethod
    async def connect(self) -> bool:
        """Establish connection to data source"""
        pass

    @abstractmethod
    async def validate_connection(self) -> bool:
        """Validate connection is working"""
        pass

    def _record_query(self) -> None:
        self.last_query = datetime.utcnow()
        self.query_count += 1
        log.debug(f"{self.name} query #{self.query_count}")

    def get_status(self) -> Dict[str, Any]:
        """Get connector status"""
        return {
            "name": self.name,
            "last_query": self.last_query,
            "query_count": self.query_count,
        }
