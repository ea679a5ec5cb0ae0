"""
Configuration management for the analytics overview updater
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Analytics Overview Updater"
    environment: str = "development"
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_retention: str = "30 days"
    error_log_level: str = "ERROR"
    error_log_retention: str = "90 days"

    # Database
    database_url: str = "sqlite:///./analytics_overview.db"

    # Google Analytics (Core Reporting API v3 + Management API)
    ga_credentials_path: str = "./credentials/ga-credentials.json"
    ga_account_id: Optional[str] = None
    ga_property_id: Optional[str] = None  # Web property, e.g. UA-12345-1
    ga_profile_id: Optional[str] = None  # View (profile) id queried as ga:<id>

    # Sync Schedule
    sync_analytics_schedule: str = "0 3 * * *"
    scheduler_timezone: str = "Europe/Brussels"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
