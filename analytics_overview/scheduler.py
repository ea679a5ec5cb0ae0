"""
Scheduler for the analytics overview update

Uses APScheduler to run the update on the configured cron schedule.
"""
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from zoneinfo import ZoneInfo
import asyncio
import sys
from typing import Dict, List

from analytics_overview.config import get_settings
from analytics_overview.connectors.google_analytics_connector import GoogleAnalyticsConnector
from analytics_overview.models.base import SessionLocal, init_db
from analytics_overview.services.overview_store import OverviewStore
from analytics_overview.services.overview_update_service import AnalyticsOverviewUpdater
from analytics_overview.utils.credentials import GoogleClientHelper, bootstrap_credentials
from analytics_overview.utils.logger import log

settings = get_settings()
scheduler = AsyncIOScheduler()


async def update_analytics_overview() -> Dict:
    """Run one update over all overviews with a fresh session"""
    client_helper = GoogleClientHelper(settings)
    db = SessionLocal()
    try:
        updater = AnalyticsOverviewUpdater(
            analytics=GoogleAnalyticsConnector(client_helper),
            credentials=client_helper,
            store=OverviewStore(db),
        )
        return await updater.run()
    finally:
        db.close()


async def sync_analytics_overview():
    """Scheduled job: update analytics overviews"""
    try:
        log.info("Starting analytics overview update...")
        result = await update_analytics_overview()

        if result.get('success'):
            log.info(
                f"Analytics overview update completed: "
                f"{result.get('overviews_updated', 0)} overviews in {result.get('duration_seconds', 0):.1f}s"
            )
        else:
            log.warning(f"Analytics overview update skipped: {result.get('message')}")

    except Exception as e:
        log.error(f"Analytics overview update error: {str(e)}")


def setup_scheduler():
    """Register the update job using the configured cron expression"""
    timezone = ZoneInfo(settings.scheduler_timezone)

    scheduler.add_job(
        sync_analytics_overview,
        trigger=CronTrigger.from_crontab(settings.sync_analytics_schedule, timezone=timezone),
        id='analytics_overview_update',
        name='Analytics Overview Update',
        replace_existing=True,
        max_instances=1
    )

    log.info(f"Scheduler configured: analytics overview update at '{settings.sync_analytics_schedule}' ({settings.scheduler_timezone})")


def start_scheduler():
    """Start the scheduler"""
    setup_scheduler()
    scheduler.start()
    log.info("Scheduler started")


def stop_scheduler():
    """Stop the scheduler"""
    scheduler.shutdown()
    log.info("Scheduler stopped")


def get_scheduled_jobs() -> List[Dict]:
    """List scheduled jobs with their next run time"""
    return [
        {
            'id': job.id,
            'name': job.name,
            'next_run': getattr(job, 'next_run_time', None),
            'trigger': str(job.trigger),
        }
        for job in scheduler.get_jobs()
    ]


async def preflight_check(connector: GoogleAnalyticsConnector) -> bool:
    """Check the Google Analytics connection before a manual run"""
    if not connector.client_helper.token_is_set():
        log.warning("No Google account configured, skipping connection check")
        return True

    if await connector.validate_connection():
        log.info("Google Analytics connection OK")
        return True

    log.error("Google Analytics connection check failed, update not started")
    return False


async def _run_forever():
    bootstrap_credentials(settings)
    init_db()
    start_scheduler()
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        stop_scheduler()


if __name__ == "__main__":
    command = sys.argv[1] if len(sys.argv) > 1 else "start"

    if command == "start":
        print("Starting scheduler...")
        try:
            asyncio.run(_run_forever())
        except (KeyboardInterrupt, SystemExit):
            print("\nShutting down scheduler...")

    elif command == "run":
        bootstrap_credentials(settings)
        init_db()
        connector = GoogleAnalyticsConnector(GoogleClientHelper(settings))
        if not asyncio.run(preflight_check(connector)):
            sys.exit(1)
        asyncio.run(sync_analytics_overview())

    elif command == "list":
        setup_scheduler()
        print("\nScheduled Jobs:")
        print("-" * 80)

        jobs = get_scheduled_jobs()

        if not jobs:
            print("No jobs scheduled")
        else:
            for job in jobs:
                print(f"\nID:       {job['id']}")
                print(f"Name:     {job['name']}")
                print(f"Next Run: {job['next_run']}")
                print(f"Trigger:  {job['trigger']}")

    else:
        print(f"Unknown command: {command}")
        print("Usage: python -m analytics_overview.scheduler [start|run|list]")
        sys.exit(1)
