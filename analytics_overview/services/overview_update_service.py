"""
Analytics Overview Update Service
Refreshes every analytics overview from Google Analytics and persists the results
"""
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from analytics_overview.connectors.google_analytics_connector import GoalDefinition
from analytics_overview.models.analytics import AnalyticsOverview
from analytics_overview.services.overview_store import OverviewStore
from analytics_overview.utils.helpers import serialize_series
from analytics_overview.utils.logger import log
from analytics_overview.utils.rows import decode_dimension_rows, decode_total, format_ga_date, metric_at

DAILY_SERIES_DAYS = 365
TOP_RESULTS_LIMIT = 3

# ga:medium values mapped to overview traffic fields; anything else is ignored
TRAFFIC_MEDIUM_FIELDS = {
    "(none)": "traffic_direct",
    "organic": "traffic_search_engine",
    "referral": "traffic_referral",
}


class AnalyticsQueryService(Protocol):
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
        ...

    async def list_goals(self) -> List[GoalDefinition]:
        ...


class CredentialProvider(Protocol):
    def token_is_set(self) -> bool:
        ...


@dataclass
class UpdateContext:
    """State shared by the fetch steps for the overview being updated"""
    analytics: AnalyticsQueryService
    store: OverviewStore
    overview: AnalyticsOverview

    async def query(self, metrics: str, **options) -> List[List[Any]]:
        """Run a report over the current overview's window"""
        return await self.analytics.get_results(
            self.overview.timespan,
            self.overview.start_offset,
            metrics,
            **options
        )


class AnalyticsOverviewUpdater:
    """Orchestrates one update run over all analytics overviews"""

    def __init__(self, analytics: AnalyticsQueryService, credentials: CredentialProvider, store: OverviewStore):
        self.analytics = analytics
        self.credentials = credentials
        self.store = store

    async def run(self) -> Dict[str, Any]:
        """
        Update the daily overview and every analytics overview.

        Each overview is committed as soon as it is done. A remote failure
        propagates; overviews committed before it stay committed.

        Returns:
            Dict with success status, overviews_updated and duration_seconds
        """
        start = time.time()

        if not self.credentials.token_is_set():
            message = "You haven't configured a Google account yet"
            log.warning(message)
            return {"success": False, "message": message, "overviews_updated": 0, "duration_seconds": 0.0}

        self.store.set_updated()

        await self.update_daily_overview()

        overviews = self.store.get_all_overviews()
        for overview in overviews:
            log.info(f'Getting data for overview "{overview.title}"')
            context = UpdateContext(analytics=self.analytics, store=self.store, overview=overview)

            with self.store.transaction():
                await self.update_overview(context)

                log.info("\tPersisting..")
                self.store.persist(overview)

        duration = time.time() - start
        log.info(f"Google Analytics data successfully updated ({len(overviews)} overviews in {duration:.1f}s)")

        return {"success": True, "overviews_updated": len(overviews), "duration_seconds": duration}

    async def update_overview(self, context: UpdateContext) -> None:
        """Run every fetch step for one overview, in order"""
        overview = context.overview

        await fetch_metrics(context)
        await fetch_goals(context)

        if overview.use_day_data:
            await fetch_day_data(context)

        if overview.visits:
            await fetch_visitor_types(context)
            await fetch_traffic_sources(context)
            await fetch_top_referrals(context)
            await fetch_top_searches(context)
        else:
            reset_overview(context)
            log.info("\tNo visitors")

    async def update_daily_overview(self) -> None:
        """Visits per day for the trailing year, stored on the daily overview"""
        log.info("Fetching daily visits")
        daily_overview = self.store.get_daily_overview()

        rows = await self.analytics.get_results(
            DAILY_SERIES_DAYS,
            0,
            "ga:visits",
            dimensions="ga:date",
            sort="-ga:date"
        )

        data = [
            {"key": format_ga_date(row.dimension), "data": row.value}
            for row in decode_dimension_rows(rows)
        ]
        daily_overview.data = serialize_series(data)

        log.info("\tPersisting..")
        self.store.persist(daily_overview)


async def fetch_metrics(context: UpdateContext) -> None:
    """Total visits and pageviews for the window"""
    log.info("\tFetching metrics..")
    overview = context.overview

    overview.visits = decode_total(await context.query("ga:visits"))
    overview.pageviews = decode_total(await context.query("ga:pageviews"))


async def fetch_day_data(context: UpdateContext) -> None:
    """Visits per hour of day"""
    log.info("\tFetching day-specific data..")

    rows = await context.query("ga:visits", dimensions="ga:hour")

    data = [{"key": f"{row.dimension}h", "data": row.value} for row in decode_dimension_rows(rows)]
    context.overview.day_data = serialize_series(data)


async def fetch_visitor_types(context: UpdateContext) -> None:
    """New and returning visits.

    The first row is taken as new visitors and the second as returning
    visitors, in the order the API returns them.
    """
    log.info("\tFetching visitor types..")
    overview = context.overview

    rows = await context.query("ga:visits", dimensions="ga:visitorType")

    overview.new_visits = metric_at(rows, 0, 1)
    overview.returning_visits = metric_at(rows, 1, 1)


async def fetch_traffic_sources(context: UpdateContext) -> None:
    """Direct, search engine and referral visits by medium"""
    log.info("\tFetching traffic sources..")
    overview = context.overview

    rows = await context.query("ga:visits", dimensions="ga:medium", sort="ga:medium")

    for field in TRAFFIC_MEDIUM_FIELDS.values():
        setattr(overview, field, 0)

    for row in decode_dimension_rows(rows):
        field = TRAFFIC_MEDIUM_FIELDS.get(row.dimension)
        if field:
            setattr(overview, field, row.value)


async def fetch_top_referrals(context: UpdateContext) -> None:
    """Top referring sites by visits"""
    log.info("\tFetching referral sites..")

    rows = await context.query(
        "ga:visits",
        dimensions="ga:source",
        sort="-ga:visits",
        filters="ga:medium==referral",
        max_results=TOP_RESULTS_LIMIT
    )

    context.store.replace_referrals(
        context.overview,
        [(row.dimension, row.value) for row in decode_dimension_rows(rows)]
    )


async def fetch_top_searches(context: UpdateContext) -> None:
    """Top site search keywords by unique searches"""
    log.info("\tFetching searches..")

    rows = await context.query(
        "ga:searchUniques",
        dimensions="ga:searchKeyword",
        sort="-ga:searchUniques",
        max_results=TOP_RESULTS_LIMIT
    )

    context.store.replace_searches(
        context.overview,
        [(row.dimension, row.value) for row in decode_dimension_rows(rows)]
    )


def is_single_day(overview: AnalyticsOverview) -> bool:
    """Windows of one day or less are charted per hour instead of per date"""
    return overview.timespan - overview.start_offset <= 1


async def fetch_goals(context: UpdateContext) -> None:
    """Completions per goal, with a per-date (or per-hour) graph"""
    log.info("\tFetching goals..")
    overview = context.overview

    single_day = is_single_day(overview)
    dimension = "ga:hour" if single_day else "ga:date"

    context.store.clear_goals(overview)

    goals = await context.analytics.list_goals()

    for index, definition in enumerate(goals):
        position = index + 1

        rows = await context.query(f"ga:goal{position}Completions", dimensions=dimension, sort=dimension)

        visits = 0
        graph_data = []
        for row in decode_dimension_rows(rows):
            visits += row.value
            timestamp = row.dimension if single_day else format_ga_date(row.dimension)
            graph_data.append({"timestamp": timestamp, "visits": row.value})

        context.store.add_goal(
            overview,
            name=definition.name,
            position=position,
            visits=visits,
            graph_data=serialize_series(graph_data)
        )

        log.info(f'\t\tFetching goal {position}: "{definition.name}"')


def reset_overview(context: UpdateContext) -> None:
    """Zero the visitor and traffic fields and empty referrals and searches"""
    overview = context.overview

    overview.new_visits = 0
    overview.returning_visits = 0
    for field in TRAFFIC_MEDIUM_FIELDS.values():
        setattr(overview, field, 0)

    context.store.replace_referrals(overview, [])
    context.store.replace_searches(overview, [])
