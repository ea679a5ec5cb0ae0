#!/usr/bin/env python3
"""
Analytics Overview Update Script

Pulls the latest Google Analytics metrics into every analytics overview,
the daily overview and the last-update marker.

Usage:
    python scripts/update_analytics_overview.py [--seed-defaults] [--verify]

Examples:
    # Regular update
    python scripts/update_analytics_overview.py

    # First run on an empty database: create the default overviews, then update
    python scripts/update_analytics_overview.py --seed-defaults

    # Show what is currently stored (no update)
    python scripts/update_analytics_overview.py --verify
"""
import asyncio
import sys
import argparse
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from analytics_overview.models.base import SessionLocal, init_db
from analytics_overview.scheduler import update_analytics_overview
from analytics_overview.services.overview_store import OverviewStore
from analytics_overview.utils.credentials import bootstrap_credentials


def seed_defaults():
    db = SessionLocal()
    try:
        created = OverviewStore(db).seed_default_overviews()
        print(f"Default overviews created: {created}")
    finally:
        db.close()


def verify():
    """Print stored overviews and their child records."""
    db = SessionLocal()
    try:
        store = OverviewStore(db)
        config = store.get_config()
        print(f"\nLast update: {config.last_update or 'never'}\n")

        for overview in store.get_all_overviews():
            print(f"{overview.title} ({overview.timespan}d, offset {overview.start_offset}d):")
            print(f"  Visits: {overview.visits or 0:,}  Pageviews: {overview.pageviews or 0:,}")
            print(f"  New/returning: {overview.new_visits or 0:,} / {overview.returning_visits or 0:,}")
            print(
                f"  Direct/search/referral: {overview.traffic_direct or 0:,} / "
                f"{overview.traffic_search_engine or 0:,} / {overview.traffic_referral or 0:,}"
            )
            print(f"  Referrals: {', '.join(r.name for r in overview.referrals) or '-'}")
            print(f"  Searches: {', '.join(s.name for s in overview.searches) or '-'}")
            print(f"  Goals: {', '.join(f'{g.position}. {g.name} ({g.visits})' for g in overview.goals) or '-'}")
    finally:
        db.close()


async def main(seed: bool = False):
    bootstrap_credentials()
    init_db()

    if seed:
        seed_defaults()

    result = await update_analytics_overview()

    if result['success']:
        print(f"Google Analytics data successfully updated: {result['overviews_updated']} overviews")
    else:
        print(result['message'])


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Update Google Analytics overviews")
    parser.add_argument(
        "--seed-defaults", action="store_true",
        help="Create the default overviews first if none exist"
    )
    parser.add_argument(
        "--verify", action="store_true",
        help="Show stored overview data (no update)"
    )

    args = parser.parse_args()

    if args.verify:
        init_db()
        verify()
    else:
        asyncio.run(main(seed=args.seed_defaults))
