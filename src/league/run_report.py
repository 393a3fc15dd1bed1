"""Load the league from the store and export a standings report.

Usage:
    python -m src.league.run_report [week] [output_dir]

Examples:
    python -m src.league.run_report
    python -m src.league.run_report 4 /tmp/standings

Requires SUPABASE_URL and SUPABASE_ANON_KEY in the environment.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from src.gateway import RestGateway, get_gateway_settings
from src.league.league_store import LeagueStore
from src.league.reporting import export_report
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def run_report(
    gateway,
    week_number: Optional[int] = None,
    output_dir: Optional[Path] = None,
) -> Path:
    """Load a fresh snapshot through *gateway* and export its report.

    Raises:
        FetchFailure: If the snapshot could not be loaded.
    """
    store = LeagueStore(gateway)
    snapshot = await store.refetch()

    for rank, entry in enumerate(store.get_leaderboard(), start=1):
        logger.info(
            "  %d. %s - %d pts", rank, entry.family_member.name, entry.total_points
        )

    return export_report(snapshot, output_dir=output_dir, week_number=week_number)


if __name__ == "__main__":
    setup_logging()

    week = int(sys.argv[1]) if len(sys.argv) > 1 else None
    out_dir = Path(sys.argv[2]) if len(sys.argv) > 2 else None

    try:
        gateway = RestGateway(get_gateway_settings())
        output = asyncio.run(run_report(gateway, week, out_dir))
        print(f"Report written: {output}")
    except Exception:
        logger.exception("Report failed")
        sys.exit(1)
