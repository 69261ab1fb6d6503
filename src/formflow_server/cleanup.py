"""Expired-session cleanup CLI: ``formflow-cleanup``.

Deletes ``journey_sessions`` rows whose ``expires_at`` has passed.  Expired
rows are already ignored on read, so this only reclaims space.  Intended
for a cron job.

Examples::

    formflow-cleanup
    formflow-cleanup --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from formflow_db.engine import dispose_engine

from formflow_server.config import load_settings
from formflow_server.sessions import SessionStore

logger = logging.getLogger(__name__)


async def run_cleanup(store: SessionStore | None = None) -> int:
    """Purge expired journey sessions and return the number removed."""
    if store is None:
        store = SessionStore(max_age=load_settings().session_store_ttl)
    try:
        return await store.purge_expired()
    finally:
        await dispose_engine()


def cli() -> None:
    """Console-script entry point: ``formflow-cleanup``."""
    parser = argparse.ArgumentParser(
        prog="formflow-cleanup",
        description="Delete expired journey sessions from the database.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    removed = asyncio.run(run_cleanup())
    print(f"Expired sessions removed: {removed}")
    sys.exit(0)
