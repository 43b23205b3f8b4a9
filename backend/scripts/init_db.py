"""
Initialize the database: create the users, doctors, patients and medication tables.
Run with: python -m scripts.init_db
"""

import argparse
import asyncio
import logging
from clinic_records.config import get_settings
from clinic_records.database import create_tables
from clinic_records.store import RecordsStore

logger = logging.getLogger("scripts.init_db")


async def init(check_only: bool = False) -> bool:
    async with RecordsStore.from_settings() as store:
        if not check_only:
            logger.info("Creating database tables...")
            await create_tables(store.engine)
            logger.info("All tables created successfully.")
        return await store.check_connectivity()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Create the clinic records tables and verify connectivity"
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only verify the database is reachable (skip table creation)"
    )
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level.upper())
    ok = asyncio.run(init(check_only=args.check_only))
    raise SystemExit(0 if ok else 1)
