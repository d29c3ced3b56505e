#!/usr/bin/env python
"""Copy the legacy MongoDB tea-garden database into PostgreSQL.

This script:
1. Connects to the legacy database named by OLD_MONGO_URL
2. Copies each collection in dependency order, one document per commit
3. Reports migrated/skipped counts per collection

Usage:
    python scripts/migrate_legacy_data.py
    python scripts/migrate_legacy_data.py --only templates
    python scripts/migrate_legacy_data.py --yes

Environment variables:
    OLD_MONGO_URL - e.g. mongodb://localhost:27017/tea-garden
    DATABASE_URL  - PostgreSQL connection string (asyncpg)
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings
from app.database import async_session, engine
from app.middleware.exceptions import ConfigurationError
from app.services.legacy_migration import LegacyMigration, connect_legacy_db


async def main():
    parser = argparse.ArgumentParser(description="Migrate legacy MongoDB data into PostgreSQL")
    parser.add_argument(
        "--only",
        choices=["templates"],
        help="Only migrate the step/title/appreciation/weather template collections",
    )
    parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation prompt")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    print("=" * 70)
    print("  Legacy Data Migration")
    print("=" * 70)
    print()

    try:
        client, mongo_db = connect_legacy_db(settings.old_mongo_url)
    except ConfigurationError as e:
        print(f"❌ {e.message}")
        sys.exit(1)

    try:
        if not args.yes:
            print("⚠️  Personnel, grades and harvest records in PostgreSQL are replaced.")
            response = input("Continue with migration? [y/N]: ")
            if response.lower() != "y":
                print("Migration cancelled.")
                return

        start_time = datetime.now()
        results = await LegacyMigration(mongo_db, async_session).run(only=args.only)
        duration = (datetime.now() - start_time).total_seconds()

        print()
        print("=" * 70)
        print("  Migration Summary")
        print("=" * 70)
        for collection, counts in results.items():
            print(f"  {collection:<28} {counts['migrated']:>6} migrated  {counts['skipped']:>6} skipped")
        print()
        print(f"⏱  Duration: {duration:.2f}s")
    finally:
        client.close()
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
