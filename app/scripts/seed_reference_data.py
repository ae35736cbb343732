"""
Seed Reference Data Script
Populates service types and instruments. Existing rows (matched by name /
code) are left as they are, so the script can be re-run safely.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.database.supabase_client import SupabaseClient
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SERVICE_TYPES = [
    {"name": "Sunday", "default_start_time": "10:00"},
    {"name": "Tuesday", "default_start_time": "19:00"},
    # First Friday of the month
    {"name": "Youth", "default_start_time": "19:00", "rrule": "FREQ=MONTHLY;BYDAY=FR;BYSETPOS=1"},
]

INSTRUMENTS = [
    {"code": "drums", "display_name": "Drums", "max_per_set": 1},
    {"code": "bass", "display_name": "Bass", "max_per_set": 1},
    {"code": "egtr1", "display_name": "Electric Guitar 1", "max_per_set": 1},
    {"code": "egtr2", "display_name": "Electric Guitar 2", "max_per_set": 1},
    {"code": "acoustic", "display_name": "Acoustic Guitar", "max_per_set": 1},
    {"code": "singer1", "display_name": "Singer 1", "max_per_set": 1},
    {"code": "singer2", "display_name": "Singer 2", "max_per_set": 1},
    {"code": "singer3", "display_name": "Singer 3", "max_per_set": 1},
    {"code": "singer4", "display_name": "Singer 4", "max_per_set": 1},
]


def seed_rows(supabase: Client, table: str, key: str, rows: list) -> int:
    """Insert the rows whose `key` value is not present yet; returns how many were created."""
    existing = supabase.table(table)\
        .select(key)\
        .in_(key, [r[key] for r in rows])\
        .execute()
    present = {r[key] for r in existing.data or []}
    missing = [r for r in rows if r[key] not in present]
    if missing:
        supabase.table(table).insert(missing).execute()
    logger.info(f"{table}: {len(missing)} created, {len(present)} already present")
    return len(missing)


def seed_service_types(supabase: Client) -> int:
    logger.info("Seeding service types...")
    return seed_rows(supabase, "service_types", "name", SERVICE_TYPES)


def seed_instruments(supabase: Client) -> int:
    logger.info("Seeding instruments...")
    return seed_rows(supabase, "instruments", "code", INSTRUMENTS)


def main():
    """Main function to seed reference data"""
    try:
        supabase = SupabaseClient.get_service_client()

        logger.info("Starting reference data seeding...")
        type_count = seed_service_types(supabase)
        instrument_count = seed_instruments(supabase)

        logger.info("Seeding completed successfully!")
        logger.info(f"Total: {type_count} service types, {instrument_count} instruments created")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
