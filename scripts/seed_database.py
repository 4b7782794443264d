#!/usr/bin/env python3
"""
Database Seed Script

Clears the incidents table and fills it with synthetic incidents for demos.
Uses DATABASE_URL (or .env) to find the database.

Usage:
    python scripts/seed_database.py
    python scripts/seed_database.py --count 50 --random-seed 7
"""

import argparse
import sys

from incident_tracker.config import configure_logging, get_settings, log_error
from incident_tracker.seed import DEFAULT_COUNT, seed_database


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the incidents table with demo data")
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT, help=f"Number of incidents (default: {DEFAULT_COUNT})")
    parser.add_argument("--random-seed", type=int, default=None, help="Seed for reproducible data")
    args = parser.parse_args()

    configure_logging()
    settings = get_settings()

    print(f"Seeding database with {args.count} incidents...")
    try:
        inserted = seed_database(settings, count=args.count, seed=args.random_seed)
    except Exception as e:
        log_error(e, count=args.count)
        print(f"Error seeding database: {e}", file=sys.stderr)
        return 1

    print(f"Successfully seeded {inserted} incidents!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
