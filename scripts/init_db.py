#!/usr/bin/env python3
"""
Database initialization script for development.
Creates tables and seeds the pattern corpus, verified brands and phone registry.
"""

import sys
import argparse
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from scamshield.core.logging import setup_logging, get_logger
from scamshield.database.connection import SessionLocal, create_tables, check_database_health
from scamshield.database.seed import seed_database
from config.settings import settings

logger = get_logger(__name__)


def main(argv=None):
    """Initialize the database."""
    parser = argparse.ArgumentParser(description="Create ScamShield tables and load seed data")
    parser.add_argument("--skip-patterns", action="store_true", help="Do not (re)generate the scam pattern corpus")
    args = parser.parse_args(argv)

    setup_logging(settings.log_level, mask_contacts=settings.log_mask_contacts)
    logger.info("Starting database initialization...")
    logger.info(f"Connecting to database: {settings.database.url}")

    try:
        if not check_database_health():
            logger.error("Cannot connect to database. Check DATABASE_URL.")
            return False

        logger.info("Creating database tables...")
        create_tables()

        db = SessionLocal()
        try:
            counts = seed_database(db, include_patterns=not args.skip_patterns)
        finally:
            db.close()

        logger.info(f"Database initialization completed: {counts}")
        return True

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        return False


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
