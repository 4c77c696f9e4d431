"""Load sample menu items and orders into DynamoDB.

Usage:
    python src/seed.py [--create-tables]

Table names and the DynamoDB endpoint come from the same environment
variables the service reads.
"""

import argparse
import logging
import os
import sys

from restaurant_admin_service.observability import configure_logging
from restaurant_admin_service.repositories.dynamodb import create_dynamodb_resource
from restaurant_admin_service.seeding import seed_database

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the seed and return a process exit code."""
    parser = argparse.ArgumentParser(description="Seed the restaurant admin tables")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="create missing tables first (useful against local DynamoDB)",
    )
    args = parser.parse_args(argv)

    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    try:
        seed_database(
            create_dynamodb_resource(),
            menu_table=os.getenv("DYNAMODB_MENU_ITEMS_TABLE", "restaurant-menu-items"),
            orders_table=os.getenv("DYNAMODB_ORDERS_TABLE", "restaurant-orders"),
            create_tables=args.create_tables,
        )
    except Exception as e:
        logger.exception(f"Error seeding database: {e}")
        return 1

    logger.info("Database seeded successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
