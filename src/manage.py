"""Caffinity database management CLI.

Creates and drops the SQL tables of the caffinity domain. Memory-backed
configurations have nothing to create, so both commands are no-ops there.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the database schema for the caffinity domain."""
    from caffinity.domain import caffinity
    from caffinity.utils.db import setup_db

    print("Initializing caffinity domain...")
    caffinity.init()
    print("Creating caffinity database schema...")
    setup_db(caffinity)
    print("Done.")


def drop_database():
    """Drop the database schema for the caffinity domain."""
    from caffinity.domain import caffinity
    from caffinity.utils.db import drop_db

    print("Initializing caffinity domain...")
    caffinity.init()
    print("Dropping caffinity database schema...")
    drop_db(caffinity)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Caffinity database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
