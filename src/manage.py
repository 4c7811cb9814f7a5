"""Caviar store management CLI.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def _initialized_domain():
    from caviar.domain import caviar

    print("Initializing caviar domain...")
    caviar.init()
    return caviar


def setup_database():
    from caviar.utils.db import setup_db

    domain = _initialized_domain()
    print("Creating database schema...")
    setup_db(domain)
    print("Done.")


def drop_database(force: bool = False):
    from caviar.utils.db import drop_db

    if not force:
        answer = input("This drops every table of the store. Continue? [y/N] ")
        if answer.strip().lower() != "y":
            print("Aborted.")
            return

    domain = _initialized_domain()
    print("Dropping database schema...")
    drop_db(domain)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Caviar store management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database(force=args.yes)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
