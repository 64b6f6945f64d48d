"""Storefront management CLI.

Usage:
    python src/manage.py setup-db              # Create all tables
    python src/manage.py drop-db               # Drop all tables
    python src/manage.py purge-registrations   # Delete expired sign-ups
"""

import argparse
import sys


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _domain()
    print(f"Creating {domain.name} database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _domain()
    print(f"Dropping {domain.name} database schema...")
    drop_db(domain)
    print("Done.")


def purge_registrations():
    from storefront.identity.registration import PurgeExpiredRegistrations

    domain = _domain()
    with domain.domain_context():
        purged = domain.process(PurgeExpiredRegistrations(), asynchronous=False)
    print(f"Purged {purged} expired registration(s).")


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("purge-registrations", help="Delete sign-ups whose verification code expired")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "purge-registrations":
        purge_registrations()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
