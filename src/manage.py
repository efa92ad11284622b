"""Blom admin database management CLI.

Provides commands to create and drop database schemas for all domains.

Usage:
    python src/manage.py setup-db                      # Create all tables
    python src/manage.py drop-db --domain ordering     # Drop one domain's tables
"""

import argparse
import sys

DOMAIN_NAMES = ["ordering", "catalogue", "promotions", "contacts", "courses", "finance"]


def load_domains(names=None) -> dict:
    """Import and initialize the named (or all) domains."""
    from catalogue.domain import catalogue
    from contacts.domain import contacts
    from courses.domain import courses
    from finance.domain import finance
    from ordering.domain import ordering
    from promotions.domain import promotions

    all_domains = {
        "ordering": ordering,
        "catalogue": catalogue,
        "promotions": promotions,
        "contacts": contacts,
        "courses": courses,
        "finance": finance,
    }
    targets = {name: all_domains[name] for name in names} if names else all_domains
    for domain in targets.values():
        domain.init()
    return targets


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.utils.db import setup_db

    for name, domain in load_domains(domains).items():
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.utils.db import drop_db

    for name, domain in load_domains(domains).items():
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Blom admin database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    args = parser.parse_args()

    from shared.utils.logging import configure_logging

    configure_logging(log_dir=None)

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
