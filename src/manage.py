"""TutorLink database management CLI.

Creates and drops the database schemas of the three contexts. Only SQL
providers (the ``production`` overlay) have anything to do.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db
    PROTEAN_ENV=production python src/manage.py drop-db --domain reviews
"""

import argparse
import sys

from shared.db import drop_db, setup_db

DOMAIN_NAMES = ["tutoring", "reviews", "tutors"]


def _domains(names=None):
    from reviews.domain import reviews
    from tutoring.domain import tutoring
    from tutors.domain import tutors

    all_domains = {"tutoring": tutoring, "reviews": reviews, "tutors": tutors}
    return {name: all_domains[name] for name in (names or DOMAIN_NAMES)}


def setup_databases(names=None):
    """Create database schemas for the specified (or all) domains."""
    for name, domain in _domains(names).items():
        print(f"Initializing {name} domain...")
        domain.init()
        touched = setup_db(domain)
        print(f"  {name} schema ready ({', '.join(touched) or 'no SQL provider'}).")

    print("Done.")


def drop_databases(names=None):
    """Drop database schemas for the specified (or all) domains."""
    for name, domain in _domains(names).items():
        print(f"Initializing {name} domain...")
        domain.init()
        touched = drop_db(domain)
        print(f"  {name} schema dropped ({', '.join(touched) or 'no SQL provider'}).")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="TutorLink database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (("setup-db", "Create all database tables"), ("drop-db", "Drop all database tables")):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--domain",
            choices=DOMAIN_NAMES,
            nargs="*",
            help="Specific domain(s) (default: all)",
        )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
