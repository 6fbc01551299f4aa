#!/usr/bin/env python3
"""
Script to reset the Circulation database and load sample books, members and loans.
"""
import argparse
import logging
import sys
from datetime import date, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from circulation.configs import DB_URI, LOG_LEVEL, LOAN_PERIOD_DAYS
from circulation.core import Database, build_service
from circulation.core.exceptions import CirculationError

logger = logging.getLogger("circulation.seed")

BOOKS = [
    ("Clean Code", "Robert C. Martin", "978-0132350884", 2008),
    ("Clean Code", "Robert C. Martin", "978-0132350884", 2008),
    ("Effective Java", "Joshua Bloch", "978-0134685991", 2018),
    ("Design Patterns", "Erich Gamma et al.", "978-0201633610", 1994),
    ("Introduction to Algorithms", "Cormen et al.", "978-0262033848", 2009),
]

MEMBERS = [
    ("Alice Johnson", "alice.johnson@example.com", "555-111-2222"),
    ("Bob Smith", "bob.smith@example.com", "555-333-4444"),
    ("Charlie Nguyen", "charlie.nguyen@example.com", "555-555-6666"),
]


def seed(db: Database, today: date) -> dict:
    """Drops and recreates the schema, then loads the sample rows.

    Returns the ids created, keyed by kind.
    """
    db.drop()
    db.init()
    service = build_service(db)

    books = [service.books.add(*row).id for row in BOOKS]
    members = [service.members.add(*row).id for row in MEMBERS]

    loans = [
        service.checkout(books[0], members[0], today, today + timedelta(days=LOAN_PERIOD_DAYS)),
        service.checkout(books[2], members[1], today - timedelta(days=2), today + timedelta(days=12)),
    ]
    returned = service.checkout(books[3], members[2], today - timedelta(days=20), today - timedelta(days=6))
    service.return_loan(returned, today - timedelta(days=5))
    loans.append(returned)

    return {"books": books, "members": members, "loans": loans}


def main():
    parser = argparse.ArgumentParser(
        description="Reset the Circulation database (DROP + CREATE + SEED)"
    )
    parser.add_argument(
        "--db-uri",
        type=str,
        default=DB_URI,
        help="SQLAlchemy database URI (defaults to the configured DB_URI)"
    )
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL.upper())
    db = Database(args.db_uri)
    try:
        created = seed(db, date.today())
    except CirculationError as e:
        logger.error(f"Database reset failed: {e}")
        sys.exit(1)
    finally:
        db.dispose()

    print(f"Seeded {len(created['books'])} books, {len(created['members'])} members "
          f"and {len(created['loans'])} loans.")


if __name__ == "__main__":
    main()
