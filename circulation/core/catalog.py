#!/usr/bin/env python

"""
    Book and member lookups consumed by the loan service.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from circulation.core.db import Database
from circulation.core.models import Book, Member, Loan
from circulation.core.validators import is_positive_id
from circulation.core.exceptions import StorageError, InvalidArgumentError

logger = logging.getLogger(__name__)


class _Directory:

    model = None

    def __init__(self, db: Database):
        self.db = db

    def _add(self, record):
        name = self.model.__name__.lower()
        try:
            with self.db.get_db() as session:
                session.add(record)
                session.flush()
        except IntegrityError as e:
            logger.warning(f"Rejected {name} insert: {e.orig}")
            raise InvalidArgumentError(f"Invalid {name}: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"SQL error while saving {name}: {e}")
            raise StorageError(f"Failed to save {name}: {e}") from e
        logger.info(f"{self.model.__name__} inserted successfully with id={record.id}.")
        return record

    def get(self, record_id):
        if not is_positive_id(record_id):
            return None
        with self.db.get_db() as session:
            return session.query(self.model).filter(self.model.id == record_id).first()

    def exists(self, record_id) -> bool:
        if not is_positive_id(record_id):
            return False
        with self.db.get_db() as session:
            return session.query(self.model.id).filter(self.model.id == record_id).first() is not None

    def _has_loans(self, column, record_id, active_only=False) -> bool:
        if not is_positive_id(record_id):
            return False
        with self.db.get_db() as session:
            query = session.query(Loan.id).filter(column == record_id)
            if active_only:
                query = query.filter(Loan.return_date == None)  # noqa: E711
            return query.first() is not None


class BookDirectory(_Directory):

    model = Book

    def add(self, title: str, author: str, isbn: Optional[str] = None,
            publication_year: Optional[int] = None) -> Book:
        if not title or not author:
            raise InvalidArgumentError("title and author are required.")
        return self._add(Book(
            title=title, author=author, isbn=isbn,
            publication_year=publication_year))

    def is_checked_out(self, book_id) -> bool:
        return self._has_loans(Loan.book_id, book_id, active_only=True)

    def has_any_loan_history(self, book_id) -> bool:
        return self._has_loans(Loan.book_id, book_id)


class MemberDirectory(_Directory):

    model = Member

    def add(self, name: str, email: Optional[str] = None,
            phone: Optional[str] = None) -> Member:
        if not name:
            raise InvalidArgumentError("name is required.")
        # blank optional fields are stored as NULL
        return self._add(Member(
            name=name, email=(email or None), phone=(phone or None)))

    def has_any_loan_history(self, member_id) -> bool:
        return self._has_loans(Loan.member_id, member_id)

    def has_active_loans(self, member_id) -> bool:
        return self._has_loans(Loan.member_id, member_id, active_only=True)
