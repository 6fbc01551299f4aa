#!/usr/bin/env python

"""
    Loan record store for Circulation.

    Every state transition is a single conditional statement scoped by a
    predicate on the row's current state, so two callers racing on the
    same loan can never both succeed. Each method runs in its own short
    session; nothing here holds a transaction across calls.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from circulation.core.db import Database
from circulation.core.models import Loan, ACTIVE_LOAN_PER_BOOK_INDEX
from circulation.core.exceptions import StorageError, ActiveLoanExistsError

logger = logging.getLogger(__name__)


class LoanStore:

    def __init__(self, db: Database):
        self.db = db

    @contextmanager
    def _session(self, action: str, passthrough=()):
        try:
            with self.db.get_db() as session:
                yield session
        except passthrough:
            raise
        except SQLAlchemyError as e:
            logger.error(f"SQL error while {action}: {e}")
            raise StorageError(f"Failed while {action}: {e}") from e

    def insert(self, book_id: int, member_id: int, checkout_date: date,
               due_date: date, return_date: Optional[date] = None) -> Loan:
        logger.debug(
            f"LoanStore.insert called (book_id={book_id}, member_id={member_id}, "
            f"checkout_date={checkout_date}, due_date={due_date}, return_date={return_date}).")
        loan = Loan(
            book_id=book_id,
            member_id=member_id,
            checkout_date=checkout_date,
            due_date=due_date,
            return_date=return_date,
        )
        try:
            with self._session(f"saving loan for book_id={book_id}", passthrough=IntegrityError) as session:
                session.add(loan)
                session.flush()
        except IntegrityError as e:
            if return_date is None and self._violates_active_loan_index(book_id, e):
                logger.info(f"Insert rejected: book_id={book_id} already has an active loan.")
                raise ActiveLoanExistsError(
                    f"Book id={book_id} already has an active loan.") from e
            logger.error(f"Integrity error while saving loan (book_id={book_id}, member_id={member_id}): {e.orig}")
            raise StorageError(f"Failed to save loan: {e.orig}") from e
        logger.info(f"Loan inserted successfully with id={loan.id}.")
        return loan

    def _violates_active_loan_index(self, book_id: int, error: IntegrityError) -> bool:
        message = str(error.orig)
        if ACTIVE_LOAN_PER_BOOK_INDEX in message or "loans.book_id" in message:
            return True
        # Some drivers only report a generic unique violation
        return self.find_active_by_book(book_id) is not None

    def find_by_id(self, loan_id: int) -> Optional[Loan]:
        logger.debug(f"LoanStore.find_by_id called (id={loan_id}).")
        with self._session(f"finding loan id={loan_id}") as session:
            return session.query(Loan).filter(Loan.id == loan_id).first()

    def exists_by_id(self, loan_id: int) -> bool:
        with self._session(f"checking loan existence for id={loan_id}") as session:
            return session.query(Loan.id).filter(Loan.id == loan_id).first() is not None

    def find_all(self) -> List[Loan]:
        with self._session("retrieving all loans") as session:
            loans = (
                session.query(Loan)
                .order_by(Loan.checkout_date.desc(), Loan.id.desc())
                .all()
            )
        logger.debug(f"LoanStore.find_all returning {len(loans)} loans.")
        return loans

    def find_by_member(self, member_id: int) -> List[Loan]:
        with self._session(f"finding loans for member_id={member_id}") as session:
            loans = (
                session.query(Loan)
                .filter(Loan.member_id == member_id)
                .order_by(Loan.checkout_date.desc(), Loan.id.desc())
                .all()
            )
        logger.debug(f"LoanStore.find_by_member returning {len(loans)} loans for member_id={member_id}.")
        return loans

    def find_active(self) -> List[Loan]:
        with self._session("finding active loans") as session:
            return (
                session.query(Loan)
                .filter(Loan.return_date == None)  # noqa: E711
                .order_by(Loan.due_date, Loan.id)
                .all()
            )

    def find_overdue(self, as_of: date) -> List[Loan]:
        """Active loans whose due date is strictly before `as_of`."""
        with self._session(f"finding overdue loans for date={as_of}") as session:
            loans = (
                session.query(Loan)
                .filter(Loan.return_date == None, Loan.due_date < as_of)  # noqa: E711
                .order_by(Loan.due_date, Loan.id)
                .all()
            )
        logger.debug(f"LoanStore.find_overdue returning {len(loans)} loans for date={as_of}.")
        return loans

    def find_active_by_book(self, book_id: int) -> Optional[Loan]:
        with self._session(f"finding active loan for book_id={book_id}") as session:
            return (
                session.query(Loan)
                .filter(Loan.book_id == book_id, Loan.return_date == None)  # noqa: E711
                .order_by(Loan.checkout_date.desc())
                .first()
            )

    def count_active_by_member(self, member_id: int) -> int:
        with self._session(f"counting active loans for member_id={member_id}") as session:
            return (
                session.query(Loan)
                .filter(Loan.member_id == member_id, Loan.return_date == None)  # noqa: E711
                .count()
            )

    def set_return_date(self, loan_id: int, return_date: date) -> bool:
        """UPDATE ... WHERE id = ? AND return_date IS NULL.

        Returns True only for the caller whose statement closed the loan.
        """
        logger.debug(f"LoanStore.set_return_date called (loan_id={loan_id}, return_date={return_date}).")
        with self._session(f"setting return date for loan_id={loan_id}") as session:
            rows = (
                session.query(Loan)
                .filter(Loan.id == loan_id, Loan.return_date == None)  # noqa: E711
                .update({Loan.return_date: return_date}, synchronize_session=False)
            )
        success = rows == 1
        logger.info(f"Loan return update (loan_id={loan_id}) success={success} rows={rows}")
        return success

    def update_dates(self, loan_id: int, checkout_date: date, due_date: date,
                     return_date: Optional[date], expected_return_date: Optional[date]) -> bool:
        """Rewrites the dates only if return_date still equals `expected_return_date`."""
        logger.debug(f"LoanStore.update_dates called (loan_id={loan_id}).")
        criteria = [Loan.id == loan_id]
        if expected_return_date is None:
            criteria.append(Loan.return_date == None)  # noqa: E711
        else:
            criteria.append(Loan.return_date == expected_return_date)
        with self._session(f"updating loan id={loan_id}") as session:
            rows = (
                session.query(Loan)
                .filter(*criteria)
                .update({
                    Loan.checkout_date: checkout_date,
                    Loan.due_date: due_date,
                    Loan.return_date: return_date,
                }, synchronize_session=False)
            )
        if rows != 1:
            logger.warning(f"Loan update (id={loan_id}) matched {rows} rows; state changed underneath.")
            return False
        logger.info(f"Loan updated successfully (id={loan_id}).")
        return True

    def delete_if_returned(self, loan_id: int) -> bool:
        """DELETE ... WHERE id = ? AND return_date IS NOT NULL."""
        logger.debug(f"LoanStore.delete_if_returned called (loan_id={loan_id}).")
        with self._session(f"deleting returned loan_id={loan_id}") as session:
            rows = (
                session.query(Loan)
                .filter(Loan.id == loan_id, Loan.return_date != None)  # noqa: E711
                .delete(synchronize_session=False)
            )
        success = rows == 1
        logger.info(f"Loan delete_if_returned (loan_id={loan_id}) success={success} rows={rows}")
        return success
