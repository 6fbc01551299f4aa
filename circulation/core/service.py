#!/usr/bin/env python

"""
    Loan lifecycle service for Circulation:
    checkout, return, update, delete and the loan queries.

    The checks made here before writing are for friendly error messages
    only. The guarantees come from the store: the partial unique index on
    active loans per book, and conditional UPDATE/DELETE statements.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import logging
from datetime import date
from typing import List, Optional
from circulation.core.loans import LoanStore
from circulation.core.catalog import BookDirectory, MemberDirectory
from circulation.core.validators import (
    validate_loan_fields,
    require_positive_id,
    require_date,
    is_positive_id,
)
from circulation.core.exceptions import (
    InvalidArgumentError,
    LoanNotFoundError,
    BookNotFoundError,
    MemberNotFoundError,
    ConflictError,
    BookCheckedOutError,
    LoanLimitError,
    AssociationChangeError,
    ActiveLoanExistsError,
)
from circulation.schemas import Loan, LoanUpdate

logger = logging.getLogger(__name__)


class LoanService:

    def __init__(self, store: LoanStore, books: Optional[BookDirectory] = None,
                 members: Optional[MemberDirectory] = None,
                 max_active_loans_per_member: int = 0):
        """
        Args:
            store: the loan record store; required.
            books, members: existence lookups. When given, checkout
                refuses unknown books and members with NotFoundError
                instead of relying on the foreign keys.
            max_active_loans_per_member: cap on a member's active loans,
                0 disables it.
        """
        if store is None:
            logger.error("Attempted to initialize LoanService without a store.")
            raise InvalidArgumentError("store cannot be None.")
        if isinstance(max_active_loans_per_member, bool) or not isinstance(max_active_loans_per_member, int) \
                or max_active_loans_per_member < 0:
            raise InvalidArgumentError("max_active_loans_per_member must be 0 or a positive number.")
        self.store = store
        self.books = books
        self.members = members
        self.max_active_loans_per_member = max_active_loans_per_member
        logger.debug(f"LoanService initialized (max_active_loans_per_member={max_active_loans_per_member}).")

    @staticmethod
    def _to_model(entity) -> Loan:
        return Loan.model_validate(entity)

    @staticmethod
    def _validate(book_id, member_id, checkout_date, due_date, return_date=None):
        try:
            validate_loan_fields(book_id, member_id, checkout_date, due_date, return_date)
        except InvalidArgumentError as e:
            logger.warning(f"Loan validation failed: {e}")
            raise

    @staticmethod
    def _checked_out(book_id, active=None) -> BookCheckedOutError:
        if active is None:
            return BookCheckedOutError(f"Book id={book_id} is already checked out.")
        return BookCheckedOutError(
            f"Book id={book_id} is already checked out "
            f"(active loan id={active.id}, due={active.due_date}).",
            loan_id=active.id, due_date=active.due_date)

    def _require_known(self, book_id: int, member_id: int) -> None:
        if self.books is not None and not self.books.exists(book_id):
            logger.info(f"Checkout blocked: no book found with id={book_id}")
            raise BookNotFoundError(f"No book found with id={book_id}")
        if self.members is not None and not self.members.exists(member_id):
            logger.info(f"Checkout blocked: no member found with id={member_id}")
            raise MemberNotFoundError(f"No member found with id={member_id}")

    def checkout(self, book_id: int, member_id: int, checkout_date: date, due_date: date) -> int:
        """Creates an active loan and returns its id.

        Raises:
            InvalidArgumentError: malformed ids or dates.
            BookNotFoundError, MemberNotFoundError: unknown references.
            BookCheckedOutError: the book already has an active loan,
                whether found by the precheck or by the store rejecting
                a concurrent insert.
            LoanLimitError: the member is at the active-loan cap.
            StorageError: any other storage failure.
        """
        logger.debug(f"checkout called. book_id={book_id}, member_id={member_id}")
        self._validate(book_id, member_id, checkout_date, due_date)
        self._require_known(book_id, member_id)

        if active := self.store.find_active_by_book(book_id):
            logger.info(f"Checkout blocked: book_id={book_id} already has an active loan (id={active.id}, due={active.due_date})")
            raise self._checked_out(book_id, active)

        if self.max_active_loans_per_member > 0:
            active_count = self.store.count_active_by_member(member_id)
            if active_count >= self.max_active_loans_per_member:
                logger.info(
                    f"Checkout blocked: member_id={member_id} has {active_count} active loans "
                    f"(limit={self.max_active_loans_per_member}).")
                raise LoanLimitError(
                    f"Member has reached the active loan limit ({self.max_active_loans_per_member}).")

        try:
            loan = self.store.insert(book_id, member_id, checkout_date, due_date)
        except ActiveLoanExistsError as e:
            active = self.store.find_active_by_book(book_id)
            logger.info(f"Checkout blocked by storage: book_id={book_id} was checked out concurrently")
            raise self._checked_out(book_id, active) from e

        logger.info(f"Loan created successfully with id={loan.id} (book_id={book_id}, member_id={member_id})")
        return loan.id

    def return_loan(self, loan_id: int, return_date: date) -> bool:
        """Closes an active loan.

        Returns False when the loan does not exist or was already returned,
        including when a concurrent caller returned it first.
        """
        logger.debug(f"return_loan called. loan_id={loan_id}, return_date={return_date}")
        if not is_positive_id(loan_id):
            logger.warning(f"return_loan called with invalid loan_id={loan_id}")
            raise InvalidArgumentError("loan_id must be a positive number.")
        require_date(return_date, "return_date")

        loan = self.store.find_by_id(loan_id)
        if loan is None:
            logger.info(f"return_loan: no loan found with id={loan_id}")
            return False
        if loan.return_date is not None:
            logger.info(f"return_loan: loan id={loan_id} already returned on {loan.return_date}")
            return False
        if return_date < loan.checkout_date:
            logger.warning(
                f"return_loan validation failed: return_date {return_date} is before "
                f"checkout_date {loan.checkout_date} for loan_id={loan_id}")
            raise InvalidArgumentError("return_date cannot be before checkout_date.")

        success = self.store.set_return_date(loan_id, return_date)
        if success:
            logger.info(f"Loan returned successfully for loan_id={loan_id} on {return_date}")
        else:
            logger.info(f"return_loan: no active loan updated for loan_id={loan_id} (already returned or not found).")
        return success

    def update(self, loan_id: int, fields: LoanUpdate) -> Loan:
        """Applies the date fields set on `fields` to an existing loan.

        Book and member are fixed once a loan exists, and a recorded
        return date is never changed or cleared.
        """
        logger.debug(f"update called for id={loan_id}")
        if not is_positive_id(loan_id):
            logger.warning(f"update called with invalid id={loan_id}")
            raise InvalidArgumentError("id must be a positive number.")
        if fields is None:
            raise InvalidArgumentError("loan fields are required.")

        existing = self.store.find_by_id(loan_id)
        if existing is None:
            logger.info(f"update failed: no loan found with id={loan_id}")
            raise LoanNotFoundError(f"No loan found with id={loan_id}")

        changes = fields.model_dump(exclude_unset=True)
        for name in ("book_id", "member_id"):
            if name in changes and changes[name] is None:
                logger.warning(f"update rejected: {name} cannot be null (loan id={loan_id}).")
                raise InvalidArgumentError(f"{name} cannot be null.")
            if name in changes and changes[name] != getattr(existing, name):
                logger.warning(
                    f"update blocked: attempted to change {name} on loan id={loan_id} "
                    f"({getattr(existing, name)} -> {changes[name]}).")
                raise AssociationChangeError(
                    f"Cannot change {name} for an existing loan.",
                    loan_id=existing.id, due_date=existing.due_date)

        checkout_date = changes.get("checkout_date", existing.checkout_date)
        due_date = changes.get("due_date", existing.due_date)
        return_date = changes.get("return_date", existing.return_date)
        self._validate(existing.book_id, existing.member_id, checkout_date, due_date, return_date)

        if existing.return_date is not None and return_date != existing.return_date:
            logger.warning(f"update blocked: loan id={loan_id} was already returned on {existing.return_date}.")
            raise ConflictError(
                f"Loan id={loan_id} was returned on {existing.return_date}; its return date cannot change.",
                loan_id=existing.id, due_date=existing.due_date)

        if not self.store.update_dates(loan_id, checkout_date, due_date, return_date,
                                       expected_return_date=existing.return_date):
            raise ConflictError(
                f"Loan id={loan_id} was changed or removed while it was being updated.",
                loan_id=existing.id, due_date=existing.due_date)

        logger.info(f"Loan updated successfully for id={loan_id}")
        return Loan(
            id=existing.id,
            book_id=existing.book_id,
            member_id=existing.member_id,
            checkout_date=checkout_date,
            due_date=due_date,
            return_date=return_date,
        )

    def delete(self, loan_id: int) -> bool:
        """Removes a returned loan; active loans are never deleted."""
        logger.debug(f"delete called for id={loan_id}")
        if not is_positive_id(loan_id):
            logger.warning(f"delete called with invalid id={loan_id}")
            return False
        if not self.store.exists_by_id(loan_id):
            logger.info(f"delete skipped: no loan found with id={loan_id}")
            return False
        if not self.store.delete_if_returned(loan_id):
            logger.info(f"delete blocked or not found: loan id={loan_id} is active or does not exist.")
            return False
        logger.info(f"Loan deleted successfully for id={loan_id}")
        return True

    def get_by_id(self, loan_id: int) -> Optional[Loan]:
        if not is_positive_id(loan_id):
            logger.warning(f"get_by_id called with invalid id={loan_id}")
            return None
        entity = self.store.find_by_id(loan_id)
        if entity is None:
            logger.info(f"No loan found with id={loan_id}")
            return None
        return self._to_model(entity)

    def get_all(self) -> List[Loan]:
        return [self._to_model(e) for e in self.store.find_all()]

    def by_member(self, member_id: int) -> List[Loan]:
        require_positive_id(member_id, "member_id")
        return [self._to_model(e) for e in self.store.find_by_member(member_id)]

    def active_loans(self) -> List[Loan]:
        return [self._to_model(e) for e in self.store.find_active()]

    def overdue_loans(self, as_of: date) -> List[Loan]:
        """Active loans with a due date strictly before `as_of`."""
        require_date(as_of, "as_of")
        return [self._to_model(e) for e in self.store.find_overdue(as_of)]
