#!/usr/bin/env python

"""
    Models for Circulation,
    including the books, members and loans tables and the
    constraints that keep loans consistent at the storage layer.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from sqlalchemy import (
    Column, String, Integer, BigInteger, Date, ForeignKey,
    CheckConstraint, Index, text
)
from sqlalchemy.ext.hybrid import hybrid_property
from circulation.core.db import Base

# SQLite only autoincrements INTEGER PRIMARY KEY columns
Identifier = BigInteger().with_variant(Integer, "sqlite")

ACTIVE_LOAN_PER_BOOK_INDEX = 'uq_loans_one_active_loan_per_book'


class Book(Base):
    __tablename__ = 'books'

    id = Column(Identifier, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    isbn = Column(String(20))
    publication_year = Column(Integer)

    __table_args__ = (
        CheckConstraint(
            'publication_year IS NULL OR (publication_year BETWEEN 1400 AND 3000)',
            name='books_publication_year_chk'),
        Index('idx_books_title_author', 'title', 'author'),
    )


class Member(Base):
    __tablename__ = 'members'

    id = Column(Identifier, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), unique=True)
    phone = Column(String(30))

    __table_args__ = (
        Index('idx_members_name', 'name'),
    )


class Loan(Base):
    __tablename__ = 'loans'

    id = Column(Identifier, primary_key=True, autoincrement=True)
    book_id = Column(Identifier, ForeignKey('books.id', ondelete='RESTRICT'), nullable=False)
    member_id = Column(Identifier, ForeignKey('members.id', ondelete='RESTRICT'), nullable=False)
    checkout_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    return_date = Column(Date, nullable=True)

    __table_args__ = (
        CheckConstraint('due_date >= checkout_date', name='loans_due_after_checkout_chk'),
        CheckConstraint(
            'return_date IS NULL OR return_date >= checkout_date',
            name='loans_return_after_checkout_chk'),
        # Holds even for writers that bypass LoanService
        Index(
            ACTIVE_LOAN_PER_BOOK_INDEX, 'book_id', unique=True,
            postgresql_where=text('return_date IS NULL'),
            sqlite_where=text('return_date IS NULL')),
        Index('idx_loans_member_id', 'member_id'),
        Index(
            'idx_loans_active', 'return_date',
            postgresql_where=text('return_date IS NULL'),
            sqlite_where=text('return_date IS NULL')),
        Index(
            'idx_loans_due_date_active', 'due_date',
            postgresql_where=text('return_date IS NULL'),
            sqlite_where=text('return_date IS NULL')),
    )

    @hybrid_property
    def is_active(self):
        """True while the copy is still out."""
        return self.return_date == None  # noqa: E711

    def __repr__(self):
        return f"<Loan id={self.id} book_id={self.book_id} member_id={self.member_id} return_date={self.return_date}>"
