#!/usr/bin/env python

"""
    Core module for Circulation: store handle, loan store,
    book/member lookups and the loan lifecycle service.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from circulation.core.db import Database, Base
from circulation.core.loans import LoanStore
from circulation.core.catalog import BookDirectory, MemberDirectory
from circulation.core.service import LoanService


def build_service(db: Database, max_active_loans_per_member: int = 0) -> LoanService:
    """Wires a LoanService and its collaborators onto one store handle."""
    return LoanService(
        LoanStore(db),
        books=BookDirectory(db),
        members=MemberDirectory(db),
        max_active_loans_per_member=max_active_loans_per_member,
    )


__all__ = [
    "Database", "Base", "LoanStore", "BookDirectory", "MemberDirectory",
    "LoanService", "build_service"
]
