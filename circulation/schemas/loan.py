#!/usr/bin/env python
"""
    Loan Schemas for Circulation,
    the shapes handed to callers and accepted from them.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from pydantic import BaseModel
from typing import Optional
from datetime import date

class Loan(BaseModel):
    id: int
    book_id: int
    member_id: int
    checkout_date: date
    due_date: date
    return_date: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.return_date is None

    def is_overdue(self, as_of: date) -> bool:
        return self.is_active and self.due_date < as_of

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "book_id": 3,
                "member_id": 2,
                "checkout_date": "2025-01-01",
                "due_date": "2025-01-15",
                "return_date": None
            }
        }

class LoanCreate(BaseModel):
    book_id: int
    member_id: int
    checkout_date: Optional[date] = None
    due_date: Optional[date] = None
    loan_days: Optional[int] = None

class LoanUpdate(BaseModel):
    """Only the fields explicitly set are applied."""
    book_id: Optional[int] = None
    member_id: Optional[int] = None
    checkout_date: Optional[date] = None
    due_date: Optional[date] = None
    return_date: Optional[date] = None

class LoanReturn(BaseModel):
    return_date: Optional[date] = None
