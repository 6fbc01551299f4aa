#!/usr/bin/env python

"""
    API routes for Circulation,
    exposing checkout, return and the loan queries over HTTP.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import logging
from datetime import date, timedelta
from functools import wraps
from typing import List, Optional
from fastapi import APIRouter, Request, HTTPException, status
from circulation.core.service import LoanService
from circulation.core.validators import normalize_loan_days
from circulation.core.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    ConflictError,
    StorageError,
)
from circulation.schemas import Loan, LoanCreate, LoanUpdate, LoanReturn

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> LoanService:
    return request.app.state.service


def translates_errors(func):
    """Maps circulation errors raised by the wrapped route onto HTTP errors."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except InvalidArgumentError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ConflictError as e:
            raise HTTPException(status_code=409, detail={
                "error": "conflict",
                "message": str(e),
                "loan_id": e.loan_id,
                "due_date": e.due_date.isoformat() if e.due_date else None,
            })
        except StorageError as e:
            logger.error(f"Storage failure serving request: {e}")
            raise HTTPException(status_code=500, detail=str(e))
    return wrapper


@router.get("/loans", response_model=List[Loan])
@translates_errors
def list_loans(request: Request):
    return get_service(request).get_all()


@router.get("/loans/active", response_model=List[Loan])
@translates_errors
def list_active_loans(request: Request):
    return get_service(request).active_loans()


@router.get("/loans/overdue", response_model=List[Loan])
@translates_errors
def list_overdue_loans(request: Request, as_of: Optional[date] = None):
    return get_service(request).overdue_loans(as_of or date.today())


@router.get("/loans/{loan_id}", response_model=Loan)
@translates_errors
def get_loan(request: Request, loan_id: int):
    if not (loan := get_service(request).get_by_id(loan_id)):
        raise HTTPException(status_code=404, detail=f"No loan found with id={loan_id}")
    return loan


@router.post("/loans", status_code=status.HTTP_201_CREATED)
@translates_errors
def checkout(request: Request, body: LoanCreate):
    """
    Checks a book out to a member. Without an explicit due date the loan
    runs `loan_days` days (0 or absent selects the default period).
    """
    checkout_date = body.checkout_date or date.today()
    due_date = body.due_date or checkout_date + timedelta(
        days=normalize_loan_days(body.loan_days))
    loan_id = get_service(request).checkout(body.book_id, body.member_id, checkout_date, due_date)
    return {"loan_id": loan_id, "due_date": due_date.isoformat()}


@router.post("/loans/{loan_id}/return", status_code=status.HTTP_200_OK)
@translates_errors
def return_loan(request: Request, loan_id: int, body: Optional[LoanReturn] = None):
    return_date = (body and body.return_date) or date.today()
    returned = get_service(request).return_loan(loan_id, return_date)
    return {"loan_id": loan_id, "returned": returned}


@router.patch("/loans/{loan_id}", response_model=Loan)
@translates_errors
def update_loan(request: Request, loan_id: int, body: LoanUpdate):
    return get_service(request).update(loan_id, body)


@router.delete("/loans/{loan_id}")
@translates_errors
def delete_loan(request: Request, loan_id: int):
    return {"loan_id": loan_id, "deleted": get_service(request).delete(loan_id)}


@router.get("/members/{member_id}/loans", response_model=List[Loan])
@translates_errors
def list_member_loans(request: Request, member_id: int):
    return get_service(request).by_member(member_id)
