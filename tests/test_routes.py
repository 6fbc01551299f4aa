#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
    tests.test_routes
    ~~~~~~~~~~~~~~~~~

    HTTP surface of the loan API, including how service errors map onto
    status codes.

    :copyright: (c) 2025 by Authors.
    :license: see LICENSE for more details.
"""

from datetime import date, timedelta
from unittest.mock import MagicMock
import pytest
from fastapi.testclient import TestClient
from circulation.app import create_app
from circulation.core import LoanService
from circulation.core.exceptions import StorageError

D0 = date(2025, 1, 1)
API = "/v1/api"


@pytest.fixture
def client(service):
    with TestClient(create_app(service)) as c:
        yield c


def checkout(client, book_id, member_id, **extra):
    payload = {"book_id": book_id, "member_id": member_id, "checkout_date": D0.isoformat()}
    payload.update(extra)
    return client.post(f"{API}/loans", json=payload)


def test_checkout_and_fetch(client, book_ids, member_ids):
    response = checkout(client, book_ids[0], member_ids[0], due_date="2025-01-20")
    assert response.status_code == 201
    body = response.json()
    assert body["due_date"] == "2025-01-20"

    loan = client.get(f"{API}/loans/{body['loan_id']}").json()
    assert loan["book_id"] == book_ids[0]
    assert loan["member_id"] == member_ids[0]
    assert loan["checkout_date"] == "2025-01-01"
    assert loan["return_date"] is None


def test_checkout_default_and_custom_loan_period(client, book_ids, member_ids):
    default = checkout(client, book_ids[0], member_ids[0]).json()
    assert default["due_date"] == (D0 + timedelta(days=14)).isoformat()

    custom = checkout(client, book_ids[1], member_ids[0], loan_days=30).json()
    assert custom["due_date"] == (D0 + timedelta(days=30)).isoformat()

    zero = checkout(client, book_ids[2], member_ids[0], loan_days=0).json()
    assert zero["due_date"] == (D0 + timedelta(days=14)).isoformat()


def test_checkout_bad_requests(client, book_ids, member_ids):
    assert checkout(client, 0, member_ids[0]).status_code == 400
    assert checkout(client, book_ids[0], member_ids[0], due_date="2024-12-31").status_code == 400
    assert checkout(client, book_ids[0], member_ids[0], loan_days=-1).status_code == 400
    assert checkout(client, book_ids[0], member_ids[0], loan_days=5000).status_code == 400
    assert client.get(f"{API}/loans").json() == []


def test_checkout_unknown_references(client, book_ids, member_ids):
    assert checkout(client, 9999, member_ids[0]).status_code == 404
    assert checkout(client, book_ids[0], 9999).status_code == 404


def test_checkout_conflict_reports_active_loan(client, book_ids, member_ids):
    first = checkout(client, book_ids[0], member_ids[0], due_date="2025-01-15").json()

    response = checkout(client, book_ids[0], member_ids[1])

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["error"] == "conflict"
    assert detail["loan_id"] == first["loan_id"]
    assert detail["due_date"] == "2025-01-15"


def test_return_then_delete(client, book_ids, member_ids):
    loan_id = checkout(client, book_ids[0], member_ids[0]).json()["loan_id"]

    deleted = client.delete(f"{API}/loans/{loan_id}").json()
    assert deleted == {"loan_id": loan_id, "deleted": False}

    returned = client.post(f"{API}/loans/{loan_id}/return", json={"return_date": "2025-01-05"})
    assert returned.status_code == 200
    assert returned.json() == {"loan_id": loan_id, "returned": True}

    again = client.post(f"{API}/loans/{loan_id}/return", json={"return_date": "2025-01-06"})
    assert again.json()["returned"] is False
    assert client.get(f"{API}/loans/{loan_id}").json()["return_date"] == "2025-01-05"

    assert client.delete(f"{API}/loans/{loan_id}").json()["deleted"] is True
    assert client.get(f"{API}/loans/{loan_id}").status_code == 404


def test_return_rejects_date_before_checkout(client, book_ids, member_ids):
    loan_id = checkout(client, book_ids[0], member_ids[0]).json()["loan_id"]
    response = client.post(f"{API}/loans/{loan_id}/return", json={"return_date": "2024-12-01"})
    assert response.status_code == 400


def test_update_loan(client, book_ids, member_ids):
    loan_id = checkout(client, book_ids[0], member_ids[0]).json()["loan_id"]

    response = client.patch(f"{API}/loans/{loan_id}", json={"due_date": "2025-02-01"})
    assert response.status_code == 200
    assert response.json()["due_date"] == "2025-02-01"

    moved = client.patch(f"{API}/loans/{loan_id}", json={"member_id": member_ids[1]})
    assert moved.status_code == 409
    assert moved.json()["detail"]["loan_id"] == loan_id

    assert client.patch(f"{API}/loans/9999", json={"due_date": "2025-02-01"}).status_code == 404


def test_update_with_null_book_is_a_bad_request(client, book_ids, member_ids):
    loan_id = checkout(client, book_ids[0], member_ids[0]).json()["loan_id"]

    response = client.patch(f"{API}/loans/{loan_id}", json={"book_id": None, "due_date": "2025-01-20"})

    assert response.status_code == 400
    assert client.get(f"{API}/loans/{loan_id}").json()["due_date"] == "2025-01-15"


def test_list_queries(client, book_ids, member_ids):
    a = checkout(client, book_ids[0], member_ids[0], due_date="2025-01-10").json()["loan_id"]
    b = checkout(client, book_ids[1], member_ids[1], due_date="2025-01-20").json()["loan_id"]

    assert {l["id"] for l in client.get(f"{API}/loans").json()} == {a, b}
    assert [l["id"] for l in client.get(f"{API}/loans/active").json()] == [a, b]
    assert [l["id"] for l in client.get(f"{API}/members/{member_ids[1]}/loans").json()] == [b]

    overdue = client.get(f"{API}/loans/overdue", params={"as_of": "2025-01-11"}).json()
    assert [l["id"] for l in overdue] == [a]
    assert client.get(f"{API}/loans/overdue", params={"as_of": "2025-01-10"}).json() == []

    assert client.get(f"{API}/members/0/loans").status_code == 400


def test_storage_failure_is_a_server_error():
    service = MagicMock(spec=LoanService)
    service.get_all.side_effect = StorageError("connection refused")

    with TestClient(create_app(service)) as client:
        response = client.get(f"{API}/loans")

    assert response.status_code == 500
