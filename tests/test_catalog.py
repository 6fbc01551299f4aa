from datetime import date, timedelta
import pytest
from circulation.core.exceptions import InvalidArgumentError
from circulation.schemas import Book, Member

D0 = date(2025, 1, 1)


def test_add_and_get_book(books):
    book = books.add("Effective Java", "Joshua Bloch", isbn="978-0134685991", publication_year=2018)

    found = Book.model_validate(books.get(book.id))
    assert found.title == "Effective Java"
    assert found.publication_year == 2018
    assert books.exists(book.id)
    assert not books.exists(book.id + 100)
    assert books.get(0) is None
    assert not books.exists(-1)


def test_book_requires_title_and_author(books):
    with pytest.raises(InvalidArgumentError):
        books.add("", "Someone")
    with pytest.raises(InvalidArgumentError):
        books.add("Something", None)


def test_book_publication_year_checked_by_storage(books):
    with pytest.raises(InvalidArgumentError):
        books.add("Old Scroll", "Unknown", publication_year=900)


def test_add_and_get_member(members):
    member = members.add("Alice Johnson", email="alice@example.com", phone="")

    found = Member.model_validate(members.get(member.id))
    assert found.name == "Alice Johnson"
    assert found.phone is None
    assert members.exists(member.id)


def test_member_email_is_unique(members):
    members.add("Alice", email="shared@example.com")
    with pytest.raises(InvalidArgumentError):
        members.add("Another Alice", email="shared@example.com")
    # members without an email do not collide
    members.add("Bob")
    members.add("Charlie", email="")


def test_loan_history_lookups(service, books, members, book_ids, member_ids):
    assert not books.is_checked_out(book_ids[0])
    assert not books.has_any_loan_history(book_ids[0])

    loan_id = service.checkout(book_ids[0], member_ids[0], D0, D0 + timedelta(days=14))
    assert books.is_checked_out(book_ids[0])
    assert members.has_active_loans(member_ids[0])

    service.return_loan(loan_id, D0 + timedelta(days=1))
    assert not books.is_checked_out(book_ids[0])
    assert books.has_any_loan_history(book_ids[0])
    assert members.has_any_loan_history(member_ids[0])
    assert not members.has_active_loans(member_ids[0])
    assert not members.has_any_loan_history(member_ids[1])
