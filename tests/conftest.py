import os
import sys
from datetime import date
from pathlib import Path
import pytest

# Set TESTING before any circulation imports
os.environ["TESTING"] = "true"

project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from circulation.core import (
    Database,
    LoanStore,
    BookDirectory,
    MemberDirectory,
    LoanService,
)

D0 = date(2025, 1, 1)


@pytest.fixture
def db_path(tmp_path):
    # file backed so worker threads share the same data
    return tmp_path / "circulation.db"


@pytest.fixture
def db(db_path):
    database = Database(f"sqlite:///{db_path}")
    database.init()
    yield database
    database.dispose()


@pytest.fixture
def store(db):
    return LoanStore(db)


@pytest.fixture
def books(db):
    return BookDirectory(db)


@pytest.fixture
def members(db):
    return MemberDirectory(db)


@pytest.fixture
def service(store, books, members):
    return LoanService(store, books=books, members=members)


@pytest.fixture
def book_ids(books):
    return [books.add(f"Test Book {i}", f"Test Author {i}").id for i in range(1, 6)]


@pytest.fixture
def member_ids(members):
    return [
        members.add(f"Test Member {i}", email=f"member{i}@example.com").id
        for i in range(1, 4)
    ]
