from circulation.schemas.loan import Loan, LoanCreate, LoanUpdate, LoanReturn
from circulation.schemas.catalog import Book, Member

__all__ = ["Loan", "LoanCreate", "LoanUpdate", "LoanReturn", "Book", "Member"]
