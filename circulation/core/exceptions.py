
class CirculationError(Exception): pass

class InvalidArgumentError(CirculationError, ValueError): pass

class NotFoundError(CirculationError): pass

class LoanNotFoundError(NotFoundError): pass

class BookNotFoundError(NotFoundError): pass

class MemberNotFoundError(NotFoundError): pass

class ConflictError(CirculationError):
    """A business rule blocked the operation.

    `loan_id` and `due_date` name the competing loan when there is one,
    so callers can tell the patron when the copy is expected back.
    """

    def __init__(self, message, loan_id=None, due_date=None):
        super().__init__(message)
        self.loan_id = loan_id
        self.due_date = due_date

class BookCheckedOutError(ConflictError): pass

class LoanLimitError(ConflictError): pass

class AssociationChangeError(ConflictError): pass

class StorageError(CirculationError): pass

class ActiveLoanExistsError(StorageError): pass
