class LedgerError(Exception):
    """Base class for rejected ledger mutations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidDateError(LedgerError):
    pass


class DuplicateCodeError(LedgerError):
    pass


class DuplicateHolidayError(DuplicateCodeError):
    pass


class ReferentialConflictError(LedgerError):
    pass


class InvalidLookupIdError(LedgerError):
    pass
