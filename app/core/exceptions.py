# app/core/exceptions.py

"""Error kinds raised by the friendship ledger.

The ledger never answers with a silent no-op: every rejected operation
raises one of these, and the HTTP layer alone decides how it is shown.
"""


class LedgerError(Exception):
    """Base class for all ledger errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(LedgerError):
    """Missing, self-referential or empty input. Fixable by the caller."""


class NotFound(LedgerError):
    """No edge (or account) matches what the operation requires."""


class Conflict(LedgerError):
    """An edge already exists for the pair where one was to be created."""

    def __init__(self, message: str, status: str):
        super().__init__(message)
        self.status = status


class StoreFailure(LedgerError):
    """The underlying store failed. Opaque to callers."""
