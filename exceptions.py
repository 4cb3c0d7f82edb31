"""
Domain exceptions for the settle-up service.

The store raises these; the HTTP layer translates them into
status codes.
"""


class SettleUpError(Exception):
    """Base exception for settle-up errors."""
    status_code = 400

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail


class GroupNotFoundError(SettleUpError):
    """Raised when a group id is unknown to the store."""
    status_code = 404


class ExpenseNotFoundError(SettleUpError):
    """Raised when an expense id is unknown within its group."""
    status_code = 404


class InvalidGroupError(SettleUpError):
    """Raised when group fields fail validation (blank name, duplicate members)."""
    pass


class InvalidExpenseError(SettleUpError):
    """Raised when an expense references non-members or has a bad amount."""
    pass
