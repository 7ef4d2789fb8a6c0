"""
Exceptions raised by the withdrawal allocator and planner.

All of them are detected before any allocation work starts, so a caller
never sees a partial result.
"""

from typing import Optional


class AllocationError(Exception):
    """Base exception for all allocation errors."""
    pass


class InvalidInput(AllocationError):
    """Raised when a request is malformed or selects no account."""

    def __init__(self, reason: str, field: Optional[str] = None):
        self.reason = reason
        self.field = field

        msg = reason if field is None else f"Invalid {field}: {reason}"
        super().__init__(msg)


class InsufficientBalance(AllocationError):
    """Raised when the requested total exceeds what the selected accounts hold."""

    def __init__(self, requested: int, available: int, message: Optional[str] = None):
        self.requested = requested
        self.available = available

        if message is None:
            message = f"Requested {requested} exceeds available balance {available}"
        super().__init__(message)


class AllocationInvariantError(AllocationError):
    """Raised when the floor-division leftover is out of bounds (arithmetic bug)."""

    def __init__(self, leftover: int, account_count: int):
        self.leftover = leftover
        self.account_count = account_count
        super().__init__(
            f"Rounding leftover {leftover} is outside [0, {account_count}) "
            f"for {account_count} account(s)"
        )
