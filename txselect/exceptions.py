"""
Custom exceptions for txselect.

These are caller-input errors: the engine rejects immediately and never
returns a partial or empty result for bad input.
"""

from typing import Optional


class SelectionError(Exception):
    """
    Base class for selection input errors.

    Attributes:
        errors: List of validation error messages
    """

    def __init__(self, errors: list[str]):
        self.errors = errors
        message = "; ".join(errors) if errors else "Selection input invalid"
        super().__init__(message)


class InvalidConstraint(SelectionError):
    """Raised when max_gas or max_txs is negative."""

    pass


class InvalidTransaction(SelectionError):
    """
    Raised when a transaction is malformed (negative gas).

    Attributes:
        tx_id: Id of the offending transaction
    """

    def __init__(self, tx_id: Optional[str], errors: list[str]):
        self.tx_id = tx_id
        super().__init__(errors)
