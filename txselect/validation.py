"""
Input validation for txselect.

Validators are pure and return lists of error messages. validate_and_raise
converts them into InvalidConstraint / InvalidTransaction at the engine
boundary.
"""

from typing import Optional

from txselect.exceptions import InvalidConstraint, InvalidTransaction
from txselect.models import SelectionConstraints, Transaction


# =============================================================================
# Constraint Validation
# =============================================================================


def validate_constraints(constraints: SelectionConstraints) -> list[str]:
    """Validate selection constraints. Returns list of errors."""
    errors: list[str] = []

    if constraints.max_gas < 0:
        errors.append(f"max_gas must be >= 0 (got {constraints.max_gas})")

    if constraints.max_txs < 0:
        errors.append(f"max_txs must be >= 0 (got {constraints.max_txs})")

    return errors


# =============================================================================
# Transaction Validation
# =============================================================================


def validate_transaction(tx: Transaction) -> list[str]:
    """
    Validate a single transaction. Returns list of errors.

    Note: Pydantic already enforces nonce >= 0 and price >= 0.
    Gas is checked here so the error can name the transaction.
    """
    errors: list[str] = []

    if tx.gas < 0:
        errors.append(f"Transaction {tx.id}: gas must be >= 0 (got {tx.gas})")

    return errors


# =============================================================================
# Convenience Functions
# =============================================================================


def validate_and_raise(
    transactions: Optional[list[Transaction]] = None,
    constraints: Optional[SelectionConstraints] = None,
) -> None:
    """
    Validate inputs and raise on the first failing category.

    Constraints are checked before transactions. InvalidTransaction carries
    the id of the first offending transaction.
    """
    if constraints is not None:
        errors = validate_constraints(constraints)
        if errors:
            raise InvalidConstraint(errors)

    if transactions is not None:
        for tx in transactions:
            errors = validate_transaction(tx)
            if errors:
                raise InvalidTransaction(tx.id, errors)
