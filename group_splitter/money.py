"""
Money Module

Shared monetary helpers for the balance engine.

Every place that decides whether an amount is "zero", "owed" or "owing"
goes through this module so the aggregator, the simplifier and the split
validator all use the same threshold.

Constants:
    EPSILON: Amounts with absolute value below this are treated as settled.

Functions:
    to_decimal: Convert a number to Decimal without binary float noise.
    round_money: Round to 2 decimal places (ROUND_HALF_UP).
    is_settled: True if an amount is within tolerance of zero.
    classify: Three-way classification into creditor / debtor / settled.
    require_positive_amount: Validate a user-supplied amount.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum

from group_splitter.errors import InvalidInputError


EPSILON = Decimal("0.01")

CENT = Decimal("0.01")


class Position(str, Enum):
    """Where a net balance sits relative to zero."""

    CREDITOR = "creditor"
    DEBTOR = "debtor"
    SETTLED = "settled"


def to_decimal(value) -> Decimal:
    """
    Convert a number to Decimal.

    Floats go through str() first so 0.1 becomes Decimal("0.1") rather
    than its exact binary expansion.

    Args:
        value: int, float, str or Decimal.

    Returns:
        Decimal: The converted value.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    """
    Round an amount to 2 decimal places using ROUND_HALF_UP.

    Args:
        value: Amount to round.

    Returns:
        Decimal: Rounded amount.
    """
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def is_settled(value) -> bool:
    """Return True if the amount is strictly within EPSILON of zero."""
    return abs(to_decimal(value)) < EPSILON


def classify(value) -> Position:
    """
    Classify a net balance.

    Args:
        value: Net balance (positive = owed money, negative = owes money).

    Returns:
        Position: CREDITOR if value >= EPSILON, DEBTOR if value <= -EPSILON,
            SETTLED otherwise.
    """
    amount = to_decimal(value)
    if is_settled(amount):
        return Position.SETTLED
    if amount > 0:
        return Position.CREDITOR
    return Position.DEBTOR


def require_positive_amount(amount, field_name: str = "amount") -> Decimal:
    """
    Validate a user-supplied monetary amount.

    Args:
        amount: int, float or Decimal. bool is rejected.
        field_name: Name of the field for error messages.

    Returns:
        Decimal: The amount as a Decimal.

    Raises:
        InvalidInputError: If the amount is not a number, not finite, not
            positive, or too large to be held to the cent.
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        raise InvalidInputError(f"{field_name} must be a positive number, got: {amount!r}")

    value = to_decimal(amount)
    if not value.is_finite() or value <= 0:
        raise InvalidInputError(f"{field_name} must be a positive number, got: {amount}")

    try:
        value.quantize(CENT)
    except InvalidOperation:
        raise InvalidInputError(f"{field_name} is too large, got: {amount}") from None

    return value
