"""
Splits Module

Helpers used while an expense is being composed.

Functions:
    split_equally: Divide an amount into equal per-member splits.
    validate_custom_splits: Check a manual breakdown adds up to the amount.
"""

from decimal import Decimal
from typing import Optional

from group_splitter.errors import InvalidInputError
from group_splitter.models import Split
from group_splitter.money import is_settled, require_positive_amount, round_money, to_decimal


def _split_amount(split):
    if isinstance(split.amount, bool) or not isinstance(split.amount, (int, float, Decimal)):
        raise InvalidInputError(f"split amount for '{split.member_id}' must be a number, got: {split.amount!r}")
    value = to_decimal(split.amount)
    if not value.is_finite():
        raise InvalidInputError(f"split amount for '{split.member_id}' must be finite, got: {split.amount}")
    return value


def split_equally(
    amount: float,
    member_ids: list[str],
    member_names: Optional[dict] = None,
    remainder_to: Optional[str] = None
) -> list[Split]:
    """
    Divide an amount equally among members.

    Each share is amount / len(member_ids) rounded to 2 decimal places, so
    the shares can miss the total by up to 0.01 * (n - 1). That drift is
    kept unless remainder_to names one of the members, in which case that
    member's share absorbs it and the splits add up to exactly amount.

    Args:
        amount: Total to divide (must be > 0).
        member_ids: Members sharing the expense (must be non-empty).
        member_names: Display names; accepted for call-site symmetry with
            compute_group_balances, not used in the result.
        remainder_to: Optional member ID that absorbs the rounding residual.

    Returns:
        list[Split]: One unsettled split per member, in input order.

    Raises:
        InvalidInputError: If amount is not a positive finite number or
            member_ids is empty.
    """
    total = require_positive_amount(amount)
    if not member_ids:
        raise InvalidInputError("member_ids must contain at least one member")
    if remainder_to is not None and remainder_to not in member_ids:
        raise InvalidInputError(f"remainder_to '{remainder_to}' is not one of the split members")

    share = round_money(total / len(member_ids))
    residual = total - share * len(member_ids)

    splits = []
    for member_id in member_ids:
        member_share = share
        if member_id == remainder_to:
            member_share = share + residual
            # Only the first occurrence absorbs the residual
            remainder_to = None
        splits.append(Split(member_id=member_id, amount=float(member_share), settled=False))

    return splits


def validate_custom_splits(amount: float, splits: list[Split]) -> bool:
    """
    Check that a manual split breakdown adds up to the expense amount.

    Args:
        amount: Expense amount (must be > 0).
        splits: Proposed splits.

    Returns:
        bool: True if |sum(split amounts) - amount| < 0.01.

    Raises:
        InvalidInputError: If amount is not a positive finite number, or any
            split amount is negative or not finite.
    """
    expected = require_positive_amount(amount)

    total = to_decimal(0)
    for split in splits:
        split_amount = _split_amount(split)
        if split_amount < 0:
            raise InvalidInputError(
                f"split amount for '{split.member_id}' must not be negative, got: {split.amount}"
            )
        total += split_amount

    return is_settled(total - expected)
