"""
Splitter Module

This module computes per-member balances for a group from its expenses.

Features:
    - Arbitrary per-member splits (equal or custom)
    - Settled splits are excluded from what a member owes
    - Recorded settlements can be netted against expense balances
    - Decimal accumulation, no intermediate rounding

Data Model:
    Input - expenses: list of Expense records
    Input - member_ids: roster, in display order
    Input - member_names: dict mapping member_id to display name

    Output - list of GroupBalance, one per roster member:
        - total_paid: sum of amounts of expenses this member paid
        - total_owed: sum of unsettled split amounts assigned to this member
        - balance: total_paid - total_owed

Functions:
    compute_group_balances: Calculate per-member balances from expenses.
    apply_settlements: Net recorded settlements into existing balances.
"""

from decimal import Decimal, InvalidOperation

from group_splitter.models import GroupBalance, UNKNOWN_MEMBER_NAME
from group_splitter.money import to_decimal


def _as_amount(value) -> Decimal:
    """Convert a stored amount to Decimal, treating garbage, NaN and infinities as zero."""
    try:
        amount = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return amount


def compute_group_balances(expenses, member_ids, member_names) -> list[GroupBalance]:
    """
    Calculate per-member balances from a group's expenses.

    For each expense:
        1. The payer's total_paid increases by the expense amount
        2. Each unsettled split adds its amount to that member's total_owed

    Args:
        expenses: List of Expense records.
        member_ids: Authoritative roster (may be empty).
        member_names: Dict mapping member_id to display name.

    Returns:
        list[GroupBalance]: Exactly one entry per roster member, in roster order.

    Notes:
        - Payers and split members outside the roster are dropped
        - Members with no name mapping get the "Unknown" label
        - Does NOT round; display code rounds to 2 decimal places
    """
    member_names = member_names or {}

    # Decimal totals keyed by member, initialised for the whole roster
    paid = {member_id: Decimal("0") for member_id in member_ids}
    owed = {member_id: Decimal("0") for member_id in member_ids}

    for expense in expenses:
        if expense.paid_by in paid:
            paid[expense.paid_by] += _as_amount(expense.amount)

        for split in expense.splits or []:
            if split.settled:
                continue
            if split.member_id in owed:
                owed[split.member_id] += _as_amount(split.amount)

    balances = []
    for member_id in member_ids:
        balances.append(GroupBalance(
            member_id=member_id,
            display_name=member_names.get(member_id) or UNKNOWN_MEMBER_NAME,
            total_paid=float(paid[member_id]),
            total_owed=float(owed[member_id]),
            balance=float(paid[member_id] - owed[member_id]),
        ))

    return balances


def apply_settlements(balances, settlements) -> list[GroupBalance]:
    """
    Net recorded settlements into expense-derived balances.

    A settlement of X from A to B means A has paid down X of what they owe,
    so A's balance rises by X and B's balance falls by X.

    Args:
        balances: Output of compute_group_balances().
        settlements: List of Settlement records.

    Returns:
        list[GroupBalance]: New records in the same order. total_paid and
            total_owed are unchanged; only balance moves.
    """
    adjustments = {b.member_id: Decimal("0") for b in balances}

    for settlement in settlements:
        amount = _as_amount(settlement.amount)
        if settlement.from_member in adjustments:
            adjustments[settlement.from_member] += amount
        if settlement.to_member in adjustments:
            adjustments[settlement.to_member] -= amount

    return [
        GroupBalance(
            member_id=b.member_id,
            display_name=b.display_name,
            total_paid=b.total_paid,
            total_owed=b.total_owed,
            balance=float(_as_amount(b.balance) + adjustments[b.member_id]),
        )
        for b in balances
    ]
