"""
Expenses Module

This module handles all expense-related operations for a group.

Features:
    - Add expenses split equally or by custom amounts
    - Categorize expenses (food, shopping, entertainment, ...)
    - Track who paid and what each member owes
    - Mark an individual split as settled

Data Model:
    Expense stored at: groups/{group_id}/expenses/{expense_id}
    Fields:
        - expense_id: string (E001, E002, ... format)
        - group_id: string
        - description: string
        - amount: float (must be > 0)
        - category: string
        - paid_by: member_id who paid
        - splits: list of {member_id, amount, settled}
        - created_by: member_id or None
        - created_at / updated_at: ISO timestamps

Functions:
    add_expense: Add a new expense to a group.
    get_expenses: Get all expenses for a group.
    settle_split: Mark one member's split of an expense as settled.
"""

import logging
from dataclasses import replace
from typing import Optional

from group_splitter.errors import InvalidInputError, NotFoundError
from group_splitter.groups import get_group
from group_splitter.models import (
    Expense,
    Split,
    SPLIT_EQUAL,
    VALID_CATEGORIES,
    VALID_SPLIT_TYPES,
)
from group_splitter.money import require_positive_amount
from group_splitter.splits import split_equally, validate_custom_splits
from group_splitter.utils import (
    get_timestamp,
    next_sequential_id,
    require_db,
    validate_non_empty_string,
)


logger = logging.getLogger(__name__)


def _expenses_ref(db, group_id: str):
    return db.collection("groups").document(group_id).collection("expenses")


def _build_splits(
    amount: float,
    paid_by: str,
    split_type: str,
    member_ids: list[str],
    custom_splits: Optional[list[Split]]
) -> list[Split]:
    """
    Produce the splits for a new expense.

    Equal splits give the rounding residual to the payer when the payer is
    one of the split members, so the stored splits add up to the amount.
    """
    if split_type == SPLIT_EQUAL:
        if not member_ids:
            raise InvalidInputError("select at least one member to split with")
        if len(set(member_ids)) != len(member_ids):
            raise InvalidInputError("member_ids must not contain duplicates")
        remainder_to = paid_by if paid_by in member_ids else None
        return split_equally(amount, member_ids, remainder_to=remainder_to)

    if not custom_splits:
        raise InvalidInputError("custom split requires at least one split amount")

    seen = set()
    for split in custom_splits:
        if split.member_id in seen:
            raise InvalidInputError(f"duplicate split for member_id '{split.member_id}'")
        seen.add(split.member_id)

    if not validate_custom_splits(amount, custom_splits):
        total = sum(s.amount for s in custom_splits)
        raise InvalidInputError(f"split amounts add up to {total:.2f}, expected {amount:.2f}")

    return [Split(member_id=s.member_id, amount=float(s.amount), settled=False) for s in custom_splits]


def add_expense(
    group_id: str,
    description: str,
    amount: float,
    paid_by: str,
    category: str = "other",
    split_type: str = SPLIT_EQUAL,
    member_ids: Optional[list[str]] = None,
    custom_splits: Optional[list[Split]] = None,
    created_by: Optional[str] = None
) -> Expense:
    """
    Add a new expense to a group.

    Args:
        group_id: The ID of the group.
        description: What the money was spent on.
        amount: Amount of the expense (must be > 0).
        paid_by: Member ID of who paid.
        category: One of VALID_CATEGORIES.
        split_type: "equal" or "custom".
        member_ids: Members sharing an equal split.
        custom_splits: Per-member amounts for a custom split.
        created_by: Member ID of who recorded the expense.

    Returns:
        Expense: The created expense object.

    Raises:
        InvalidInputError: If input validation fails.
        NotFoundError: If the group does not exist.
        RuntimeError: If Firestore is not available.

    Notes:
        - Payer does NOT have to be one of the split members
        - Every split member and the payer must be in the group roster
    """
    validate_non_empty_string(group_id, "group_id")
    validate_non_empty_string(description, "description")
    validate_non_empty_string(paid_by, "paid_by")

    require_positive_amount(amount)

    if category not in VALID_CATEGORIES:
        raise InvalidInputError(f"category must be one of {sorted(VALID_CATEGORIES)}, got: {category}")

    if split_type not in VALID_SPLIT_TYPES:
        raise InvalidInputError(f"split_type must be one of {sorted(VALID_SPLIT_TYPES)}, got: {split_type}")

    group = get_group(group_id)
    roster = set(group.member_ids)

    if paid_by not in roster:
        raise InvalidInputError(f"paid_by '{paid_by}' is not a member of group {group_id}")

    splits = _build_splits(float(amount), paid_by, split_type, member_ids or [], custom_splits)

    for split in splits:
        if split.member_id not in roster:
            raise InvalidInputError(f"split member '{split.member_id}' is not a member of group {group_id}")

    db = require_db()
    expenses_ref = _expenses_ref(db, group_id)

    timestamp = get_timestamp()
    expense = Expense(
        expense_id=next_sequential_id([doc.id for doc in expenses_ref.stream()], "E"),
        group_id=group_id,
        description=description.strip(),
        amount=float(amount),
        category=category,
        paid_by=paid_by,
        splits=splits,
        created_by=created_by or paid_by,
        created_at=timestamp,
        updated_at=timestamp,
    )

    expenses_ref.document(expense.expense_id).set(expense.to_dict())
    logger.info(
        "Added expense %s to group %s: %.2f paid by %s (%s split)",
        expense.expense_id, group_id, expense.amount, paid_by, split_type
    )

    return expense


def get_expenses(group_id: str) -> list[Expense]:
    """
    Get all expenses for a group, newest first.

    Raises:
        InvalidInputError: If group_id is invalid.
        RuntimeError: If Firestore is not available.
    """
    validate_non_empty_string(group_id, "group_id")

    db = require_db()
    expenses = [Expense.from_dict(doc.to_dict()) for doc in _expenses_ref(db, group_id).stream()]
    expenses.sort(key=lambda e: e.created_at or "", reverse=True)

    return expenses


def settle_split(group_id: str, expense_id: str, member_id: str) -> Expense:
    """
    Mark one member's split of an expense as settled.

    Settled splits no longer count towards what the member owes. Settling
    an already-settled split is a no-op.

    Raises:
        InvalidInputError: If an ID is invalid.
        NotFoundError: If the expense or the member's split does not exist.
        RuntimeError: If Firestore is not available.
    """
    validate_non_empty_string(group_id, "group_id")
    validate_non_empty_string(expense_id, "expense_id")
    validate_non_empty_string(member_id, "member_id")

    db = require_db()
    doc_ref = _expenses_ref(db, group_id).document(expense_id)
    snapshot = doc_ref.get()
    if not snapshot.exists:
        raise NotFoundError(f"expense '{expense_id}' not found in group {group_id}")

    expense = Expense.from_dict(snapshot.to_dict())
    if member_id not in {s.member_id for s in expense.splits}:
        raise NotFoundError(f"member '{member_id}' has no split in expense {expense_id}")

    splits = [
        Split(member_id=s.member_id, amount=s.amount, settled=s.settled or s.member_id == member_id)
        for s in expense.splits
    ]
    timestamp = get_timestamp()

    doc_ref.update({
        "splits": [s.to_dict() for s in splits],
        "updated_at": timestamp,
    })
    logger.info("Settled split of %s in expense %s (group %s)", member_id, expense_id, group_id)

    return replace(expense, splits=splits, updated_at=timestamp)
