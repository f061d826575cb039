"""
Payments Module

This module records direct payments (settlements) between group members.

A recorded settlement does NOT touch expense splits. The balances endpoint
nets settlements into expense balances with splitter.apply_settlements().

Data Model:
    Settlement stored at: groups/{group_id}/settlements/{settlement_id}
    Fields:
        - settlement_id: string (S001, S002, ... format)
        - group_id: string
        - from_member: member_id who paid
        - to_member: member_id who received
        - amount: float (must be > 0)
        - note: string or None
        - created_at: ISO timestamp

Functions:
    record_settlement: Record a payment between two members.
    get_settlements: Get all settlements for a group.
"""

import logging
from typing import Optional

from group_splitter.errors import InvalidInputError
from group_splitter.groups import get_group
from group_splitter.models import Settlement
from group_splitter.money import require_positive_amount
from group_splitter.utils import (
    get_timestamp,
    next_sequential_id,
    require_db,
    validate_non_empty_string,
)


logger = logging.getLogger(__name__)


def _settlements_ref(db, group_id: str):
    return db.collection("groups").document(group_id).collection("settlements")


def record_settlement(
    group_id: str,
    from_member: str,
    to_member: str,
    amount: float,
    note: Optional[str] = None
) -> Settlement:
    """
    Record a payment from one member to another.

    Args:
        group_id: The ID of the group.
        from_member: Member ID of who paid.
        to_member: Member ID of who received.
        amount: Amount paid (must be > 0).
        note: Optional note.

    Returns:
        Settlement: The recorded settlement.

    Raises:
        InvalidInputError: If input validation fails.
        NotFoundError: If the group does not exist.
        RuntimeError: If Firestore is not available.
    """
    validate_non_empty_string(group_id, "group_id")
    validate_non_empty_string(from_member, "from_member")
    validate_non_empty_string(to_member, "to_member")

    if from_member == to_member:
        raise InvalidInputError("from_member and to_member must be different members")

    require_positive_amount(amount)

    roster = set(get_group(group_id).member_ids)
    for member_id in (from_member, to_member):
        if member_id not in roster:
            raise InvalidInputError(f"member '{member_id}' is not a member of group {group_id}")

    db = require_db()
    settlements_ref = _settlements_ref(db, group_id)

    settlement = Settlement(
        settlement_id=next_sequential_id([doc.id for doc in settlements_ref.stream()], "S"),
        group_id=group_id,
        from_member=from_member,
        to_member=to_member,
        amount=float(amount),
        note=note.strip() if note else None,
        created_at=get_timestamp(),
    )

    settlements_ref.document(settlement.settlement_id).set(settlement.to_dict())
    logger.info(
        "Recorded settlement %s in group %s: %s paid %s %.2f",
        settlement.settlement_id, group_id, from_member, to_member, settlement.amount
    )

    return settlement


def get_settlements(group_id: str) -> list[Settlement]:
    """
    Get all settlements for a group, oldest first.

    Raises:
        InvalidInputError: If group_id is invalid.
        RuntimeError: If Firestore is not available.
    """
    validate_non_empty_string(group_id, "group_id")

    db = require_db()
    settlements = [Settlement.from_dict(doc.to_dict()) for doc in _settlements_ref(db, group_id).stream()]
    settlements.sort(key=lambda s: s.created_at or "")

    return settlements
