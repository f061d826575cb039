"""
Groups Module

This module handles group and roster operations.

Features:
    - Create a group with an initial roster
    - Add members to an existing group
    - Read a group back with its roster

Data Model:
    Group stored at: groups/{group_id}
    Fields:
        - group_id: string (G001, G002, ... format)
        - name: string
        - description: string or None
        - created_by: member_id of the creator
        - members: list of {member_id, display_name}
        - created_at: ISO timestamp

Functions:
    create_group: Create a new group.
    get_group: Get a group by ID.
    add_member: Add a member to a group's roster.
"""

import logging
from dataclasses import replace
from typing import Optional

from group_splitter.errors import InvalidInputError, NotFoundError
from group_splitter.models import Group, Member
from group_splitter.utils import (
    get_timestamp,
    next_sequential_id,
    require_db,
    validate_non_empty_string,
)


logger = logging.getLogger(__name__)


def _group_ref(db, group_id: str):
    return db.collection("groups").document(group_id)


def create_group(
    name: str,
    created_by: str,
    members: list[Member],
    description: Optional[str] = None
) -> Group:
    """
    Create a new group.

    Args:
        name: Group name.
        created_by: Member ID of the creator; must be in members.
        members: Initial roster (at least one member, no duplicate IDs).
        description: Optional description.

    Returns:
        Group: The created group.

    Raises:
        InvalidInputError: If input validation fails.
        RuntimeError: If Firestore is not available.
    """
    validate_non_empty_string(name, "name")
    validate_non_empty_string(created_by, "created_by")

    if not members:
        raise InvalidInputError("members must contain at least one member")

    seen = set()
    for member in members:
        validate_non_empty_string(member.member_id, "member_id")
        validate_non_empty_string(member.display_name, "display_name")
        if member.member_id in seen:
            raise InvalidInputError(f"duplicate member_id '{member.member_id}'")
        seen.add(member.member_id)

    if created_by not in seen:
        raise InvalidInputError(f"created_by '{created_by}' must be one of the members")

    db = require_db()

    existing_ids = [doc.id for doc in db.collection("groups").stream()]
    group = Group(
        group_id=next_sequential_id(existing_ids, "G"),
        name=name.strip(),
        description=description.strip() if description else None,
        created_by=created_by,
        members=list(members),
        created_at=get_timestamp(),
    )

    _group_ref(db, group.group_id).set(group.to_dict())
    logger.info("Created group %s with %d members", group.group_id, len(group.members))

    return group


def get_group(group_id: str) -> Group:
    """
    Get a group by ID.

    Raises:
        InvalidInputError: If group_id is invalid.
        NotFoundError: If the group does not exist.
        RuntimeError: If Firestore is not available.
    """
    validate_non_empty_string(group_id, "group_id")

    db = require_db()
    snapshot = _group_ref(db, group_id).get()
    if not snapshot.exists:
        raise NotFoundError(f"group '{group_id}' not found")

    return Group.from_dict(snapshot.to_dict())


def add_member(group_id: str, member: Member) -> Group:
    """
    Add a member to a group's roster.

    Args:
        group_id: The ID of the group.
        member: Member to add.

    Returns:
        Group: The updated group.

    Raises:
        InvalidInputError: If the member is invalid or already in the group.
        NotFoundError: If the group does not exist.
        RuntimeError: If Firestore is not available.
    """
    validate_non_empty_string(member.member_id, "member_id")
    validate_non_empty_string(member.display_name, "display_name")

    group = get_group(group_id)
    if member.member_id in group.member_ids:
        raise InvalidInputError(f"member '{member.member_id}' is already in group {group_id}")

    members = group.members + [member]

    db = require_db()
    _group_ref(db, group_id).update({"members": [m.to_dict() for m in members]})
    logger.info("Added member %s to group %s", member.member_id, group_id)

    return replace(group, members=members)
