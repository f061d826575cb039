"""
Models Module

Fixed-shape records shared by the balance engine and the Firestore stores.

Data Model:
    Member       - member_id, display_name
    Group        - group_id, name, description, created_by, members, created_at
    Split        - member_id, amount, settled
    Expense      - expense_id, group_id, description, amount, category,
                   paid_by, splits, created_by, created_at, updated_at
    Settlement   - settlement_id, group_id, from_member, to_member, amount,
                   note, created_at
    GroupBalance - member_id, display_name, total_paid, total_owed, balance
    Transaction  - member_id (debtor), display_name, amount, creditor_id

Every stored record has to_dict() for Firestore and a from_dict()
classmethod for reading documents back.
"""

from dataclasses import dataclass, field
from typing import Optional


# Expense categories offered when composing an expense
VALID_CATEGORIES = {
    "food",
    "shopping",
    "entertainment",
    "transport",
    "home",
    "utilities",
    "other",
}

SPLIT_EQUAL = "equal"
SPLIT_CUSTOM = "custom"
VALID_SPLIT_TYPES = {SPLIT_EQUAL, SPLIT_CUSTOM}

UNKNOWN_MEMBER_NAME = "Unknown"


@dataclass(frozen=True)
class Member:
    """A person in a group roster."""

    member_id: str
    display_name: str

    def to_dict(self) -> dict:
        return {"member_id": self.member_id, "display_name": self.display_name}

    @classmethod
    def from_dict(cls, data: dict) -> "Member":
        return cls(
            member_id=data.get("member_id"),
            display_name=data.get("display_name") or UNKNOWN_MEMBER_NAME,
        )


@dataclass(frozen=True)
class Group:
    """
    A group of members sharing expenses.

    Attributes:
        group_id (str): Unique identifier (G### format).
        name (str): Group name.
        description (str | None): Optional description.
        created_by (str): Member ID of the creator.
        members (list[Member]): Current roster, in join order.
        created_at (str | None): ISO timestamp.
    """

    group_id: str
    name: str
    created_by: str
    members: list = field(default_factory=list)
    description: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def member_ids(self) -> list[str]:
        return [m.member_id for m in self.members]

    @property
    def member_names(self) -> dict[str, str]:
        return {m.member_id: m.display_name for m in self.members}

    def to_dict(self) -> dict:
        """Convert group to dictionary for Firestore storage."""
        return {
            "group_id": self.group_id,
            "name": self.name,
            "description": self.description,
            "created_by": self.created_by,
            "members": [m.to_dict() for m in self.members],
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Group":
        """Create a Group instance from a dictionary."""
        return cls(
            group_id=data.get("group_id"),
            name=data.get("name"),
            description=data.get("description"),
            created_by=data.get("created_by"),
            members=[Member.from_dict(m) for m in data.get("members", [])],
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True)
class Split:
    """One member's share of an expense."""

    member_id: str
    amount: float
    settled: bool = False

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "amount": self.amount,
            "settled": self.settled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Split":
        return cls(
            member_id=data.get("member_id"),
            amount=data.get("amount", 0.0),
            settled=bool(data.get("settled", False)),
        )


@dataclass(frozen=True)
class Expense:
    """
    Represents a single expense in a group.

    Attributes:
        expense_id (str): Unique identifier in E### format.
        group_id (str): Owning group.
        description (str): What the money was spent on.
        amount (float): Amount of the expense (must be > 0).
        category (str): One of VALID_CATEGORIES.
        paid_by (str): Member ID of who paid.
        splits (list[Split]): Per-member owed amounts.
        created_by (str | None): Member ID of who recorded it.
        created_at (str | None): ISO timestamp.
        updated_at (str | None): ISO timestamp.
    """

    expense_id: str
    group_id: str
    description: str
    amount: float
    category: str
    paid_by: str
    splits: list = field(default_factory=list)
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert expense to dictionary for Firestore storage."""
        return {
            "expense_id": self.expense_id,
            "group_id": self.group_id,
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "paid_by": self.paid_by,
            "splits": [s.to_dict() for s in self.splits],
            "created_by": self.created_by,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Expense":
        """Create an Expense instance from a dictionary."""
        return cls(
            expense_id=data.get("expense_id"),
            group_id=data.get("group_id"),
            description=data.get("description", ""),
            amount=data.get("amount", 0.0),
            category=data.get("category", "other"),
            paid_by=data.get("paid_by"),
            splits=[Split.from_dict(s) for s in data.get("splits", [])],
            created_by=data.get("created_by"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class Settlement:
    """A direct payment from one member to another, recorded outside expenses."""

    settlement_id: str
    group_id: str
    from_member: str
    to_member: str
    amount: float
    note: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert settlement to dictionary for Firestore storage."""
        return {
            "settlement_id": self.settlement_id,
            "group_id": self.group_id,
            "from_member": self.from_member,
            "to_member": self.to_member,
            "amount": self.amount,
            "note": self.note,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Settlement":
        """Create a Settlement instance from a dictionary."""
        return cls(
            settlement_id=data.get("settlement_id"),
            group_id=data.get("group_id"),
            from_member=data.get("from_member"),
            to_member=data.get("to_member"),
            amount=data.get("amount", 0.0),
            note=data.get("note"),
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True)
class GroupBalance:
    """
    Net position of one roster member.

    balance = total_paid - total_owed
        - Positive = the group owes this member
        - Negative = this member owes the group
    """

    member_id: str
    display_name: str
    total_paid: float
    total_owed: float
    balance: float

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "display_name": self.display_name,
            "total_paid": self.total_paid,
            "total_owed": self.total_owed,
            "balance": self.balance,
        }


@dataclass(frozen=True)
class Transaction:
    """One suggested payment: member_id pays creditor_id the amount."""

    member_id: str
    display_name: str
    amount: float
    creditor_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "display_name": self.display_name,
            "amount": self.amount,
            "creditor_id": self.creditor_id,
        }
