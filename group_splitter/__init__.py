"""Group expense splitter: balance engine plus a Firestore-backed API."""

from group_splitter.settlement import simplify_debts
from group_splitter.splits import split_equally, validate_custom_splits
from group_splitter.splitter import apply_settlements, compute_group_balances

__version__ = "1.0.0"

__all__ = [
    "apply_settlements",
    "compute_group_balances",
    "simplify_debts",
    "split_equally",
    "validate_custom_splits",
]
