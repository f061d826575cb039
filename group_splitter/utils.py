"""
Utilities Module

Small helpers shared by the stores and the API.

Functions:
    get_timestamp: Current UTC timestamp in ISO format.
    validate_non_empty_string: Reject empty or non-string identifiers.
    next_sequential_id: Next ID in a P###-style sequence.
    require_db: Get the Firestore client or fail.
    format_currency: Format amount with currency symbol.
    generate_id: Generate a formatted identifier.
    describe_transactions: Human-readable lines for settling transactions.
"""

import re
from datetime import datetime, timezone

from group_splitter.config.firebase_config import get_db
from group_splitter.errors import InvalidInputError
from group_splitter.money import round_money


def get_timestamp() -> str:
    """
    Get current UTC timestamp in ISO format.

    Returns:
        str: ISO formatted timestamp.
    """
    return datetime.now(timezone.utc).isoformat()


def validate_non_empty_string(value: str, field_name: str) -> bool:
    """
    Validate that a string is non-empty.

    Args:
        value: String to validate.
        field_name: Name of the field for error messages.

    Returns:
        bool: True if valid.

    Raises:
        InvalidInputError: If string is empty or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{field_name} must be a non-empty string")
    return True


def require_db():
    """Return the Firestore client, raising RuntimeError if it is unavailable."""
    db = get_db()
    if db is None:
        raise RuntimeError("Firestore is not available")
    return db


def next_sequential_id(doc_ids, prefix: str) -> str:
    """
    Generate the next sequential ID for a collection.

    Format: {prefix}001, {prefix}002, ...

    Logic:
        1. Extract numeric suffix from IDs matching {prefix}### (e.g., E001 -> 1)
        2. Find the highest existing number
        3. Generate next ID with zero-padded 3-digit suffix
        4. If no matching IDs exist, start from 001

    Args:
        doc_ids: Iterable of existing document IDs.
        prefix: ID prefix, e.g. "G", "E", "S".

    Returns:
        str: Next ID, e.g. "E004".
    """
    # IDs that do not follow the pattern (legacy data) are skipped
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    max_num = 0

    for doc_id in doc_ids:
        match = pattern.match(doc_id)
        if match:
            max_num = max(max_num, int(match.group(1)))

    return generate_id(prefix, max_num + 1)


def format_currency(amount: float, symbol: str = "₹") -> str:
    """
    Format a monetary amount with the appropriate currency symbol.

    Args:
        amount: The amount to format.
        symbol: Currency symbol (default: ₹).

    Returns:
        str: Formatted string like "₹1,234.56".
    """
    return f"{symbol}{round_money(amount):,.2f}"


def generate_id(prefix: str = "ID", number: int = 1) -> str:
    """
    Generate a formatted identifier.

    Args:
        prefix: Prefix for the ID (e.g., "G", "E").
        number: Numeric value to format.

    Returns:
        str: Formatted ID like "G001", "E042".
    """
    return f"{prefix}{number:03d}"


def describe_transactions(transactions, symbol: str = "₹") -> list[str]:
    """Render transactions as lines like "Bob owes Alice ₹50.00"."""
    if not transactions:
        return ["All settled up"]
    return [f"{t.display_name} {format_currency(t.amount, symbol)}" for t in transactions]
