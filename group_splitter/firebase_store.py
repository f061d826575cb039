"""
Firebase Store Module

This module saves computed results to Firestore so clients can read the
latest "who owes whom" without recomputing.

Features:
    - Save balances per member
    - Save settling transactions
    - All saves are idempotent (safe to overwrite)

Firestore Structure:
    groups/{group_id}/results/balances/balances/{member_id}
        - member_id, display_name, total_paid, total_owed, balance
        - updated_at: timestamp

    groups/{group_id}/results/transactions/transactions/{transaction_id}
        - transaction_id: string (T001, T002, ...)
        - member_id, display_name, amount, creditor_id
        - updated_at: timestamp

Functions:
    save_balances: Save member balances to Firestore.
    save_transactions: Save settling transactions to Firestore.
"""

import logging

from group_splitter.utils import generate_id, get_timestamp, require_db, validate_non_empty_string


logger = logging.getLogger(__name__)


def _results_ref(db, group_id: str, kind: str):
    return db.collection("groups").document(group_id) \
             .collection("results").document(kind) \
             .collection(kind)


def save_balances(group_id: str, balances) -> dict:
    """
    Save member balances to Firestore.

    Args:
        group_id: The ID of the group.
        balances: List of GroupBalance records.

    Returns:
        dict: Summary of saved documents with count and member IDs.

    Raises:
        InvalidInputError: If group_id is invalid.
        RuntimeError: If Firestore is not available.

    Notes:
        - Overwrites existing balance documents (idempotent)
        - Adds updated_at timestamp to each document
    """
    validate_non_empty_string(group_id, "group_id")

    db = require_db()
    collection = _results_ref(db, group_id, "balances")
    timestamp = get_timestamp()
    saved_ids = []

    for balance in balances:
        doc_data = balance.to_dict()
        doc_data["updated_at"] = timestamp
        collection.document(balance.member_id).set(doc_data)
        saved_ids.append(balance.member_id)

    logger.info("Saved %d balances for group %s", len(saved_ids), group_id)

    return {
        "saved_count": len(saved_ids),
        "member_ids": saved_ids,
        "updated_at": timestamp
    }


def save_transactions(group_id: str, transactions) -> dict:
    """
    Save settling transactions to Firestore.

    Generates sequential transaction IDs (T001, T002, ...). Documents left
    over from a previous, longer result are deleted so the stored list
    always matches the latest calculation.

    Args:
        group_id: The ID of the group.
        transactions: List of Transaction records.

    Returns:
        dict: Summary of saved documents with count and transaction IDs.

    Raises:
        InvalidInputError: If group_id is invalid.
        RuntimeError: If Firestore is not available.
    """
    validate_non_empty_string(group_id, "group_id")

    db = require_db()
    collection = _results_ref(db, group_id, "transactions")
    timestamp = get_timestamp()
    saved_ids = []

    for index, transaction in enumerate(transactions, start=1):
        transaction_id = generate_id("T", index)
        doc_data = transaction.to_dict()
        doc_data["transaction_id"] = transaction_id
        doc_data["updated_at"] = timestamp
        collection.document(transaction_id).set(doc_data)
        saved_ids.append(transaction_id)

    stale = [doc for doc in collection.stream() if doc.id not in saved_ids]
    for doc in stale:
        doc.reference.delete()

    logger.info(
        "Saved %d transactions for group %s (%d stale removed)",
        len(saved_ids), group_id, len(stale)
    )

    return {
        "saved_count": len(saved_ids),
        "transaction_ids": saved_ids,
        "updated_at": timestamp
    }
