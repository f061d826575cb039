"""
Settlement Module

This module turns member balances into a short list of payments that would
settle the whole group.

Features:
    - Greedy largest-creditor / largest-debtor matching
    - Shared 0.01 tolerance for what counts as settled
    - Human-readable "<debtor> owes <creditor>" labels

Data Model:
    Input - balances: list of GroupBalance
        - balance > 0: the group owes this member
        - balance < 0: this member owes the group

    Output - list of Transaction:
        - member_id: debtor who pays
        - display_name: "<debtor name> owes <creditor name>"
        - amount: amount to pay
        - creditor_id: creditor who receives

Functions:
    simplify_debts: Convert balances into settling transactions.
"""

from group_splitter.models import Transaction
from group_splitter.money import Position, classify, is_settled, to_decimal


def simplify_debts(balances) -> list[Transaction]:
    """
    Convert net balances into settling transactions.

    Uses a greedy algorithm:
        1. Split members into creditors and debtors, ignoring anyone within
           tolerance of zero
        2. Sort both by size, largest first
        3. Match the current largest creditor with the current largest
           debtor and settle the smaller of the two remaining amounts
        4. Advance past anyone whose remainder drops below tolerance

    Args:
        balances: List of GroupBalance records.

    Returns:
        list[Transaction]: Suggested payments. Empty when everyone is settled.

    Notes:
        - At most len(creditors) + len(debtors) - 1 transactions
        - Not a minimum-transaction solution
        - Does NOT modify input balances
    """
    # [balance record, remaining amount as positive Decimal]
    creditors = []
    debtors = []

    for record in balances:
        net = to_decimal(record.balance)
        position = classify(net)
        if position is Position.CREDITOR:
            creditors.append([record, net])
        elif position is Position.DEBTOR:
            debtors.append([record, -net])

    # sort() is stable, so equal amounts keep roster order
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    transactions = []
    creditor_idx = 0
    debtor_idx = 0

    while creditor_idx < len(creditors) and debtor_idx < len(debtors):
        creditor, credit_amount = creditors[creditor_idx]
        debtor, debt_amount = debtors[debtor_idx]

        amount = min(credit_amount, debt_amount)

        transactions.append(Transaction(
            member_id=debtor.member_id,
            display_name=f"{debtor.display_name} owes {creditor.display_name}",
            amount=float(amount),
            creditor_id=creditor.member_id,
        ))

        creditors[creditor_idx][1] = credit_amount - amount
        debtors[debtor_idx][1] = debt_amount - amount

        if is_settled(creditors[creditor_idx][1]):
            creditor_idx += 1
        if is_settled(debtors[debtor_idx][1]):
            debtor_idx += 1

    return transactions
