from collections import defaultdict

import pytest

from group_splitter.models import GroupBalance, Transaction
from group_splitter.settlement import simplify_debts
from group_splitter.splitter import compute_group_balances


def _balances(values, names):
    return [GroupBalance(m, names[m], 0.0, 0.0, v) for m, v in values.items()]


def test_single_debtor_single_creditor(make_expense, names):
    expenses = [make_expense(100.0, "a", {"a": 50.0, "b": 50.0})]
    balances = compute_group_balances(expenses, ["a", "b"], names)

    assert simplify_debts(balances) == [
        Transaction(member_id="b", display_name="Bob owes Alice", amount=50.0, creditor_id="a"),
    ]


def test_one_creditor_two_debtors(make_expense, names):
    expenses = [make_expense(90.0, "a", {"a": 30.0, "b": 30.0, "c": 30.0})]
    balances = compute_group_balances(expenses, ["a", "b", "c"], names)

    assert [b.balance for b in balances] == [60.0, -30.0, -30.0]
    assert simplify_debts(balances) == [
        Transaction("b", "Bob owes Alice", 30.0, "a"),
        Transaction("c", "Cara owes Alice", 30.0, "a"),
    ]


def test_largest_parties_are_matched_first(names):
    balances = _balances({"a": 70.0, "b": 30.0, "c": -45.0, "d": -55.0}, names)

    assert simplify_debts(balances) == [
        Transaction("d", "Dev owes Alice", 55.0, "a"),
        Transaction("c", "Cara owes Alice", 15.0, "a"),
        Transaction("c", "Cara owes Bob", 30.0, "b"),
    ]


def test_everyone_settled_returns_empty_list(names):
    assert simplify_debts([]) == []
    assert simplify_debts(_balances({"a": 0.0, "b": 0.0}, names)) == []
    assert simplify_debts(_balances({"a": 0.009, "b": -0.009}, names)) == []


def test_balance_of_exactly_one_cent_is_not_settled(names):
    transactions = simplify_debts(_balances({"a": 0.01, "b": -0.01}, names))

    assert transactions == [Transaction("b", "Bob owes Alice", 0.01, "a")]


def test_debtor_totals_match_balances_and_count_is_bounded(names):
    values = {"a": 123.45, "b": 10.05, "c": -33.33, "d": -100.17}
    balances = _balances(values, names)

    transactions = simplify_debts(balances)

    paid = defaultdict(float)
    received = defaultdict(float)
    for t in transactions:
        paid[t.member_id] += t.amount
        received[t.creditor_id] += t.amount

    for member_id, value in values.items():
        if value < 0:
            assert paid[member_id] == pytest.approx(-value, abs=0.01)
        else:
            assert received[member_id] == pytest.approx(value, abs=0.01)
    assert len(transactions) <= 2 + 2 - 1


def test_credit_left_without_debtors_is_not_paid(names):
    # Debts add up to one cent less than the credit
    balances = _balances({"a": 66.67, "b": -33.33, "c": -33.33}, names)

    transactions = simplify_debts(balances)

    assert [t.member_id for t in transactions] == ["b", "c"]
    assert sum(t.amount for t in transactions) == pytest.approx(66.66)


def test_input_balances_are_not_modified(names):
    balances = _balances({"a": 20.0, "b": -20.0}, names)
    snapshot = list(balances)

    simplify_debts(balances)

    assert balances == snapshot
