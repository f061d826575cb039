"""
Group Expense Splitter - FastAPI Web Backend

This module serves as the main entry point for the group expense splitting
API.

Features:
    - RESTful API for groups, members, expenses and settlements
    - Integration with Firebase Firestore backend
    - Balance calculation and debt simplification
    - Equal-split preview and custom-split validation for expense forms

Endpoints:
    POST /groups                                   - Create a group
    GET  /groups/{group_id}                        - Get a group
    POST /groups/{group_id}/members                - Add member to group
    POST /groups/{group_id}/expenses               - Add expense to group
    GET  /groups/{group_id}/expenses               - List expenses
    POST /groups/{group_id}/expenses/{expense_id}/splits/{member_id}/settle
                                                   - Mark a split settled
    POST /groups/{group_id}/settlements            - Record a payment
    GET  /groups/{group_id}/settlements            - List payments
    GET  /groups/{group_id}/balances               - Calculate and persist balances
    POST /splits/equal                             - Preview an equal split
    POST /splits/validate                          - Validate a custom split

Usage:
    uvicorn group_splitter.main:app --reload
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from group_splitter.errors import NotFoundError
from group_splitter.expenses import add_expense, get_expenses, settle_split
from group_splitter.firebase_store import save_balances, save_transactions
from group_splitter.groups import add_member, create_group, get_group
from group_splitter.models import (
    Expense,
    Group,
    Member,
    Settlement,
    Split,
    SPLIT_EQUAL,
    VALID_CATEGORIES,
    VALID_SPLIT_TYPES,
)
from group_splitter.payments import get_settlements, record_settlement
from group_splitter.settlement import simplify_debts
from group_splitter.splits import split_equally, validate_custom_splits
from group_splitter.splitter import apply_settlements, compute_group_balances
from group_splitter.utils import describe_transactions


logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models for Request/Response Validation
# =============================================================================

class MemberModel(BaseModel):
    """A roster entry."""
    member_id: str = Field(..., min_length=1, description="Member ID")
    display_name: str = Field(..., min_length=1, description="Display name")


class GroupCreate(BaseModel):
    """Request model for creating a group."""
    name: str = Field(..., min_length=1, description="Group name")
    description: Optional[str] = Field(None, description="Optional description")
    created_by: str = Field(..., min_length=1, description="Member ID of the creator")
    members: list[MemberModel] = Field(..., min_length=1, description="Initial roster")


class GroupResponse(BaseModel):
    """Response model for group data."""
    group_id: str
    name: str
    description: Optional[str]
    created_by: str
    members: list[MemberModel]
    created_at: Optional[str]


class SplitModel(BaseModel):
    """One member's share of an expense."""
    member_id: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    settled: bool = False


class ExpenseCreate(BaseModel):
    """Request model for adding an expense."""
    description: str = Field(..., min_length=1, description="What the money was spent on")
    amount: float = Field(..., gt=0, description="Expense amount (must be > 0)")
    paid_by: str = Field(..., min_length=1, description="Member ID of payer")
    category: str = Field("other", description="Expense category")
    split_type: str = Field(SPLIT_EQUAL, description="equal or custom")
    member_ids: Optional[list[str]] = Field(None, description="Members sharing an equal split")
    splits: Optional[list[SplitModel]] = Field(None, description="Per-member amounts for a custom split")
    created_by: Optional[str] = Field(None, description="Member ID of who recorded it")


class ExpenseResponse(BaseModel):
    """Response model for expense data."""
    expense_id: str
    group_id: str
    description: str
    amount: float
    category: str
    paid_by: str
    splits: list[SplitModel]
    created_by: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]


class SettlementCreate(BaseModel):
    """Request model for recording a payment."""
    from_member: str = Field(..., min_length=1, description="Member ID of who paid")
    to_member: str = Field(..., min_length=1, description="Member ID of who received")
    amount: float = Field(..., gt=0, description="Amount paid (must be > 0)")
    note: Optional[str] = Field(None, description="Optional note")


class SettlementResponse(BaseModel):
    """Response model for settlement data."""
    settlement_id: str
    group_id: str
    from_member: str
    to_member: str
    amount: float
    note: Optional[str]
    created_at: Optional[str]


class BalanceModel(BaseModel):
    member_id: str
    display_name: str
    total_paid: float
    total_owed: float
    balance: float


class TransactionModel(BaseModel):
    member_id: str
    display_name: str
    amount: float
    creditor_id: Optional[str]


class BalancesResponse(BaseModel):
    """Response model for balance calculation results."""
    balances: list[BalanceModel]
    transactions: list[TransactionModel]
    summary: list[str]


class EqualSplitRequest(BaseModel):
    """Request model for previewing an equal split."""
    amount: float = Field(..., gt=0)
    member_ids: list[str] = Field(..., min_length=1)
    remainder_to: Optional[str] = None


class ValidateSplitsRequest(BaseModel):
    """Request model for validating a custom split."""
    amount: float = Field(..., gt=0)
    splits: list[SplitModel]


class ValidateSplitsResponse(BaseModel):
    valid: bool
    total: float
    difference: float


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Group Expense Splitter",
    description="Shared group expenses, balances and settle-up suggestions",
    version="1.0.0"
)


# =============================================================================
# Helper Functions
# =============================================================================

def _http_error(e: Exception) -> HTTPException:
    """Map a store or engine exception to an HTTP error."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, RuntimeError):
        return HTTPException(status_code=503, detail=str(e))
    logger.exception("Unexpected error")
    return HTTPException(status_code=500, detail=str(e))


def _group_response(group: Group) -> GroupResponse:
    return GroupResponse(
        group_id=group.group_id,
        name=group.name,
        description=group.description,
        created_by=group.created_by,
        members=[MemberModel(**m.to_dict()) for m in group.members],
        created_at=group.created_at
    )


def _expense_response(expense: Expense) -> ExpenseResponse:
    return ExpenseResponse(**expense.to_dict())


def _settlement_response(settlement: Settlement) -> SettlementResponse:
    return SettlementResponse(**settlement.to_dict())


# =============================================================================
# API Endpoints
# =============================================================================

@app.post("/groups", response_model=GroupResponse, status_code=201)
def create_new_group(group_data: GroupCreate):
    """Create a new group with an initial roster."""
    try:
        group = create_group(
            name=group_data.name,
            created_by=group_data.created_by,
            members=[Member(m.member_id, m.display_name) for m in group_data.members],
            description=group_data.description
        )
        return _group_response(group)

    except Exception as e:
        raise _http_error(e)


@app.get("/groups/{group_id}", response_model=GroupResponse)
def read_group(group_id: str):
    """Get a group and its roster."""
    try:
        return _group_response(get_group(group_id))
    except Exception as e:
        raise _http_error(e)


@app.post("/groups/{group_id}/members", response_model=GroupResponse, status_code=201)
def add_group_member(group_id: str, member_data: MemberModel):
    """Add a member to a group's roster."""
    try:
        group = add_member(group_id, Member(member_data.member_id, member_data.display_name))
        return _group_response(group)
    except Exception as e:
        raise _http_error(e)


@app.post("/groups/{group_id}/expenses", response_model=ExpenseResponse, status_code=201)
def add_group_expense(group_id: str, expense_data: ExpenseCreate):
    """
    Add an expense to a group.

    Request flow:
        1. Validate input using Pydantic model
        2. Validate category and split type
        3. Call add_expense() from expenses.py (builds and checks splits)
        4. Return created expense data
    """
    try:
        if expense_data.category not in VALID_CATEGORIES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid category. Must be one of: {sorted(VALID_CATEGORIES)}"
            )
        if expense_data.split_type not in VALID_SPLIT_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid split type. Must be one of: {sorted(VALID_SPLIT_TYPES)}"
            )

        custom_splits = None
        if expense_data.splits:
            custom_splits = [Split(s.member_id, s.amount) for s in expense_data.splits]

        expense = add_expense(
            group_id=group_id,
            description=expense_data.description,
            amount=expense_data.amount,
            paid_by=expense_data.paid_by,
            category=expense_data.category,
            split_type=expense_data.split_type,
            member_ids=expense_data.member_ids,
            custom_splits=custom_splits,
            created_by=expense_data.created_by
        )
        return _expense_response(expense)

    except HTTPException:
        raise
    except Exception as e:
        raise _http_error(e)


@app.get("/groups/{group_id}/expenses", response_model=list[ExpenseResponse])
def list_group_expenses(group_id: str):
    """List a group's expenses, newest first."""
    try:
        return [_expense_response(e) for e in get_expenses(group_id)]
    except Exception as e:
        raise _http_error(e)


@app.post(
    "/groups/{group_id}/expenses/{expense_id}/splits/{member_id}/settle",
    response_model=ExpenseResponse
)
def settle_expense_split(group_id: str, expense_id: str, member_id: str):
    """Mark one member's split of an expense as settled."""
    try:
        return _expense_response(settle_split(group_id, expense_id, member_id))
    except Exception as e:
        raise _http_error(e)


@app.post("/groups/{group_id}/settlements", response_model=SettlementResponse, status_code=201)
def record_group_settlement(group_id: str, settlement_data: SettlementCreate):
    """Record a direct payment between two members."""
    try:
        settlement = record_settlement(
            group_id=group_id,
            from_member=settlement_data.from_member,
            to_member=settlement_data.to_member,
            amount=settlement_data.amount,
            note=settlement_data.note
        )
        return _settlement_response(settlement)
    except Exception as e:
        raise _http_error(e)


@app.get("/groups/{group_id}/settlements", response_model=list[SettlementResponse])
def list_group_settlements(group_id: str):
    """List recorded payments, oldest first."""
    try:
        return [_settlement_response(s) for s in get_settlements(group_id)]
    except Exception as e:
        raise _http_error(e)


@app.get("/groups/{group_id}/balances", response_model=BalancesResponse)
def calculate_group_balances(group_id: str):
    """
    Calculate and persist balances for a group.

    Request flow:
        1. Fetch the group roster from Firestore
        2. Fetch expenses and settlements from Firestore
        3. Compute expense balances (splitter.py)
        4. Net recorded settlements into them (splitter.py)
        5. Simplify debts (settlement.py)
        6. Persist results (firebase_store.py)
        7. Return balances, transactions and a readable summary
    """
    try:
        group = get_group(group_id)
        expenses = get_expenses(group_id)
        settlements = get_settlements(group_id)

        balances = compute_group_balances(expenses, group.member_ids, group.member_names)
        balances = apply_settlements(balances, settlements)
        transactions = simplify_debts(balances)

        save_balances(group_id, balances)
        save_transactions(group_id, transactions)

        return BalancesResponse(
            balances=[BalanceModel(**b.to_dict()) for b in balances],
            transactions=[TransactionModel(**t.to_dict()) for t in transactions],
            summary=describe_transactions(transactions)
        )

    except Exception as e:
        raise _http_error(e)


@app.post("/splits/equal", response_model=list[SplitModel])
def preview_equal_split(request: EqualSplitRequest):
    """Preview an equal split while composing an expense. Nothing is stored."""
    try:
        splits = split_equally(request.amount, request.member_ids, remainder_to=request.remainder_to)
        return [SplitModel(**s.to_dict()) for s in splits]
    except Exception as e:
        raise _http_error(e)


@app.post("/splits/validate", response_model=ValidateSplitsResponse)
def validate_splits(request: ValidateSplitsRequest):
    """Check whether a custom split breakdown adds up to the amount."""
    try:
        splits = [Split(s.member_id, s.amount) for s in request.splits]
        valid = validate_custom_splits(request.amount, splits)
        total = round(sum(s.amount for s in splits), 2)
        return ValidateSplitsResponse(
            valid=valid,
            total=total,
            difference=round(request.amount - total, 2)
        )
    except Exception as e:
        raise _http_error(e)


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get("/health")
def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": "Group Expense Splitter"}


# =============================================================================
# Run with: python -m group_splitter.main
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("group_splitter.main:app", host="127.0.0.1", port=8000, reload=True)
