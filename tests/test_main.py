import inspect

import pytest
from fastapi.testclient import TestClient

from group_splitter.main import app


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def group_id(client):
    response = client.post("/groups", json={
        "name": "Flat 4B",
        "created_by": "a",
        "members": [
            {"member_id": "a", "display_name": "Alice"},
            {"member_id": "b", "display_name": "Bob"},
        ],
    })
    assert response.status_code == 201
    return response.json()["group_id"]


def _add_dinner(client, group_id, amount=100):
    return client.post(f"/groups/{group_id}/expenses", json={
        "description": "Dinner",
        "amount": amount,
        "paid_by": "a",
        "category": "food",
        "member_ids": ["a", "b"],
    })


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_group_lifecycle(client, group_id):
    response = client.post(f"/groups/{group_id}/members", json={"member_id": "c", "display_name": "Cara"})
    assert response.status_code == 201

    group = client.get(f"/groups/{group_id}").json()
    assert [m["member_id"] for m in group["members"]] == ["a", "b", "c"]

    assert client.get("/groups/G999").status_code == 404


def test_expense_and_balances(client, group_id):
    response = _add_dinner(client, group_id)
    assert response.status_code == 201
    assert [s["amount"] for s in response.json()["splits"]] == [50.0, 50.0]

    result = client.get(f"/groups/{group_id}/balances").json()

    assert [b["balance"] for b in result["balances"]] == [50.0, -50.0]
    assert result["transactions"] == [
        {"member_id": "b", "display_name": "Bob owes Alice", "amount": 50.0, "creditor_id": "a"},
    ]
    assert result["summary"] == ["Bob owes Alice ₹50.00"]


def test_recorded_settlement_clears_balances(client, group_id):
    _add_dinner(client, group_id)

    response = client.post(f"/groups/{group_id}/settlements", json={
        "from_member": "b", "to_member": "a", "amount": 50,
    })
    assert response.status_code == 201
    assert len(client.get(f"/groups/{group_id}/settlements").json()) == 1

    result = client.get(f"/groups/{group_id}/balances").json()
    assert result["transactions"] == []
    assert result["summary"] == ["All settled up"]


def test_settling_a_split_clears_balances(client, group_id):
    _add_dinner(client, group_id)

    response = client.post(f"/groups/{group_id}/expenses/E001/splits/b/settle")
    assert response.status_code == 200

    result = client.get(f"/groups/{group_id}/balances").json()
    assert result["balances"][1]["total_owed"] == 0.0
    assert result["transactions"] == []


def test_expense_errors(client, group_id):
    bad_category = client.post(f"/groups/{group_id}/expenses", json={
        "description": "Rent", "amount": 10, "paid_by": "a", "category": "rent", "member_ids": ["a"],
    })
    assert bad_category.status_code == 400

    bad_split = client.post(f"/groups/{group_id}/expenses", json={
        "description": "Rent", "amount": 10, "paid_by": "a", "split_type": "custom",
        "splits": [{"member_id": "a", "amount": 4}, {"member_id": "b", "amount": 4}],
    })
    assert bad_split.status_code == 400

    assert _add_dinner(client, group_id, amount=0).status_code == 422
    assert _add_dinner(client, "G404").status_code == 404
    assert client.get(f"/groups/{group_id}/expenses").json() == []


def test_split_helpers(client):
    preview = client.post("/splits/equal", json={"amount": 100, "member_ids": ["a", "b", "c"]}).json()
    assert [s["amount"] for s in preview] == [33.33, 33.33, 33.33]

    check = client.post("/splits/validate", json={"amount": 100, "splits": preview}).json()
    assert check == {"valid": False, "total": 99.99, "difference": 0.01}

    bad = client.post("/splits/equal", json={"amount": 100, "member_ids": ["a"], "remainder_to": "z"})
    assert bad.status_code == 400


def test_database_unavailable(no_db):
    client = TestClient(app)
    assert client.get("/groups/G001").status_code == 503


def test_unrepresentable_amounts_are_client_errors(client, group_id):
    too_large = client.post("/splits/equal", json={"amount": 1e30, "member_ids": ["a", "b"]})
    assert too_large.status_code == 400

    infinite = client.post(
        "/splits/equal",
        content='{"amount": Infinity, "member_ids": ["a", "b"]}',
        headers={"Content-Type": "application/json"},
    )
    assert infinite.status_code == 400

    expense = _add_dinner(client, group_id, amount=1e30)
    assert expense.status_code == 400


def test_store_backed_handlers_run_in_threadpool():
    handlers = [
        route.endpoint for route in app.routes
        if route.path.startswith(("/groups", "/splits"))
    ]

    assert handlers
    assert not any(inspect.iscoroutinefunction(h) for h in handlers)
