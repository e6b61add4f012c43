"""
E2E tests walking user personas through the API.

User personas:
- user_mixed: card plus three installment loans, comfortable surplus
- user_tight: funds only cover minimums
- user_payoff: clears the target debt and gets a new target
"""

import pytest
from fastapi.testclient import TestClient


SAMPLE_DEBTS = [
    {"creditor_name": "Chase Visa Credit Card", "category": "revolving", "balance": 5000, "interest_rate": 24.99, "minimum_payment": 150},
    {"creditor_name": "Federal Student Loan", "category": "installment", "balance": 15000, "interest_rate": 6.5, "term_months": 24},
    {"creditor_name": "Honda Auto Loan", "category": "installment", "balance": 12000, "interest_rate": 4.2, "term_months": 18, "fee": 15, "fee_mode": "monthly"},
    {"creditor_name": "SoFi Personal Loan", "category": "installment", "balance": 3000, "interest_rate": 12.5, "term_months": 12, "fee": 100, "fee_mode": "upfront"},
]


def _seed(client: TestClient, user_id: str, available_funds: float) -> list:
    ids = []
    for debt in SAMPLE_DEBTS:
        response = client.post(f"/v1/debts?user_id={user_id}", json=debt)
        assert response.status_code == 201
        ids.append(response.json()["debt_id"])

    response = client.put(f"/v1/profile?user_id={user_id}", json={"available_funds": available_funds})
    assert response.status_code == 200
    return ids


def test_user_mixed_targets_credit_card(client: TestClient):
    """
    user_mixed: 2500/month across four debts
    Expected: card (24.99%) gets the surplus, loans ordered by rate
    """
    _seed(client, "user_mixed", 2500)

    data = client.get("/v1/strategy?user_id=user_mixed&months_to_show=24").json()
    names = [r["creditor_name"] for r in data["recommendations"]]

    assert names == [
        "Chase Visa Credit Card",
        "SoFi Personal Loan",
        "Federal Student Loan",
        "Honda Auto Loan",
    ]
    assert data["surplus"] > 0
    assert data["total_minimum_payments"] + data["surplus"] == pytest.approx(2500)

    card = data["recommendations"][0]
    assert card["is_target"] is True
    assert card["recommended_payment"] == pytest.approx(150 + data["surplus"])
    assert card["interest_saved"] > 0
    assert card["continues_beyond_window"] is False
    assert card["breakdown"][-1]["balance"] == 0

    # Derived loan minimums clear each loan within its term
    for loan in data["recommendations"][1:]:
        assert loan["is_target"] is False
        assert loan["months_to_payoff"] is not None


def test_user_tight_pays_minimums_only(client: TestClient):
    """
    user_tight: funds below total minimums
    Expected: no surplus, no target, debt-free date unknown
    """
    _seed(client, "user_tight", 500)

    data = client.get("/v1/strategy?user_id=user_tight").json()

    assert data["surplus"] == 0
    assert not any(r["is_target"] for r in data["recommendations"])
    assert all(r["recommended_payment"] == r["minimum_payment"] for r in data["recommendations"])
    assert data["total_months_to_debt_free"] is None
    assert data["total_interest_saved"] == 0


def test_user_payoff_retargets_next_highest_rate(client: TestClient):
    """
    user_payoff: removes the paid-off card
    Expected: the personal loan (12.5%) becomes the target
    """
    ids = _seed(client, "user_payoff", 2500)

    assert client.delete(f"/v1/debts/{ids[0]}?user_id=user_payoff").status_code == 204

    data = client.get("/v1/strategy?user_id=user_payoff").json()
    target = [r for r in data["recommendations"] if r["is_target"]]

    assert len(target) == 1
    assert target[0]["creditor_name"] == "SoFi Personal Loan"

    summary = client.get("/v1/summary?user_id=user_payoff").json()
    assert summary["count"] == 3
    assert summary["max_rate"] == 12.5
