"""Integration tests for API endpoints"""

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "ledger_view_total" in response.text
    assert "ledger_plan_status_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


def test_monthly_view_endpoint(client: TestClient, ledger_payload):
    """Test POST /v1/monthly-view for July 2024"""
    response = client.post("/v1/monthly-view", json={"year": 2024, "month": 7, **ledger_payload})

    assert response.status_code == 200
    data = response.json()
    assert [e["id"] for e in data["entries"]] == ["t5-5", "t3", "t2", "t4-2", "t1"]
    assert data["summary"] == {"total_revenue": 5000.0, "total_expense": 3000.0, "balance": 2000.0}

    laptop = data["entries"][0]
    assert laptop["entry_type"] == "installment"
    assert laptop["parent_id"] == "t5"
    assert laptop["amount"] == 500.0
    assert laptop["status"] == "pending"
    assert laptop["installment_number"] == 5
    assert laptop["total_installments"] == 6
    assert laptop["category_name"] == "Education"

    rent = data["entries"][2]
    assert rent["entry_type"] == "transaction"
    assert rent["category_name"] == "Housing"
    assert rent["status"] is None


def test_monthly_view_rounds_at_the_boundary(client: TestClient, ledger_payload):
    payload = {
        "year": 2024,
        "month": 7,
        "categories": ledger_payload["categories"],
        "transactions": [
            {"id": "s1", "type": "expense", "amount": 100, "date": "2024-07-01",
             "categoryId": "c4", "isInstallment": True,
             "installments": {"totalInstallments": 3, "paidInstallments": 0,
                              "startDate": "2024-07-01"}},
        ],
    }

    data = client.post("/v1/monthly-view", json=payload).json()
    assert data["entries"][0]["amount"] == 33.33
    assert data["summary"]["total_expense"] == 33.33


def test_monthly_view_invalid_month(client: TestClient, ledger_payload):
    response = client.post("/v1/monthly-view", json={"year": 2024, "month": 13, **ledger_payload})
    assert response.status_code == 422


def test_monthly_view_malformed_plan(client: TestClient, ledger_payload):
    ledger_payload["transactions"][3]["installments"]["paidInstallments"] = 20

    response = client.post("/v1/monthly-view", json={"year": 2024, "month": 7, **ledger_payload})

    assert response.status_code == 422
    assert "t4" in response.json()["detail"]


def test_monthly_view_accepts_flat_snake_case_shape(client: TestClient, ledger_payload):
    """Installment fields carried directly on the transaction are folded into the plan"""
    payload = {
        "year": 2024,
        "month": 8,
        "categories": ledger_payload["categories"],
        "transactions": [
            {"id": "f1", "type": "expense", "amount": 600, "transaction_date": "2024-07-01",
             "category_id": "c7", "payment_method": "Credit", "is_installment": True,
             "total_installments": 3, "paid_installments": 1, "startDate": "2024-07-15"},
        ],
    }

    response = client.post("/v1/monthly-view", json=payload)

    assert response.status_code == 200
    entries = response.json()["entries"]
    assert len(entries) == 1
    assert entries[0]["date"] == "2024-08-15"
    assert entries[0]["amount"] == 200.0
    assert entries[0]["status"] == "pending"


def test_installment_plans_endpoint(client: TestClient, ledger_payload):
    """Test POST /v1/installment-plans with today fixed at 2024-07-20"""
    response = client.post("/v1/installment-plans", json=ledger_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["today"] == "2024-07-20"
    assert [p["id"] for p in data["plans"]] == ["t4", "t5", "t6"]
    assert [p["status"] for p in data["plans"]] == ["active", "overdue", "completed"]

    course = data["plans"][0]
    assert course["period_amount"] == 200.0
    assert course["paid_amount"] == 400.0
    assert course["pending_amount"] == 2000.0
    assert course["end_date"] == "2025-05-10"
    assert course["next_due_date"] == "2024-08-10"
    assert course["category"]["name"] == "Education"


def test_installment_plans_skip_orphans(client: TestClient, ledger_payload):
    ledger_payload["transactions"][4]["categoryId"] = "deleted"

    data = client.post("/v1/installment-plans", json=ledger_payload).json()

    assert [p["id"] for p in data["plans"]] == ["t4", "t6"]
    metrics = client.get("/metrics").text
    assert 'ledger_orphaned_transactions_total{view="plans"}' in metrics


def test_expand_endpoint(client: TestClient, ledger_payload):
    """Test POST /v1/installments/expand"""
    response = client.post(
        "/v1/installments/expand",
        json={
            "transaction": ledger_payload["transactions"][3],
            "categories": ledger_payload["categories"],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["parent_id"] == "t4"
    assert len(data["entries"]) == 12
    assert [e["status"] for e in data["entries"][:3]] == ["paid", "paid", "pending"]
    assert data["entries"][0]["date"] == "2024-06-10"


def test_expand_plain_transaction_rejected(client: TestClient, ledger_payload):
    response = client.post(
        "/v1/installments/expand",
        json={"transaction": ledger_payload["transactions"][0], "categories": []},
    )
    assert response.status_code == 422


def test_mark_paid_endpoint(client: TestClient, ledger_payload):
    """Test POST /v1/installments/mark-paid"""
    response = client.post(
        "/v1/installments/mark-paid",
        json={"transaction": ledger_payload["transactions"][4], "upTo": 5},
    )

    assert response.status_code == 200
    plan = response.json()["installment_plan"]
    assert plan["paid_periods"] == 5
    assert plan["total_periods"] == 6


def test_mark_paid_never_goes_backwards(client: TestClient, ledger_payload):
    response = client.post(
        "/v1/installments/mark-paid",
        json={"transaction": ledger_payload["transactions"][4], "up_to": 1},
    )

    assert response.json()["installment_plan"]["paid_periods"] == 3


def test_mark_paid_out_of_range(client: TestClient, ledger_payload):
    response = client.post(
        "/v1/installments/mark-paid",
        json={"transaction": ledger_payload["transactions"][4], "up_to": 9},
    )
    assert response.status_code == 422


def test_plain_transaction_with_leftover_installment_fields(client: TestClient, ledger_payload):
    """Flat installment fields on a non-installment record are ignored"""
    payload = {
        "year": 2024,
        "month": 7,
        "categories": ledger_payload["categories"],
        "transactions": [
            {"id": "x", "type": "expense", "amount": 50, "date": "2024-07-03",
             "categoryId": "c4", "paymentMethod": "Cash", "isInstallment": False,
             "totalInstallments": 2},
        ],
    }

    response = client.post("/v1/monthly-view", json=payload)

    assert response.status_code == 200
    entries = response.json()["entries"]
    assert [e["id"] for e in entries] == ["x"]
    assert entries[0]["entry_type"] == "transaction"
    assert response.json()["summary"]["total_expense"] == 50.0


def test_far_future_plan_is_rejected(client: TestClient, ledger_payload):
    ledger_payload["transactions"][3]["installments"]["startDate"] = "9999-06-01"

    monthly = client.post("/v1/monthly-view", json={"year": 2024, "month": 7, **ledger_payload})
    plans = client.post("/v1/installment-plans", json=ledger_payload)

    assert monthly.status_code == 422
    assert plans.status_code == 422
    assert "t4" in plans.json()["detail"]


def test_expand_counts_orphaned_plan(client: TestClient, ledger_payload):
    transaction = {**ledger_payload["transactions"][3], "id": "orphan-1", "categoryId": "deleted"}

    response = client.post(
        "/v1/installments/expand",
        json={"transaction": transaction, "categories": ledger_payload["categories"]},
    )

    assert response.status_code == 200
    assert response.json()["entries"] == []
    metrics = client.get("/metrics").text
    assert 'ledger_orphaned_transactions_total{view="expand"}' in metrics
