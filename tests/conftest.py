"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List
from fastapi.testclient import TestClient
from installment_ledger.api.main import create_app
from installment_ledger.api.dependencies import get_today
from installment_ledger.domain.categories import CategoryLookup, build_category_lookup
from installment_ledger.domain.models import Category, InstallmentPlan, Transaction, TransactionKind


TODAY = date(2024, 7, 20)


@pytest.fixture
def categories() -> List[Category]:
    return [
        Category("c1", "Salary", TransactionKind.revenue),
        Category("c3", "Housing", TransactionKind.expense),
        Category("c4", "Groceries", TransactionKind.expense),
        Category("c7", "Education", TransactionKind.expense),
        Category("c8", "Health", TransactionKind.expense),
    ]


@pytest.fixture
def lookup(categories: List[Category]) -> CategoryLookup:
    return build_category_lookup(categories)


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Three single transactions in July 2024 plus an active, an overdue and a completed plan"""
    return [
        Transaction("t1", TransactionKind.revenue, Decimal("5000"), date(2024, 7, 5),
                    "Monthly salary", "c1", "Transfer"),
        Transaction("t2", TransactionKind.expense, Decimal("1500"), date(2024, 7, 10),
                    "Rent", "c3", "Bank slip"),
        Transaction("t3", TransactionKind.expense, Decimal("800"), date(2024, 7, 15),
                    "Groceries", "c4", "Credit"),
        # 12 x 200, June and July paid
        Transaction(
            "t4", TransactionKind.expense, Decimal("2400"), date(2024, 5, 20),
            "English course", "c7", "Payment book",
            is_installment=True,
            installment_plan=InstallmentPlan(12, 2, date(2024, 6, 10)),
        ),
        # 6 x 500, March to May paid, June late
        Transaction(
            "t5", TransactionKind.expense, Decimal("3000"), date(2024, 2, 15),
            "New laptop", "c7", "Credit",
            is_installment=True,
            installment_plan=InstallmentPlan(6, 3, date(2024, 3, 25)),
        ),
        # 6 x 200, fully paid
        Transaction(
            "t6", TransactionKind.expense, Decimal("1200"), date(2024, 1, 10),
            "Gym (annual plan)", "c8", "Financing",
            is_installment=True,
            installment_plan=InstallmentPlan(6, 6, date(2024, 1, 15)),
        ),
    ]


@pytest.fixture
def ledger_payload() -> Dict[str, Any]:
    """The same data set as a client would post it (camelCase field names)"""
    return {
        "categories": [
            {"id": "c1", "name": "Salary", "type": "revenue"},
            {"id": "c3", "name": "Housing", "type": "expense"},
            {"id": "c4", "name": "Groceries", "type": "expense"},
            {"id": "c7", "name": "Education", "type": "expense"},
            {"id": "c8", "name": "Health", "type": "expense"},
        ],
        "transactions": [
            {"id": "t1", "type": "revenue", "amount": 5000, "date": "2024-07-05",
             "description": "Monthly salary", "categoryId": "c1",
             "paymentMethod": "Transfer", "isInstallment": False},
            {"id": "t2", "type": "expense", "amount": 1500, "date": "2024-07-10",
             "description": "Rent", "categoryId": "c3",
             "paymentMethod": "Bank slip", "isInstallment": False},
            {"id": "t3", "type": "expense", "amount": 800, "date": "2024-07-15",
             "description": "Groceries", "categoryId": "c4",
             "paymentMethod": "Credit", "isInstallment": False},
            {"id": "t4", "type": "expense", "amount": 2400, "date": "2024-05-20",
             "description": "English course", "categoryId": "c7",
             "paymentMethod": "Payment book", "isInstallment": True,
             "installments": {"totalInstallments": 12, "paidInstallments": 2,
                              "startDate": "2024-06-10"}},
            {"id": "t5", "type": "expense", "amount": 3000, "date": "2024-02-15",
             "description": "New laptop", "categoryId": "c7",
             "paymentMethod": "Credit", "isInstallment": True,
             "installments": {"totalInstallments": 6, "paidInstallments": 3,
                              "startDate": "2024-03-25"}},
            {"id": "t6", "type": "expense", "amount": 1200, "date": "2024-01-10",
             "description": "Gym (annual plan)", "categoryId": "c8",
             "paymentMethod": "Financing", "isInstallment": True,
             "installments": {"totalInstallments": 6, "paidInstallments": 6,
                              "startDate": "2024-01-15"}},
        ],
    }


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with a fixed reference date"""
    app = create_app()
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)
