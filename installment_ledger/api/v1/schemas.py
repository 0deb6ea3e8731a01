"""Pydantic schemas for API request/response validation"""

import datetime as dt
from decimal import Decimal
from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator

from installment_ledger.domain.categories import CategoryLookup, category_name
from installment_ledger.domain.models import (
    Category,
    EntryStatus,
    InstallmentEntry,
    InstallmentPlan,
    MonthlyEntry,
    MonthlySummary,
    PlanStatus,
    PlanSummary,
    Transaction,
    TransactionKind,
)
from installment_ledger.utils.money import round_money

# Flat installment fields carried directly on the transaction by older clients
_FLAT_PLAN_KEYS = {
    "total_periods": ("total_periods", "totalPeriods", "total_installments", "totalInstallments"),
    "paid_periods": ("paid_periods", "paidPeriods", "paid_installments", "paidInstallments"),
    "start_date": ("start_date", "startDate"),
    "period_amount": ("period_amount", "periodAmount", "installment_amount", "installmentAmount"),
}
_PLAN_KEYS = ("installment_plan", "installmentPlan", "installments")


def _money(value: Decimal) -> float:
    return float(round_money(value))


class CategorySchema(BaseModel):
    """Category as supplied by the caller"""

    id: str
    name: str
    kind: TransactionKind = Field(..., validation_alias=AliasChoices("kind", "type"))

    def to_domain(self) -> Category:
        return Category(id=self.id, name=self.name, kind=self.kind)

    @classmethod
    def from_domain(cls, category: Category) -> "CategorySchema":
        return cls(id=category.id, name=category.name, kind=category.kind)


class InstallmentPlanSchema(BaseModel):
    """Installment metadata; range checks happen in the domain layer"""

    total_periods: int = Field(..., validation_alias=AliasChoices(*_FLAT_PLAN_KEYS["total_periods"]))
    paid_periods: int = Field(0, validation_alias=AliasChoices(*_FLAT_PLAN_KEYS["paid_periods"]))
    start_date: dt.date = Field(..., validation_alias=AliasChoices(*_FLAT_PLAN_KEYS["start_date"]))
    period_amount: Optional[Decimal] = Field(
        None, validation_alias=AliasChoices(*_FLAT_PLAN_KEYS["period_amount"])
    )

    def to_domain(self) -> InstallmentPlan:
        return InstallmentPlan(
            total_periods=self.total_periods,
            paid_periods=self.paid_periods,
            start_date=self.start_date,
            period_amount=self.period_amount,
        )


class TransactionSchema(BaseModel):
    """
    Transaction in its canonical shape.

    Accepts snake_case and camelCase names, `type`/`transaction_date` for
    kind/date, and installment fields either nested or flat on the record.
    """

    id: str
    kind: TransactionKind = Field(..., validation_alias=AliasChoices("kind", "type"))
    amount: Decimal
    date: dt.date = Field(
        ..., validation_alias=AliasChoices("date", "transaction_date", "transactionDate")
    )
    description: str = ""
    category_id: Optional[str] = Field(None, validation_alias=AliasChoices("category_id", "categoryId"))
    payment_method: str = Field("", validation_alias=AliasChoices("payment_method", "paymentMethod"))
    is_installment: bool = Field(False, validation_alias=AliasChoices("is_installment", "isInstallment"))
    is_recurrent: bool = Field(False, validation_alias=AliasChoices("is_recurrent", "isRecurrent"))
    installment_plan: Optional[InstallmentPlanSchema] = Field(
        None, validation_alias=AliasChoices(*_PLAN_KEYS)
    )
    recurrence_start_date: Optional[dt.date] = Field(
        None, validation_alias=AliasChoices("recurrence_start_date", "recurrenceStartDate")
    )

    @model_validator(mode="before")
    @classmethod
    def fold_flat_plan(cls, data: Any) -> Any:
        """Nest flat installment fields under installment_plan (installment records only)"""
        if not isinstance(data, dict) or any(data.get(key) for key in _PLAN_KEYS):
            return data
        # Form defaults leave flat fields on plain transactions too
        if not (data.get("is_installment") or data.get("isInstallment")):
            return data
        flat = {}
        for name, keys in _FLAT_PLAN_KEYS.items():
            for key in keys:
                if data.get(key) is not None:
                    flat[name] = data[key]
                    break
        if "total_periods" not in flat:
            return data
        return {**data, "installment_plan": flat}

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            kind=self.kind,
            amount=self.amount,
            date=self.date,
            description=self.description,
            category_id=self.category_id,
            payment_method=self.payment_method,
            is_installment=self.is_installment,
            is_recurrent=self.is_recurrent,
            installment_plan=self.installment_plan.to_domain() if self.installment_plan else None,
            recurrence_start_date=self.recurrence_start_date,
        )

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionSchema":
        plan = txn.installment_plan
        return cls.model_validate(
            {
                "id": txn.id,
                "kind": txn.kind,
                "amount": txn.amount,
                "date": txn.date,
                "description": txn.description,
                "category_id": txn.category_id,
                "payment_method": txn.payment_method,
                "is_installment": txn.is_installment,
                "is_recurrent": txn.is_recurrent,
                "installment_plan": (
                    {
                        "total_periods": plan.total_periods,
                        "paid_periods": plan.paid_periods,
                        "start_date": plan.start_date,
                        "period_amount": plan.period_amount,
                    }
                    if plan
                    else None
                ),
                "recurrence_start_date": txn.recurrence_start_date,
            }
        )


class MonthlyViewRequest(BaseModel):
    """Request body for POST /v1/monthly-view (month is 1-based)"""

    year: int
    month: int
    transactions: List[TransactionSchema] = Field(default_factory=list)
    categories: List[CategorySchema] = Field(default_factory=list)


class PlanCatalogRequest(BaseModel):
    """Request body for POST /v1/installment-plans"""

    transactions: List[TransactionSchema] = Field(default_factory=list)
    categories: List[CategorySchema] = Field(default_factory=list)


class ExpandRequest(BaseModel):
    """Request body for POST /v1/installments/expand"""

    transaction: TransactionSchema
    categories: List[CategorySchema] = Field(default_factory=list)


class MarkPaidRequest(BaseModel):
    """Request body for POST /v1/installments/mark-paid"""

    transaction: TransactionSchema
    up_to: int = Field(..., validation_alias=AliasChoices("up_to", "upTo"))


class EntryRow(BaseModel):
    """One row of a monthly view: a plain transaction or an installment period"""

    entry_type: Literal["transaction", "installment"]
    id: str
    parent_id: Optional[str] = None
    description: str
    amount: float
    kind: TransactionKind
    date: dt.date
    category_id: Optional[str] = None
    category_name: str
    payment_method: str
    is_installment: bool = False
    is_recurrent: bool = False
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    status: Optional[EntryStatus] = None

    @classmethod
    def from_installment(cls, entry: InstallmentEntry) -> "EntryRow":
        return cls(
            entry_type="installment",
            id=f"{entry.parent_id}-{entry.number}",
            parent_id=entry.parent_id,
            description=entry.description,
            amount=_money(entry.amount),
            kind=entry.kind,
            date=entry.due_date,
            category_id=entry.category.id or None,
            category_name=entry.category.name,
            payment_method=entry.payment_method,
            is_installment=True,
            installment_number=entry.number,
            total_installments=entry.total_periods,
            status=entry.status,
        )

    @classmethod
    def from_entry(cls, entry: MonthlyEntry, lookup: CategoryLookup) -> "EntryRow":
        if entry.entry_type == "installment":
            return cls.from_installment(entry)
        return cls(
            entry_type="transaction",
            id=entry.id,
            description=entry.description,
            amount=_money(entry.amount),
            kind=entry.kind,
            date=entry.date,
            category_id=entry.category_id,
            category_name=category_name(lookup, entry.category_id),
            payment_method=entry.payment_method,
            is_recurrent=entry.is_recurrent,
        )


class SummarySchema(BaseModel):
    total_revenue: float
    total_expense: float
    balance: float

    @classmethod
    def from_domain(cls, summary: MonthlySummary) -> "SummarySchema":
        return cls(
            total_revenue=_money(summary.total_revenue),
            total_expense=_money(summary.total_expense),
            balance=_money(summary.balance),
        )


class MonthlyViewResponse(BaseModel):
    """Response for POST /v1/monthly-view"""

    year: int
    month: int
    entries: List[EntryRow]
    summary: SummarySchema


class PlanSummarySchema(BaseModel):
    """Single plan in the installment dashboard"""

    id: str
    description: str
    kind: TransactionKind
    category: CategorySchema
    payment_method: str
    total_amount: float
    period_amount: float
    total_periods: int
    paid_periods: int
    pending_periods: int
    paid_amount: float
    pending_amount: float
    start_date: dt.date
    end_date: dt.date
    next_due_date: Optional[dt.date] = None
    status: PlanStatus

    @classmethod
    def from_domain(cls, plan: PlanSummary) -> "PlanSummarySchema":
        return cls(
            id=plan.id,
            description=plan.description,
            kind=plan.kind,
            category=CategorySchema.from_domain(plan.category),
            payment_method=plan.payment_method,
            total_amount=_money(plan.total_amount),
            period_amount=_money(plan.period_amount),
            total_periods=plan.total_periods,
            paid_periods=plan.paid_periods,
            pending_periods=plan.pending_periods,
            paid_amount=_money(plan.paid_amount),
            pending_amount=_money(plan.pending_amount),
            start_date=plan.start_date,
            end_date=plan.end_date,
            next_due_date=plan.next_due_date,
            status=plan.status,
        )


class PlanCatalogResponse(BaseModel):
    """Response for POST /v1/installment-plans"""

    today: dt.date
    plans: List[PlanSummarySchema]


class ExpandResponse(BaseModel):
    """Response for POST /v1/installments/expand"""

    parent_id: str
    entries: List[EntryRow]
