"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Literal, Optional, Union


class TransactionKind(str, Enum):
    revenue = "revenue"
    expense = "expense"


class EntryStatus(str, Enum):
    paid = "paid"
    pending = "pending"


class PlanStatus(str, Enum):
    active = "active"
    overdue = "overdue"
    completed = "completed"


class MissingCategoryPolicy(str, Enum):
    """What to do with an installment transaction whose category does not resolve"""

    skip = "skip"
    uncategorized = "uncategorized"


@dataclass(frozen=True)
class Category:
    """Transaction category, owned by the caller"""

    id: str
    name: str
    kind: TransactionKind


@dataclass(frozen=True)
class InstallmentPlan:
    """Installment metadata attached to a transaction"""

    total_periods: int
    paid_periods: int
    start_date: date
    # Pre-rounded per-period figure entered by the user; authoritative when set
    period_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class Transaction:
    """Financial event. For installments, amount is the total across all periods."""

    id: str
    kind: TransactionKind
    amount: Decimal
    date: date
    description: str
    category_id: Optional[str]
    payment_method: str
    is_installment: bool = False
    is_recurrent: bool = False
    installment_plan: Optional[InstallmentPlan] = None
    recurrence_start_date: Optional[date] = None
    entry_type: Literal["transaction"] = field(default="transaction", init=False)

    @property
    def display_date(self) -> date:
        return self.date


@dataclass(frozen=True)
class InstallmentEntry:
    """One period of an installment plan. Derived on every query, never stored."""

    parent_id: str
    number: int  # 1-based
    total_periods: int
    due_date: date
    amount: Decimal
    status: EntryStatus
    description: str
    category: Category
    payment_method: str
    kind: TransactionKind
    entry_type: Literal["installment"] = field(default="installment", init=False)

    @property
    def display_date(self) -> date:
        return self.due_date


# Tagged variant, discriminated by entry_type
MonthlyEntry = Union[Transaction, InstallmentEntry]


@dataclass(frozen=True)
class PlanSummary:
    """Dashboard view of one installment plan"""

    id: str
    description: str
    kind: TransactionKind
    category: Category
    payment_method: str
    total_amount: Decimal
    period_amount: Decimal
    total_periods: int
    paid_periods: int
    pending_periods: int
    paid_amount: Decimal
    pending_amount: Decimal
    start_date: date
    end_date: date
    next_due_date: Optional[date]
    status: PlanStatus


@dataclass(frozen=True)
class MonthlySummary:
    total_revenue: Decimal
    total_expense: Decimal
    balance: Decimal


@dataclass(frozen=True)
class MonthlyView:
    """Entries of one calendar month, newest first, with totals"""

    year: int
    month: int
    entries: List[MonthlyEntry]
    summary: MonthlySummary
