"""Installment plan lifecycle classification and the plan catalog"""

from datetime import date, datetime
from typing import Iterable, List, Optional

from installment_ledger.domain.categories import CategoryLookup, resolve_category
from installment_ledger.domain.installments import per_period_amount, validate_installment_transaction
from installment_ledger.domain.models import (
    InstallmentPlan,
    MissingCategoryPolicy,
    PlanStatus,
    PlanSummary,
    Transaction,
)
from installment_ledger.utils.date_utils import add_months, as_date
from installment_ledger.utils.money import to_money


def next_due_date(plan: InstallmentPlan) -> Optional[date]:
    """Due date of the first unpaid period, None once everything is paid"""
    if plan.paid_periods >= plan.total_periods:
        return None
    return add_months(plan.start_date, plan.paid_periods)


def classify_plan_status(plan: InstallmentPlan, today: date | datetime) -> PlanStatus:
    """
    Lifecycle status relative to today.

    - completed: every period paid (dates are irrelevant)
    - overdue:   the first unpaid period fell due before today
    - active:    otherwise (next due date is today or later)
    """
    upcoming = next_due_date(plan)
    if upcoming is None:
        return PlanStatus.completed
    if upcoming < as_date(today):
        return PlanStatus.overdue
    return PlanStatus.active


def summarize_plan(
    txn: Transaction,
    lookup: CategoryLookup,
    today: date | datetime,
    *,
    on_missing_category: MissingCategoryPolicy = MissingCategoryPolicy.skip,
) -> Optional[PlanSummary]:
    """
    Build the dashboard summary for one installment transaction.

    Returns None when the category cannot be resolved under the skip policy.
    """
    plan = validate_installment_transaction(txn)
    category = resolve_category(lookup, txn.category_id, txn.kind, on_missing_category)
    if category is None:
        return None

    amount = per_period_amount(txn)
    pending_periods = plan.total_periods - plan.paid_periods

    return PlanSummary(
        id=txn.id,
        description=txn.description,
        kind=txn.kind,
        category=category,
        payment_method=txn.payment_method,
        total_amount=to_money(txn.amount),
        period_amount=amount,
        total_periods=plan.total_periods,
        paid_periods=plan.paid_periods,
        pending_periods=pending_periods,
        paid_amount=plan.paid_periods * amount,
        pending_amount=pending_periods * amount,
        start_date=plan.start_date,
        end_date=add_months(plan.start_date, plan.total_periods - 1),
        next_due_date=next_due_date(plan),
        status=classify_plan_status(plan, today),
    )


def build_plan_catalog(
    transactions: Iterable[Transaction],
    lookup: CategoryLookup,
    today: date | datetime,
    *,
    on_missing_category: MissingCategoryPolicy = MissingCategoryPolicy.skip,
) -> List[PlanSummary]:
    """All installment plans, most recently started first. Recomputed on every call."""
    summaries = []
    for txn in transactions:
        if not txn.is_installment:
            continue
        summary = summarize_plan(txn, lookup, today, on_missing_category=on_missing_category)
        if summary is not None:
            summaries.append(summary)

    return sorted(summaries, key=lambda s: s.start_date, reverse=True)
