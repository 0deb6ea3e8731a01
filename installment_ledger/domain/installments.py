"""Installment expansion - per-period virtual entries for installment transactions"""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, List

from installment_ledger.domain.categories import CategoryLookup, resolve_category
from installment_ledger.domain.exceptions import InvalidInstallmentPlanError
from installment_ledger.domain.models import (
    EntryStatus,
    InstallmentEntry,
    InstallmentPlan,
    MissingCategoryPolicy,
    Transaction,
)
from installment_ledger.utils.date_utils import add_months
from installment_ledger.utils.money import round_money, to_money

MIN_PERIODS = 2


def validate_installment_transaction(txn: Transaction) -> InstallmentPlan:
    """
    Check installment metadata and return the plan.

    Malformed metadata is an upstream contract violation: raise instead of
    clamping so corrupted data does not silently flow into the views.
    """
    if not txn.is_installment:
        raise InvalidInstallmentPlanError(f"Transaction {txn.id} is not an installment transaction")
    if txn.is_recurrent:
        raise InvalidInstallmentPlanError(
            f"Transaction {txn.id} is flagged both installment and recurrent"
        )

    plan = txn.installment_plan
    if plan is None:
        raise InvalidInstallmentPlanError(f"Transaction {txn.id} is an installment without a plan")
    if plan.total_periods < MIN_PERIODS:
        raise InvalidInstallmentPlanError(
            f"Transaction {txn.id}: total_periods={plan.total_periods}, expected >= {MIN_PERIODS}"
        )
    if not 0 <= plan.paid_periods <= plan.total_periods:
        raise InvalidInstallmentPlanError(
            f"Transaction {txn.id}: paid_periods={plan.paid_periods} "
            f"outside [0, {plan.total_periods}]"
        )
    try:
        add_months(plan.start_date, plan.total_periods - 1)
    except ValueError as e:
        raise InvalidInstallmentPlanError(
            f"Transaction {txn.id}: {plan.total_periods} periods from {plan.start_date} "
            f"run past the last representable date"
        ) from e
    return plan


def per_period_amount(txn: Transaction) -> Decimal:
    """
    Amount due each period.

    A user-entered period_amount is taken as fixed; otherwise the total is
    divided evenly at full precision (no per-period rounding).
    """
    plan = validate_installment_transaction(txn)
    if plan.period_amount is not None:
        return to_money(plan.period_amount)
    return to_money(txn.amount) / plan.total_periods


def expand_installments(
    txn: Transaction,
    lookup: CategoryLookup,
    *,
    on_missing_category: MissingCategoryPolicy = MissingCategoryPolicy.skip,
) -> List[InstallmentEntry]:
    """
    Generate one virtual entry per period of an installment transaction.

    Requirements:
    - Exactly total_periods entries, numbered 1..total_periods
    - Period i is due start_date + (i - 1) calendar months, clamped to month end
    - Periods up to paid_periods are paid, the rest pending
    - Unresolved category: no entries under the skip policy

    Example:
        2400.00 over 12 periods from 2024-06-10, 2 paid
        → 200.00 each; 2024-06-10 paid, 2024-07-10 paid, 2024-08-10 pending, ...
    """
    plan = validate_installment_transaction(txn)
    category = resolve_category(lookup, txn.category_id, txn.kind, on_missing_category)
    if category is None:
        return []

    amount = per_period_amount(txn)

    entries = []
    for number in range(1, plan.total_periods + 1):
        entries.append(
            InstallmentEntry(
                parent_id=txn.id,
                number=number,
                total_periods=plan.total_periods,
                due_date=add_months(plan.start_date, number - 1),
                amount=amount,
                status=EntryStatus.paid if number <= plan.paid_periods else EntryStatus.pending,
                description=txn.description,
                category=category,
                payment_method=txn.payment_method,
                kind=txn.kind,
            )
        )

    return entries


def expand_all_installments(
    transactions: Iterable[Transaction],
    lookup: CategoryLookup,
    *,
    on_missing_category: MissingCategoryPolicy = MissingCategoryPolicy.skip,
) -> List[InstallmentEntry]:
    """Expand every installment transaction, keeping input order"""
    entries: List[InstallmentEntry] = []
    for txn in transactions:
        if txn.is_installment:
            entries.extend(
                expand_installments(txn, lookup, on_missing_category=on_missing_category)
            )
    return entries


def total_from_period_amount(period_amount: Decimal | int | float | str, total_periods: int) -> Decimal:
    """
    Total implied by a per-period amount typed into the entry form.

    The per-period figure is already rounded by the user, so the total is
    derived from it (and rounded to cents) rather than the other way round.
    """
    if total_periods < MIN_PERIODS:
        raise InvalidInstallmentPlanError(
            f"total_periods={total_periods}, expected >= {MIN_PERIODS}"
        )
    return round_money(to_money(period_amount) * total_periods)


def mark_installments_paid(txn: Transaction, up_to: int) -> Transaction:
    """
    Return a copy of txn with periods 1..up_to marked paid.

    Progress only moves forward: a lower up_to than the current paid count
    leaves the transaction unchanged.
    """
    plan = validate_installment_transaction(txn)
    if not 0 <= up_to <= plan.total_periods:
        raise InvalidInstallmentPlanError(
            f"Transaction {txn.id}: cannot mark {up_to} of {plan.total_periods} periods paid"
        )
    if up_to <= plan.paid_periods:
        return txn
    return replace(txn, installment_plan=replace(plan, paid_periods=up_to))
