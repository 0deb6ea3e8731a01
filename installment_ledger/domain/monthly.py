"""Monthly view - plain transactions and due installment periods for one month"""

from decimal import Decimal
from typing import Iterable, List, Sequence

from installment_ledger.domain.categories import CategoryLookup
from installment_ledger.domain.exceptions import InvalidPeriodError
from installment_ledger.domain.installments import expand_all_installments
from installment_ledger.domain.models import (
    MissingCategoryPolicy,
    MonthlyEntry,
    MonthlySummary,
    MonthlyView,
    Transaction,
    TransactionKind,
)
from installment_ledger.utils.date_utils import month_bounds
from installment_ledger.utils.money import to_money


def summarize_entries(entries: Iterable[MonthlyEntry]) -> MonthlySummary:
    """
    Totals for a month.

    Installment periods count as expense once due, whether paid or pending.
    Installment-flagged parents never count directly; their periods do.
    """
    total_revenue = Decimal("0")
    total_expense = Decimal("0")

    for entry in entries:
        if entry.entry_type == "installment":
            total_expense += to_money(entry.amount)
        elif entry.kind == TransactionKind.revenue:
            total_revenue += to_money(entry.amount)
        elif not entry.is_installment:
            total_expense += to_money(entry.amount)

    return MonthlySummary(
        total_revenue=total_revenue,
        total_expense=total_expense,
        balance=total_revenue - total_expense,
    )


def build_monthly_view(
    transactions: Sequence[Transaction],
    lookup: CategoryLookup,
    year: int,
    month: int,
    *,
    on_missing_category: MissingCategoryPolicy = MissingCategoryPolicy.skip,
) -> MonthlyView:
    """
    Merge single transactions and installment periods falling in year/month.

    Requirements:
    - month is 1-based (January == 1)
    - Single transactions (recurrent ones included) are placed by their own date
    - Installment periods are placed by due date, not the parent's date
    - Newest first; equal dates keep input order
    """
    try:
        first_day, last_day = month_bounds(year, month)
    except ValueError as e:
        raise InvalidPeriodError(f"No such month: year={year}, month={month}") from e

    singles: List[MonthlyEntry] = [
        txn for txn in transactions
        if not txn.is_installment and first_day <= txn.date <= last_day
    ]
    installments: List[MonthlyEntry] = [
        entry
        for entry in expand_all_installments(
            transactions, lookup, on_missing_category=on_missing_category
        )
        if first_day <= entry.due_date <= last_day
    ]

    # sorted() is stable with reverse=True, so ties keep input order
    entries = sorted(singles + installments, key=lambda e: e.display_date, reverse=True)

    return MonthlyView(
        year=year,
        month=month,
        entries=entries,
        summary=summarize_entries(entries),
    )
