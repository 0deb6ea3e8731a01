"""POST /v1/monthly-view - Transactions and due installments for one month"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from installment_ledger.api.v1.schemas import (
    EntryRow,
    MonthlyViewRequest,
    MonthlyViewResponse,
    SummarySchema,
)
from installment_ledger.api.dependencies import get_missing_category_policy, get_request_id
from installment_ledger.domain.categories import build_category_lookup, find_orphaned_installments
from installment_ledger.domain.exceptions import DomainException
from installment_ledger.domain.models import MissingCategoryPolicy
from installment_ledger.domain.monthly import build_monthly_view
from installment_ledger.infrastructure.observability.logging import log_orphaned_transactions, log_view_built
from installment_ledger.infrastructure.observability.metrics import record_orphans, record_view

router = APIRouter()

VIEW = "monthly"


@router.post("/monthly-view", response_model=MonthlyViewResponse)
def get_monthly_view(
    request_body: MonthlyViewRequest,
    request: Request,
    policy: MissingCategoryPolicy = Depends(get_missing_category_policy),
):
    """
    Build the month view shown on the financial dashboard.

    Returns:
        Entries newest first (plain transactions and installment periods due
        that month) plus revenue/expense/balance totals
    """
    start_time = time.time()
    request_id = get_request_id(request)

    transactions = [t.to_domain() for t in request_body.transactions]
    lookup = build_category_lookup(c.to_domain() for c in request_body.categories)

    try:
        view = build_monthly_view(
            transactions,
            lookup,
            request_body.year,
            request_body.month,
            on_missing_category=policy,
        )
    except DomainException as e:
        logging.warning(f"Invalid monthly view request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    orphans = find_orphaned_installments(transactions, lookup, policy)
    if orphans:
        record_orphans(VIEW, len(orphans))
        log_orphaned_transactions(request_id, VIEW, orphans)

    duration_ms = (time.time() - start_time) * 1000
    record_view(VIEW)
    log_view_built(request_id, VIEW, len(transactions), len(view.entries), duration_ms)

    return MonthlyViewResponse(
        year=view.year,
        month=view.month,
        entries=[EntryRow.from_entry(entry, lookup) for entry in view.entries],
        summary=SummarySchema.from_domain(view.summary),
    )
