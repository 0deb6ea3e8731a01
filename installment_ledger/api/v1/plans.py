"""POST /v1/installment-plans - Installment plan dashboard"""

import time
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request

from installment_ledger.api.v1.schemas import PlanCatalogRequest, PlanCatalogResponse, PlanSummarySchema
from installment_ledger.api.dependencies import get_missing_category_policy, get_request_id, get_today
from installment_ledger.domain.categories import build_category_lookup, find_orphaned_installments
from installment_ledger.domain.exceptions import DomainException
from installment_ledger.domain.models import MissingCategoryPolicy
from installment_ledger.domain.plans import build_plan_catalog
from installment_ledger.infrastructure.observability.logging import log_orphaned_transactions, log_view_built
from installment_ledger.infrastructure.observability.metrics import (
    record_orphans,
    record_plan_statuses,
    record_view,
)

router = APIRouter()

VIEW = "plans"


@router.post("/installment-plans", response_model=PlanCatalogResponse)
def get_installment_plans(
    request_body: PlanCatalogRequest,
    request: Request,
    today: date = Depends(get_today),
    policy: MissingCategoryPolicy = Depends(get_missing_category_policy),
):
    """
    Classify every installment plan against today.

    Returns:
        Plans sorted by start date (newest first) with paid/pending breakdown
        and active/overdue/completed status
    """
    start_time = time.time()
    request_id = get_request_id(request)

    transactions = [t.to_domain() for t in request_body.transactions]
    lookup = build_category_lookup(c.to_domain() for c in request_body.categories)

    try:
        plans = build_plan_catalog(transactions, lookup, today, on_missing_category=policy)
    except DomainException as e:
        logging.warning(f"Invalid installment plan: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    orphans = find_orphaned_installments(transactions, lookup, policy)
    if orphans:
        record_orphans(VIEW, len(orphans))
        log_orphaned_transactions(request_id, VIEW, orphans)

    duration_ms = (time.time() - start_time) * 1000
    record_view(VIEW)
    record_plan_statuses(plans)
    log_view_built(request_id, VIEW, len(transactions), len(plans), duration_ms)

    return PlanCatalogResponse(
        today=today,
        plans=[PlanSummarySchema.from_domain(plan) for plan in plans],
    )
