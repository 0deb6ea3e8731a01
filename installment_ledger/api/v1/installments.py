"""POST /v1/installments/* - Single-plan expansion and payment progress"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from installment_ledger.api.v1.schemas import (
    EntryRow,
    ExpandRequest,
    ExpandResponse,
    MarkPaidRequest,
    TransactionSchema,
)
from installment_ledger.api.dependencies import get_missing_category_policy, get_request_id
from installment_ledger.domain.categories import build_category_lookup, find_orphaned_installments
from installment_ledger.domain.exceptions import DomainException
from installment_ledger.domain.installments import expand_installments, mark_installments_paid
from installment_ledger.domain.models import MissingCategoryPolicy
from installment_ledger.infrastructure.observability.logging import log_orphaned_transactions, log_view_built
from installment_ledger.infrastructure.observability.metrics import record_orphans, record_view

router = APIRouter()

VIEW = "expand"


@router.post("/installments/expand", response_model=ExpandResponse)
def expand_plan(
    request_body: ExpandRequest,
    request: Request,
    policy: MissingCategoryPolicy = Depends(get_missing_category_policy),
):
    """
    List every period of one installment transaction.

    Returns:
        total_periods entries with due dates, amounts and paid/pending status
        (empty when the category does not resolve and the policy is skip)
    """
    start_time = time.time()
    request_id = get_request_id(request)

    txn = request_body.transaction.to_domain()
    lookup = build_category_lookup(c.to_domain() for c in request_body.categories)

    try:
        entries = expand_installments(txn, lookup, on_missing_category=policy)
    except DomainException as e:
        logging.warning(f"Invalid installment plan: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    orphans = find_orphaned_installments([txn], lookup, policy)
    if orphans:
        record_orphans(VIEW, len(orphans))
        log_orphaned_transactions(request_id, VIEW, orphans)

    duration_ms = (time.time() - start_time) * 1000
    record_view(VIEW)
    log_view_built(request_id, VIEW, 1, len(entries), duration_ms)

    return ExpandResponse(
        parent_id=txn.id,
        entries=[EntryRow.from_installment(entry) for entry in entries],
    )


@router.post("/installments/mark-paid", response_model=TransactionSchema)
def mark_paid(request_body: MarkPaidRequest, request: Request):
    """
    Advance payment progress of an installment transaction.

    Returns:
        The transaction with paid periods raised to up_to (never lowered)
    """
    request_id = get_request_id(request)

    try:
        updated = mark_installments_paid(request_body.transaction.to_domain(), request_body.up_to)
    except DomainException as e:
        logging.warning(f"Invalid payment progress: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return TransactionSchema.from_domain(updated)
