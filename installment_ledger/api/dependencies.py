"""Dependency injection for FastAPI endpoints"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import Request

from installment_ledger.config import settings
from installment_ledger.domain.models import MissingCategoryPolicy


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> date:
    """Reference date for plan status, in the configured timezone (overridden in tests)"""
    return datetime.now(ZoneInfo(settings.timezone)).date()


def get_missing_category_policy() -> MissingCategoryPolicy:
    return settings.missing_category_policy
