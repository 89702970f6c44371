"""Royalty payment routes."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, Request

from backoffice.core.rate_limit import limiter
from backoffice.core.responses import list_response
from backoffice.db.session import DbSession
from backoffice.models import PaymentStatus
from backoffice.schemas.royalty import (
    PaymentBatchUpdate,
    PaymentLogResponse,
    PaymentRecord,
    PaymentResponse,
    PaymentUpdate,
    RoyaltyStats,
)
from backoffice.services.royalty_service import RoyaltyService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/payments")
@limiter.limit("60/minute")
def list_payments(
    request: Request,
    db: DbSession,
    franchise_id: Optional[int] = None,
    status: Optional[PaymentStatus] = None,
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
):
    """List royalty payments with their edit-log counts."""
    service = RoyaltyService(db)
    payments = service.list_payments(franchise_id=franchise_id, status=status, year=year, month=month)
    counts = service.log_counts([p.id for p in payments])
    items = [
        {**PaymentResponse.model_validate(p).model_dump(mode="json"), "log_count": counts.get(p.id, 0)}
        for p in payments
    ]
    return list_response(items)


@router.get("/stats", response_model=RoyaltyStats)
@limiter.limit("60/minute")
def get_stats(
    request: Request,
    db: DbSession,
    franchise_id: Optional[int] = None,
    today: Optional[date] = None,
):
    """Royalties dashboard figures."""
    return RoyaltyService(db).get_stats(today=today, franchise_id=franchise_id)


@router.post("/payments/batch")
@limiter.limit("30/minute")
def batch_update_payments(request: Request, db: DbSession, data: PaymentBatchUpdate):
    """Apply one status to several payments."""
    updated = RoyaltyService(db).batch_update(
        data.payment_ids, data.status, data.payment_date, data.payment_method
    )
    return {"updated": updated, "status": data.status.value}


@router.post("/payments/{payment_id}/record", response_model=PaymentResponse)
@limiter.limit("30/minute")
def record_payment(request: Request, payment_id: int, db: DbSession, data: PaymentRecord):
    """Record that a payment was received."""
    return RoyaltyService(db).record_payment(payment_id, **data.model_dump())


@router.put("/payments/{payment_id}", response_model=PaymentResponse)
@limiter.limit("30/minute")
def edit_payment(request: Request, payment_id: int, db: DbSession, data: PaymentUpdate):
    """Edit a payment, keeping its previous state in the log."""
    return RoyaltyService(db).edit_payment(payment_id, data.model_dump(exclude_unset=True))


@router.get("/payments/{payment_id}/logs")
@limiter.limit("60/minute")
def get_payment_logs(request: Request, payment_id: int, db: DbSession):
    """Edit history of a payment, newest first."""
    logs = RoyaltyService(db).get_logs(payment_id)
    return list_response([PaymentLogResponse.model_validate(log) for log in logs])


@router.post("/mark-overdue")
@limiter.limit("10/minute")
def mark_overdue(request: Request, db: DbSession, today: Optional[date] = None):
    """Tag past-due upcoming/pending payments as late."""
    payments = RoyaltyService(db).mark_overdue(today)
    return list_response([PaymentResponse.model_validate(p) for p in payments])
