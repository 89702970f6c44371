"""
Royalty Service
===============
Payment recording, edit history, batch updates, overdue detection and the
figures shown on the royalties dashboard.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from dateutil.relativedelta import relativedelta
from sqlalchemy import extract, func
from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.core.errors import NotFoundError, PaymentAlreadyPaid
from backoffice.models import PaymentLog, PaymentStatus, RoyaltyPayment

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "royalty_amount", "marketing_amount", "due_date", "payment_date",
    "payment_method", "payment_reference", "status", "notes",
)

# NOT NULL columns: an explicit null in an edit leaves them unchanged
REQUIRED_FIELDS = ("royalty_amount", "marketing_amount", "due_date", "status")


class RoyaltyService:
    """Royalty payment tracking with database persistence."""

    def __init__(self, db: Session):
        self.db = db

    def get_payment(self, payment_id: int) -> RoyaltyPayment:
        payment = self.db.get(RoyaltyPayment, payment_id)
        if not payment:
            raise NotFoundError("Payment", payment_id)
        return payment

    def list_payments(
        self,
        franchise_id: Optional[int] = None,
        status: Optional[PaymentStatus] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> List[RoyaltyPayment]:
        """Get royalty payments ordered by due date."""
        query = self.db.query(RoyaltyPayment)
        if franchise_id:
            query = query.filter(RoyaltyPayment.franchise_id == franchise_id)
        if status:
            query = query.filter(RoyaltyPayment.status == status)
        if year:
            query = query.filter(extract("year", RoyaltyPayment.due_date) == year)
        if month:
            query = query.filter(extract("month", RoyaltyPayment.due_date) == month)
        return query.order_by(RoyaltyPayment.due_date.asc(), RoyaltyPayment.id.asc()).all()

    # ==================== PAYMENT RECORDING ====================

    def record_payment(
        self,
        payment_id: int,
        payment_date: Optional[date] = None,
        payment_method: str = "transfer",
        payment_reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> RoyaltyPayment:
        """Mark an obligation as paid."""
        payment = self.get_payment(payment_id)
        if payment.status == PaymentStatus.PAID:
            raise PaymentAlreadyPaid(payment_id)

        payment.status = PaymentStatus.PAID
        payment.payment_date = payment_date or date.today()
        payment.payment_method = payment_method
        payment.payment_reference = payment_reference
        payment.notes = notes

        self.db.commit()
        self.db.refresh(payment)

        logger.info(f"Recorded payment {payment_id} ({payment.amount}) via {payment_method}")
        return payment

    def edit_payment(self, payment_id: int, changes: Dict[str, Any]) -> RoyaltyPayment:
        """Apply an edit, logging the payment's previous state first."""
        payment = self.get_payment(payment_id)

        self.db.add(PaymentLog(
            payment_id=payment.id,
            status=payment.status,
            amount=payment.amount,
            payment_method=payment.payment_method,
            payment_reference=payment.payment_reference,
            due_date=payment.due_date,
            payment_date=payment.payment_date,
            notes=payment.notes,
        ))

        for field, value in changes.items():
            if field not in EDITABLE_FIELDS:
                continue
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(payment, field, value)
        payment.amount = Decimal(payment.royalty_amount) + Decimal(payment.marketing_amount)

        self.db.commit()
        self.db.refresh(payment)

        logger.info(f"Edited payment {payment_id}: {sorted(changes)}")
        return payment

    def get_logs(self, payment_id: int) -> List[PaymentLog]:
        payment = self.get_payment(payment_id)
        return list(payment.logs)

    def batch_update(
        self,
        payment_ids: List[int],
        status: PaymentStatus,
        payment_date: Optional[date] = None,
        payment_method: Optional[str] = None,
    ) -> int:
        """Set the same status (and payment details) on several payments."""
        values: Dict[str, Any] = {"status": status}
        if status == PaymentStatus.PAID:
            values["payment_date"] = payment_date or date.today()
        elif payment_date:
            values["payment_date"] = payment_date
        if payment_method:
            values["payment_method"] = payment_method

        updated = (
            self.db.query(RoyaltyPayment)
            .filter(RoyaltyPayment.id.in_(payment_ids))
            .update(values, synchronize_session=False)
        )
        self.db.commit()

        logger.info(f"Batch update: {updated}/{len(payment_ids)} payments set to {status.value}")
        return updated

    # ==================== OVERDUE DETECTION ====================

    def mark_overdue(self, today: Optional[date] = None) -> List[RoyaltyPayment]:
        """Flip upcoming/pending obligations whose due date has passed to late."""
        today = today or date.today()
        cutoff = today - timedelta(days=settings.overdue_grace_days)

        payments = self.db.query(RoyaltyPayment).filter(
            RoyaltyPayment.status.in_([PaymentStatus.UPCOMING, PaymentStatus.PENDING]),
            RoyaltyPayment.due_date < cutoff,
        ).all()

        for p in payments:
            p.status = PaymentStatus.LATE

        self.db.commit()

        if payments:
            logger.warning(f"Marked {len(payments)} payments late (due before {cutoff})")
        return payments

    # ==================== DASHBOARD STATS ====================

    def get_stats(self, today: Optional[date] = None,
                  franchise_id: Optional[int] = None) -> Dict[str, Any]:
        """Royalties dashboard figures.

        - total_due: unpaid, non-grace amounts due before one month from today
        - pending_payments: upcoming obligations due before one month from today
        - late_payments: obligations currently tagged late
        - collection_rate: percent of this month's obligations already paid
        """
        today = today or date.today()
        next_month = today + relativedelta(months=1)
        payments = self.list_payments(franchise_id=franchise_id)

        total_due = sum(
            (Decimal(p.amount) for p in payments
             if p.status not in (PaymentStatus.PAID, PaymentStatus.GRACE) and p.due_date < next_month),
            Decimal("0"),
        )
        pending = sum(
            1 for p in payments
            if p.status == PaymentStatus.UPCOMING and p.due_date < next_month
        )
        late = sum(1 for p in payments if p.status == PaymentStatus.LATE)

        current_month = [
            p for p in payments
            if p.due_date.year == today.year and p.due_date.month == today.month
        ]
        paid_current = sum(1 for p in current_month if p.status == PaymentStatus.PAID)
        collection_rate = round(paid_current / len(current_month) * 100) if current_month else 0

        return {
            "total_due": total_due,
            "pending_payments": pending,
            "late_payments": late,
            "collection_rate": collection_rate,
            "currency": settings.default_currency,
        }

    def log_counts(self, payment_ids: List[int]) -> Dict[int, int]:
        """Number of edit-log rows per payment, for the history badge."""
        if not payment_ids:
            return {}
        rows = (
            self.db.query(PaymentLog.payment_id, func.count(PaymentLog.id))
            .filter(PaymentLog.payment_id.in_(payment_ids))
            .group_by(PaymentLog.payment_id)
            .all()
        )
        return {payment_id: count for payment_id, count in rows}
