"""Royalty payment and payment log models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    Date, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Text, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.db.base import Base, TimestampMixin


class PaymentStatus(str, PyEnum):
    """Lifecycle of one monthly obligation.

    The generator only emits GRACE and UPCOMING; the remaining states are
    reached through payment recording, edits and overdue detection.
    """

    GRACE = "grace"
    UPCOMING = "upcoming"
    PENDING = "pending"
    PAID = "paid"
    LATE = "late"


def _status_column() -> Enum:
    return Enum(PaymentStatus, values_callable=lambda e: [m.value for m in e],
                native_enum=False, length=20)


class RoyaltyPayment(Base, TimestampMixin):
    """One monthly royalty + marketing obligation of a contract."""

    __tablename__ = "royalty_payments"

    id: Mapped[int] = mapped_column(primary_key=True)
    franchise_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("franchises.id"), nullable=False, index=True
    )
    contract_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("franchise_contracts.id"), nullable=False, index=True
    )
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    royalty_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    marketing_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        _status_column(), default=PaymentStatus.UPCOMING, nullable=False
    )
    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # transfer, check, card, cash
    payment_reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    franchise: Mapped["Franchise"] = relationship("Franchise", back_populates="payments")
    contract: Mapped["FranchiseContract"] = relationship("FranchiseContract", back_populates="payments")
    logs: Mapped[list["PaymentLog"]] = relationship(
        "PaymentLog",
        back_populates="payment",
        order_by="PaymentLog.id.desc()",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_royalty_status_due", "status", "due_date"),
        Index("idx_royalty_franchise_due", "franchise_id", "due_date"),
    )


class PaymentLog(Base):
    """Snapshot of a payment taken right before it was edited."""

    __tablename__ = "payment_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    payment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("royalty_payments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[PaymentStatus] = mapped_column(_status_column(), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    payment: Mapped["RoyaltyPayment"] = relationship("RoyaltyPayment", back_populates="logs")


# Forward references
from backoffice.models.franchise import Franchise  # noqa: E402
from backoffice.models.contract import FranchiseContract  # noqa: E402
