"""Franchise contract model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.db.base import Base, TimestampMixin


class ContractStatus(str, PyEnum):
    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class FranchiseContract(Base, TimestampMixin):
    """Commercial terms binding a franchise for a fixed number of years.

    The terms that drive the payment schedule (start date, duration,
    amounts, increase, grace period) are frozen once payments exist.
    A renewal is a new row pointing back through ``renewed_from_id``.
    """

    __tablename__ = "franchise_contracts"

    id: Mapped[int] = mapped_column(primary_key=True)
    franchise_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("franchises.id"), nullable=False, index=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    duration_years: Mapped[int] = mapped_column(Integer, nullable=False)
    initial_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    renewal_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    royalty_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    marketing_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    annual_increase: Mapped[Decimal] = mapped_column(Numeric(6, 2), default=0, nullable=False)
    grace_period_months: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    terminated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    termination_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    document_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    renewed_from_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("franchise_contracts.id"), nullable=True
    )

    franchise: Mapped["Franchise"] = relationship("Franchise", back_populates="contracts")
    payments: Mapped[list["RoyaltyPayment"]] = relationship(
        "RoyaltyPayment",
        back_populates="contract",
        order_by="RoyaltyPayment.due_date",
        cascade="all, delete-orphan",
    )

    @property
    def end_date(self) -> date:
        """Nominal end of the contract term (exclusive)."""
        return self.start_date + relativedelta(years=self.duration_years)

    def status_on(self, today: date) -> ContractStatus:
        if self.terminated:
            return ContractStatus.TERMINATED
        if today >= self.end_date:
            return ContractStatus.EXPIRED
        return ContractStatus.ACTIVE


# Forward references
from backoffice.models.franchise import Franchise  # noqa: E402
from backoffice.models.royalty import RoyaltyPayment  # noqa: E402
