"""Franchise model."""

from __future__ import annotations

from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.db.base import Base, TimestampMixin


class FranchiseStatus(str, PyEnum):
    ACTIVE = "active"
    TERMINATED = "terminated"


class Franchise(Base, TimestampMixin):
    """A franchised agency: owner, company and contact details."""

    __tablename__ = "franchises"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    owner_name: Mapped[str] = mapped_column(String(200), nullable=False)
    owner_email: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    tax_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    commune: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    status: Mapped[FranchiseStatus] = mapped_column(
        Enum(FranchiseStatus, values_callable=lambda e: [m.value for m in e],
             native_enum=False, length=20),
        default=FranchiseStatus.ACTIVE,
        nullable=False,
    )

    contracts: Mapped[list["FranchiseContract"]] = relationship(
        "FranchiseContract",
        back_populates="franchise",
        order_by="FranchiseContract.start_date",
    )
    payments: Mapped[list["RoyaltyPayment"]] = relationship(
        "RoyaltyPayment", back_populates="franchise"
    )

    __table_args__ = (
        Index("idx_franchise_status", "status"),
    )


# Forward references
from backoffice.models.contract import FranchiseContract  # noqa: E402
from backoffice.models.royalty import RoyaltyPayment  # noqa: E402
