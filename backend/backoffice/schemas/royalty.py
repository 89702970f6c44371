"""Royalty payment schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from backoffice.models.royalty import PaymentStatus
from backoffice.services.schedule import MAX_AMOUNT


class PaymentResponse(BaseModel):
    """Royalty payment response schema."""

    id: int
    franchise_id: int
    contract_id: int
    due_date: date
    royalty_amount: Decimal
    marketing_amount: Decimal
    amount: Decimal
    status: PaymentStatus
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PaymentRecord(BaseModel):
    """Record that the franchise paid an obligation."""

    payment_date: Optional[date] = None
    payment_method: str = "transfer"
    payment_reference: Optional[str] = None
    notes: Optional[str] = None


class PaymentUpdate(BaseModel):
    """Edit of a payment; the previous state is kept in the payment log."""

    royalty_amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)
    marketing_amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)
    due_date: Optional[date] = None
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    status: Optional[PaymentStatus] = None
    notes: Optional[str] = None


class PaymentBatchUpdate(BaseModel):
    payment_ids: List[int] = Field(min_length=1)
    status: PaymentStatus = PaymentStatus.PAID
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None


class PaymentLogResponse(BaseModel):
    id: int
    payment_id: int
    status: PaymentStatus
    amount: Decimal
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    due_date: date
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class RoyaltyStats(BaseModel):
    total_due: Decimal
    pending_payments: int
    late_payments: int
    collection_rate: int
    currency: str
