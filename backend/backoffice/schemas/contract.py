"""Contract and payment schedule schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from backoffice.models.royalty import PaymentStatus
from backoffice.services.schedule import MAX_AMOUNT, MAX_ANNUAL_INCREASE, MAX_DURATION_YEARS


class ContractTerms(BaseModel):
    """Commercial terms that drive the payment schedule."""

    start_date: date
    duration_years: int = Field(ge=1, le=MAX_DURATION_YEARS, description="Contract term in years")
    royalty_amount: Decimal = Field(ge=0, le=MAX_AMOUNT)
    marketing_amount: Decimal = Field(ge=0, le=MAX_AMOUNT)
    annual_increase: Decimal = Field(
        default=Decimal("0"), ge=0, le=MAX_ANNUAL_INCREASE, description="Yearly increase in percent"
    )
    grace_period_months: int = Field(default=0, ge=0)


class ContractCreate(ContractTerms):
    """Contract creation schema."""

    franchise_id: int
    initial_fee: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    document_url: Optional[str] = None


class ContractUpdate(BaseModel):
    """Contract update schema.

    Schedule-driving terms are frozen once the contract exists; sending a
    different value for them is rejected. Renew the contract instead.
    """

    start_date: Optional[date] = None
    duration_years: Optional[int] = Field(default=None, ge=1, le=MAX_DURATION_YEARS)
    royalty_amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)
    marketing_amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)
    annual_increase: Optional[Decimal] = Field(default=None, ge=0, le=MAX_ANNUAL_INCREASE)
    grace_period_months: Optional[int] = Field(default=None, ge=0)
    initial_fee: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)
    renewal_fee: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)
    document_url: Optional[str] = None


class ContractTerminate(BaseModel):
    termination_date: date


class ContractRenew(BaseModel):
    """Renewal form; blank fields default to the previous contract's terms."""

    start_date: Optional[date] = None
    duration_years: Optional[int] = Field(default=None, ge=1, le=MAX_DURATION_YEARS)
    royalty_amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)
    marketing_amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)
    annual_increase: Optional[Decimal] = Field(default=None, ge=0, le=MAX_ANNUAL_INCREASE)
    grace_period_months: int = Field(default=0, ge=0)
    renewal_fee: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)


class ContractResponse(BaseModel):
    """Contract response schema."""

    id: int
    franchise_id: int
    start_date: date
    end_date: date
    duration_years: int
    initial_fee: Decimal
    renewal_fee: Decimal
    royalty_amount: Decimal
    marketing_amount: Decimal
    annual_increase: Decimal
    grace_period_months: int
    terminated: bool
    termination_date: Optional[date] = None
    document_url: Optional[str] = None
    renewed_from_id: Optional[int] = None
    status: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ObligationResponse(BaseModel):
    """A generated (not yet persisted) obligation."""

    month_index: int
    due_date: date
    royalty_amount: Decimal
    marketing_amount: Decimal
    amount: Decimal
    status: PaymentStatus

    model_config = {"from_attributes": True}
