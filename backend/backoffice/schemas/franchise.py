"""Franchise schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from backoffice.models.franchise import FranchiseStatus
from backoffice.schemas.contract import ContractTerms
from backoffice.services.schedule import MAX_AMOUNT


class FranchiseBase(BaseModel):
    """Base franchise schema."""

    name: str = Field(min_length=2, max_length=200)
    company_name: str = Field(min_length=2, max_length=200)
    owner_name: str = Field(min_length=2, max_length=200)
    owner_email: EmailStr
    owner_phone: Optional[str] = None
    tax_id: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    commune: Optional[str] = None


class FranchiseCreate(FranchiseBase):
    """Franchise onboarding: the franchise and its first contract."""

    contract: ContractTerms
    initial_fee: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    document_url: Optional[str] = None


class FranchiseUpdate(BaseModel):
    """Franchise update schema."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    company_name: Optional[str] = None
    owner_name: Optional[str] = None
    owner_email: Optional[EmailStr] = None
    owner_phone: Optional[str] = None
    tax_id: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    commune: Optional[str] = None


class FranchiseResponse(FranchiseBase):
    """Franchise response schema."""

    id: int
    status: FranchiseStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
