"""Franchise routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Request, status

from backoffice.api.routes.contracts import contract_response
from backoffice.core.rate_limit import limiter
from backoffice.core.responses import list_response
from backoffice.db.session import DbSession
from backoffice.models import FranchiseStatus
from backoffice.schemas.franchise import FranchiseCreate, FranchiseResponse, FranchiseUpdate
from backoffice.schemas.royalty import PaymentResponse
from backoffice.services.contract_service import ContractLifecycleService
from backoffice.services.franchise_service import FranchiseService

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== CORE CRUD ====================

@router.get("/")
@limiter.limit("60/minute")
def list_franchises(
    request: Request,
    db: DbSession,
    status: Optional[FranchiseStatus] = None,
    search: Optional[str] = None,
):
    """List franchises, optionally filtered by status or name."""
    franchises = FranchiseService(db).list_franchises(status=status, search=search)
    return list_response([FranchiseResponse.model_validate(f) for f in franchises])


@router.post("/", response_model=FranchiseResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_franchise(request: Request, db: DbSession, data: FranchiseCreate):
    """Onboard a franchise with its first contract and payment schedule."""
    return FranchiseService(db).onboard_franchise(data.model_dump())


@router.get("/{franchise_id}", response_model=FranchiseResponse)
@limiter.limit("60/minute")
def get_franchise(request: Request, franchise_id: int, db: DbSession):
    """Get a franchise by ID."""
    return FranchiseService(db).get_franchise(franchise_id)


@router.put("/{franchise_id}", response_model=FranchiseResponse)
@limiter.limit("30/minute")
def update_franchise(request: Request, franchise_id: int, db: DbSession, data: FranchiseUpdate):
    """Update franchise contact details."""
    return FranchiseService(db).update_franchise(franchise_id, data.model_dump(exclude_unset=True))


# ==================== CONTRACTS & PAYMENTS ====================

@router.get("/{franchise_id}/contracts")
@limiter.limit("60/minute")
def list_franchise_contracts(request: Request, franchise_id: int, db: DbSession):
    """Contract history of a franchise, newest first."""
    contracts = ContractLifecycleService(db).list_contracts(franchise_id)
    return list_response([contract_response(c) for c in contracts])


@router.get("/{franchise_id}/payments")
@limiter.limit("60/minute")
def list_franchise_payments(request: Request, franchise_id: int, db: DbSession):
    """Royalty payments of a franchise, latest due date first."""
    payments = FranchiseService(db).list_payments(franchise_id)
    return list_response([PaymentResponse.model_validate(p) for p in payments])
