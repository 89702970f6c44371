"""Contract routes: schedule preview, creation, edits, termination and renewal."""

import logging
from datetime import date

from fastapi import APIRouter, Request, status

from backoffice.core.rate_limit import limiter
from backoffice.core.responses import list_response
from backoffice.db.session import DbSession
from backoffice.models import FranchiseContract
from backoffice.schemas.contract import (
    ContractCreate,
    ContractRenew,
    ContractResponse,
    ContractTerminate,
    ContractTerms,
    ContractUpdate,
    ObligationResponse,
)
from backoffice.services.contract_service import ContractLifecycleService
from backoffice.services.schedule import generate_schedule, summarize_schedule

logger = logging.getLogger(__name__)

router = APIRouter()


def contract_response(contract: FranchiseContract) -> ContractResponse:
    """Serialize a contract with its status as of today."""
    data = ContractResponse.model_validate(contract)
    return data.model_copy(update={"status": contract.status_on(date.today()).value})


@router.post("/schedule-preview")
@limiter.limit("60/minute")
def preview_schedule(request: Request, terms: ContractTerms):
    """Generate a payment schedule without saving anything."""
    obligations = generate_schedule(
        None,
        terms.start_date,
        terms.duration_years,
        terms.royalty_amount,
        terms.marketing_amount,
        terms.annual_increase,
        terms.grace_period_months,
    )
    return {
        **list_response([ObligationResponse.model_validate(o) for o in obligations]),
        "summary": summarize_schedule(obligations),
    }


@router.post("/", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_contract(request: Request, db: DbSession, data: ContractCreate):
    """Create a contract and generate its payments."""
    contract = ContractLifecycleService(db).create_contract(**data.model_dump())
    return contract_response(contract)


@router.get("/{contract_id}", response_model=ContractResponse)
@limiter.limit("60/minute")
def get_contract(request: Request, contract_id: int, db: DbSession):
    """Get a contract by ID."""
    return contract_response(ContractLifecycleService(db).get_contract(contract_id))


@router.put("/{contract_id}", response_model=ContractResponse)
@limiter.limit("30/minute")
def update_contract(request: Request, contract_id: int, db: DbSession, data: ContractUpdate):
    """Update a contract."""
    contract = ContractLifecycleService(db).update_contract(
        contract_id, data.model_dump(exclude_unset=True)
    )
    return contract_response(contract)


@router.post("/{contract_id}/terminate")
@limiter.limit("30/minute")
def terminate_contract(request: Request, contract_id: int, db: DbSession, data: ContractTerminate):
    """Terminate a contract and drop its unpaid future payments."""
    return ContractLifecycleService(db).terminate_contract(contract_id, data.termination_date)


@router.get("/{contract_id}/renewal-defaults")
@limiter.limit("60/minute")
def get_renewal_defaults(request: Request, contract_id: int, db: DbSession):
    """Suggested values for the renewal form."""
    return ContractLifecycleService(db).renewal_defaults(contract_id)


@router.post("/{contract_id}/renew", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def renew_contract(request: Request, contract_id: int, db: DbSession, data: ContractRenew):
    """Renew a contract into a new one with a fresh payment schedule."""
    contract = ContractLifecycleService(db).renew_contract(contract_id, data.model_dump())
    return contract_response(contract)
