"""
Contract Lifecycle Service
==========================
Creates contracts together with their payment schedule, terminates them
(dropping unpaid future obligations) and renews them into a new contract.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from backoffice.core.errors import (
    ContractAlreadyTerminated,
    ContractLocked,
    NotFoundError,
)
from backoffice.models import (
    Franchise,
    FranchiseContract,
    FranchiseStatus,
    PaymentStatus,
    RoyaltyPayment,
)
from backoffice.services.schedule import (
    PaymentObligation,
    generate_schedule,
    suggest_renewal_start,
)

logger = logging.getLogger(__name__)

# Terms the payment schedule is generated from
SCHEDULE_FIELDS = (
    "start_date",
    "duration_years",
    "royalty_amount",
    "marketing_amount",
    "annual_increase",
    "grace_period_months",
)


class ContractLifecycleService:
    """Contract creation, termination and renewal with database persistence."""

    def __init__(self, db: Session):
        self.db = db

    # ==================== LOOKUPS ====================

    def get_franchise(self, franchise_id: int) -> Franchise:
        franchise = self.db.get(Franchise, franchise_id)
        if not franchise:
            raise NotFoundError("Franchise", franchise_id)
        return franchise

    def get_contract(self, contract_id: int) -> FranchiseContract:
        contract = self.db.get(FranchiseContract, contract_id)
        if not contract:
            raise NotFoundError("Contract", contract_id)
        return contract

    def list_contracts(self, franchise_id: int) -> List[FranchiseContract]:
        self.get_franchise(franchise_id)
        return (
            self.db.query(FranchiseContract)
            .filter(FranchiseContract.franchise_id == franchise_id)
            .order_by(FranchiseContract.start_date.desc())
            .all()
        )

    # ==================== CREATION ====================

    def create_contract(
        self,
        franchise_id: int,
        start_date: date,
        duration_years: int,
        royalty_amount: Decimal,
        marketing_amount: Decimal,
        annual_increase: Decimal = Decimal("0"),
        grace_period_months: int = 0,
        initial_fee: Decimal = Decimal("0"),
        renewal_fee: Decimal = Decimal("0"),
        document_url: Optional[str] = None,
        renewed_from_id: Optional[int] = None,
        commit: bool = True,
    ) -> FranchiseContract:
        """Insert a contract and its full payment schedule.

        The schedule is generated before anything is written, so invalid
        terms leave the database untouched.
        """
        franchise = self.get_franchise(franchise_id)

        obligations = generate_schedule(
            None, start_date, duration_years, royalty_amount, marketing_amount,
            annual_increase, grace_period_months,
        )

        contract = FranchiseContract(
            franchise_id=franchise.id,
            start_date=start_date,
            duration_years=duration_years,
            royalty_amount=royalty_amount,
            marketing_amount=marketing_amount,
            annual_increase=annual_increase,
            grace_period_months=grace_period_months,
            initial_fee=initial_fee,
            renewal_fee=renewal_fee,
            document_url=document_url,
            renewed_from_id=renewed_from_id,
            terminated=False,
        )
        self.db.add(contract)
        self.db.flush()

        self._persist_schedule(contract, obligations)

        if commit:
            self.db.commit()
            self.db.refresh(contract)

        logger.info(
            f"Created contract {contract.id} for franchise {franchise_id}: "
            f"{len(obligations)} payments from {start_date}"
        )
        return contract

    def _persist_schedule(self, contract: FranchiseContract,
                          obligations: List[PaymentObligation]) -> None:
        self.db.add_all([
            RoyaltyPayment(
                franchise_id=contract.franchise_id,
                contract_id=contract.id,
                due_date=o.due_date,
                royalty_amount=o.royalty_amount,
                marketing_amount=o.marketing_amount,
                amount=o.amount,
                status=o.status,
            )
            for o in obligations
        ])

    # ==================== UPDATES ====================

    def update_contract(self, contract_id: int, changes: Dict[str, Any]) -> FranchiseContract:
        """Edit a contract's metadata.

        Every stored contract had its schedule generated at creation, so the
        terms behind it are frozen for good, even after termination removed
        the unpaid payments.
        """
        contract = self.get_contract(contract_id)

        changed_terms = [
            field for field in SCHEDULE_FIELDS
            if field in changes and changes[field] is not None
            and changes[field] != getattr(contract, field)
        ]
        if changed_terms:
            raise ContractLocked(contract_id, changed_terms)

        for field, value in changes.items():
            if value is not None and hasattr(contract, field):
                setattr(contract, field, value)

        self.db.commit()
        self.db.refresh(contract)

        logger.info(f"Updated contract {contract_id}: {sorted(k for k, v in changes.items() if v is not None)}")
        return contract

    # ==================== TERMINATION ====================

    def terminate_contract(self, contract_id: int, termination_date: date) -> Dict[str, Any]:
        """End a contract early.

        Unpaid obligations due after the termination date are deleted, paid
        ones and anything due on or before it are kept. The franchise is
        marked terminated unless another contract still covers it.
        """
        contract = self.get_contract(contract_id)
        if contract.terminated:
            raise ContractAlreadyTerminated(contract_id)

        contract.terminated = True
        contract.termination_date = termination_date

        dropped = [
            p for p in contract.payments
            if p.status != PaymentStatus.PAID and p.due_date > termination_date
        ]
        for payment in dropped:
            contract.payments.remove(payment)

        franchise = contract.franchise
        still_covered = any(
            c.id != contract.id and not c.terminated and c.end_date > termination_date
            for c in franchise.contracts
        )
        if not still_covered:
            franchise.status = FranchiseStatus.TERMINATED

        self.db.commit()
        self.db.refresh(contract)

        logger.warning(
            f"Terminated contract {contract_id} on {termination_date}: "
            f"removed {len(dropped)} future payments"
        )

        return {
            "contract_id": contract_id,
            "termination_date": termination_date.isoformat(),
            "deleted_payments": len(dropped),
            "franchise_status": franchise.status.value,
        }

    # ==================== RENEWAL ====================

    def renewal_defaults(self, contract_id: int) -> Dict[str, Any]:
        """Values a renewal form starts from."""
        contract = self.get_contract(contract_id)
        return {
            "start_date": suggest_renewal_start(
                contract.start_date,
                contract.duration_years,
                contract.terminated,
                contract.termination_date,
            ).isoformat(),
            "duration_years": contract.duration_years,
            "royalty_amount": str(contract.royalty_amount),
            "marketing_amount": str(contract.marketing_amount),
            "annual_increase": str(contract.annual_increase),
            "grace_period_months": 0,
            "renewal_fee": "0",
        }

    def renew_contract(self, contract_id: int, terms: Dict[str, Any]) -> FranchiseContract:
        """Create the follow-up contract; the previous one stays as history."""
        previous = self.get_contract(contract_id)

        def pick(field: str) -> Any:
            value = terms.get(field)
            return getattr(previous, field) if value is None else value

        start_date = terms.get("start_date") or suggest_renewal_start(
            previous.start_date,
            previous.duration_years,
            previous.terminated,
            previous.termination_date,
        )

        contract = self.create_contract(
            franchise_id=previous.franchise_id,
            start_date=start_date,
            duration_years=pick("duration_years"),
            royalty_amount=pick("royalty_amount"),
            marketing_amount=pick("marketing_amount"),
            annual_increase=pick("annual_increase"),
            grace_period_months=terms.get("grace_period_months") or 0,
            renewal_fee=terms.get("renewal_fee") or Decimal("0"),
            renewed_from_id=previous.id,
            commit=False,
        )

        franchise = contract.franchise
        if franchise.status == FranchiseStatus.TERMINATED:
            franchise.status = FranchiseStatus.ACTIVE
            logger.info(f"Franchise {franchise.id} reactivated by renewal")

        self.db.commit()
        self.db.refresh(contract)

        logger.info(f"Renewed contract {contract_id} as contract {contract.id} starting {start_date}")
        return contract
