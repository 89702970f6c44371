"""
Franchise Service
=================
Franchise records and onboarding (franchise + first contract + schedule).
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from backoffice.core.errors import NotFoundError
from backoffice.models import Franchise, FranchiseStatus, RoyaltyPayment
from backoffice.services.contract_service import ContractLifecycleService

logger = logging.getLogger(__name__)

CONTACT_FIELDS = (
    "name", "company_name", "owner_name", "owner_email", "owner_phone",
    "tax_id", "email", "phone", "address", "commune",
)


class FranchiseService:
    """Franchise operations with database persistence."""

    def __init__(self, db: Session):
        self.db = db

    def get_franchise(self, franchise_id: int) -> Franchise:
        franchise = self.db.get(Franchise, franchise_id)
        if not franchise:
            raise NotFoundError("Franchise", franchise_id)
        return franchise

    def list_franchises(self, status: Optional[FranchiseStatus] = None,
                        search: Optional[str] = None) -> List[Franchise]:
        """Get all franchises, optionally filtered by status or name."""
        query = self.db.query(Franchise)
        if status:
            query = query.filter(Franchise.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                Franchise.name.ilike(pattern) | Franchise.company_name.ilike(pattern)
            )
        return query.order_by(Franchise.name).all()

    def onboard_franchise(self, data: Dict[str, Any]) -> Franchise:
        """Create an active franchise with its first contract in one transaction."""
        terms = dict(data["contract"])

        franchise = Franchise(
            **{field: data.get(field) for field in CONTACT_FIELDS},
            status=FranchiseStatus.ACTIVE,
        )
        self.db.add(franchise)
        self.db.flush()

        try:
            ContractLifecycleService(self.db).create_contract(
                franchise_id=franchise.id,
                initial_fee=data.get("initial_fee") or 0,
                document_url=data.get("document_url"),
                commit=False,
                **terms,
            )
        except Exception:
            self.db.rollback()
            raise

        self.db.commit()
        self.db.refresh(franchise)

        logger.info(f"Onboarded franchise {franchise.id}: {franchise.name}")
        return franchise

    def update_franchise(self, franchise_id: int, changes: Dict[str, Any]) -> Franchise:
        franchise = self.get_franchise(franchise_id)
        for field, value in changes.items():
            if field in CONTACT_FIELDS and value is not None:
                setattr(franchise, field, value)
        self.db.commit()
        self.db.refresh(franchise)

        logger.info(f"Updated franchise {franchise_id}")
        return franchise

    def list_payments(self, franchise_id: int) -> List[RoyaltyPayment]:
        self.get_franchise(franchise_id)
        return (
            self.db.query(RoyaltyPayment)
            .filter(RoyaltyPayment.franchise_id == franchise_id)
            .order_by(RoyaltyPayment.due_date.desc())
            .all()
        )
