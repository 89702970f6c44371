"""Tests for ContractLifecycleService.

Covers schedule persistence, frozen terms, termination and renewal.
"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session

from backoffice.core.errors import (
    ContractAlreadyTerminated,
    ContractLocked,
    InvalidConfiguration,
    NotFoundError,
)
from backoffice.models import (
    ContractStatus,
    FranchiseContract,
    FranchiseStatus,
    PaymentStatus,
    RoyaltyPayment,
)
from backoffice.services.contract_service import ContractLifecycleService


def _payments(db: Session, contract_id: int):
    return (
        db.query(RoyaltyPayment)
        .filter(RoyaltyPayment.contract_id == contract_id)
        .order_by(RoyaltyPayment.due_date)
        .all()
    )


class TestCreateContract:

    def test_schedule_persisted(self, db_session, test_contract):
        payments = _payments(db_session, test_contract.id)
        assert len(payments) == 24
        assert [p.status for p in payments[:3]] == [
            PaymentStatus.GRACE, PaymentStatus.GRACE, PaymentStatus.UPCOMING,
        ]
        assert payments[12].due_date == date(2025, 1, 1)
        assert payments[12].amount == Decimal("1320")
        assert all(p.franchise_id == test_contract.franchise_id for p in payments)

    def test_contract_fields(self, test_contract):
        assert test_contract.id is not None
        assert test_contract.terminated is False
        assert test_contract.end_date == date(2026, 1, 1)
        assert test_contract.status_on(date(2025, 6, 1)) == ContractStatus.ACTIVE
        assert test_contract.status_on(date(2026, 1, 1)) == ContractStatus.EXPIRED

    def test_invalid_terms_write_nothing(self, db_session, test_franchise, example_terms):
        service = ContractLifecycleService(db_session)
        with pytest.raises(InvalidConfiguration):
            service.create_contract(
                franchise_id=test_franchise.id,
                **{**example_terms, "duration_years": 0},
            )
        assert db_session.query(FranchiseContract).count() == 0
        assert db_session.query(RoyaltyPayment).count() == 0

    def test_unknown_franchise(self, db_session, example_terms):
        with pytest.raises(NotFoundError):
            ContractLifecycleService(db_session).create_contract(franchise_id=999, **example_terms)

    def test_oversized_terms_rejected(self, db_session, test_franchise, example_terms):
        with pytest.raises(InvalidConfiguration):
            ContractLifecycleService(db_session).create_contract(
                franchise_id=test_franchise.id,
                **{**example_terms, "duration_years": 8000},
            )
        assert db_session.query(FranchiseContract).count() == 0

    def test_list_contracts_newest_first(self, db_session, test_franchise, test_contract, example_terms):
        service = ContractLifecycleService(db_session)
        later = service.create_contract(
            franchise_id=test_franchise.id,
            **{**example_terms, "start_date": date(2026, 1, 2)},
        )
        contracts = service.list_contracts(test_franchise.id)
        assert [c.id for c in contracts] == [later.id, test_contract.id]


class TestUpdateContract:

    def test_metadata_editable(self, db_session, test_contract):
        service = ContractLifecycleService(db_session)
        updated = service.update_contract(test_contract.id, {
            "document_url": "https://docs.example.com/contract.pdf",
            "renewal_fee": Decimal("2500"),
        })
        assert updated.document_url == "https://docs.example.com/contract.pdf"
        assert updated.renewal_fee == Decimal("2500")

    def test_terms_locked_once_payments_exist(self, db_session, test_contract):
        service = ContractLifecycleService(db_session)
        with pytest.raises(ContractLocked) as exc_info:
            service.update_contract(test_contract.id, {"royalty_amount": Decimal("1500")})
        assert exc_info.value.fields == ["royalty_amount"]

    def test_unchanged_terms_accepted(self, db_session, test_contract):
        service = ContractLifecycleService(db_session)
        updated = service.update_contract(test_contract.id, {
            "royalty_amount": Decimal("1000.00"),
            "document_url": "https://docs.example.com/v2.pdf",
        })
        assert updated.document_url == "https://docs.example.com/v2.pdf"

    def test_terms_stay_locked_after_termination(self, db_session, test_contract):
        service = ContractLifecycleService(db_session)
        result = service.terminate_contract(test_contract.id, date(2023, 12, 1))
        assert result["deleted_payments"] == 24
        assert _payments(db_session, test_contract.id) == []

        with pytest.raises(ContractLocked) as exc_info:
            service.update_contract(test_contract.id, {
                "duration_years": 7,
                "royalty_amount": Decimal("5"),
            })
        assert exc_info.value.fields == ["duration_years", "royalty_amount"]

        db_session.refresh(test_contract)
        assert test_contract.duration_years == 2
        assert test_contract.royalty_amount == Decimal("1000")

    def test_metadata_editable_after_termination(self, db_session, test_contract):
        service = ContractLifecycleService(db_session)
        service.terminate_contract(test_contract.id, date(2023, 12, 1))
        updated = service.update_contract(test_contract.id, {"document_url": "https://docs.example.com/end.pdf"})
        assert updated.document_url == "https://docs.example.com/end.pdf"

    def test_unknown_contract(self, db_session):
        with pytest.raises(NotFoundError):
            ContractLifecycleService(db_session).update_contract(404, {"document_url": "x"})


class TestTerminateContract:

    def test_removes_unpaid_future_payments(self, db_session, test_contract):
        payments = _payments(db_session, test_contract.id)
        # Paid in advance: must survive termination
        payments[10].status = PaymentStatus.PAID
        db_session.commit()

        result = ContractLifecycleService(db_session).terminate_contract(
            test_contract.id, date(2024, 6, 15)
        )

        remaining = _payments(db_session, test_contract.id)
        # Jan..Jun 2024 stay, plus the prepaid November 2024
        assert len(remaining) == 7
        assert result["deleted_payments"] == 17
        assert remaining[-1].due_date == date(2024, 11, 1)
        assert remaining[-1].status == PaymentStatus.PAID
        assert all(p.due_date <= date(2024, 6, 15) for p in remaining[:-1])

    def test_marks_contract_and_franchise(self, db_session, test_contract):
        ContractLifecycleService(db_session).terminate_contract(test_contract.id, date(2024, 6, 15))
        db_session.refresh(test_contract)
        assert test_contract.terminated is True
        assert test_contract.termination_date == date(2024, 6, 15)
        assert test_contract.status_on(date(2024, 7, 1)) == ContractStatus.TERMINATED
        assert test_contract.franchise.status == FranchiseStatus.TERMINATED

    def test_terminate_twice(self, db_session, test_contract):
        service = ContractLifecycleService(db_session)
        service.terminate_contract(test_contract.id, date(2024, 6, 15))
        with pytest.raises(ContractAlreadyTerminated):
            service.terminate_contract(test_contract.id, date(2024, 7, 15))

    def test_franchise_stays_active_when_covered(
            self, db_session, test_franchise, test_contract, example_terms):
        service = ContractLifecycleService(db_session)
        service.create_contract(
            franchise_id=test_franchise.id,
            **{**example_terms, "start_date": date(2024, 3, 1), "duration_years": 5},
        )
        result = service.terminate_contract(test_contract.id, date(2024, 6, 15))
        assert result["franchise_status"] == "active"


class TestRenewContract:

    def test_renewal_defaults_after_termination(self, db_session, test_contract):
        service = ContractLifecycleService(db_session)
        service.terminate_contract(test_contract.id, date(2024, 6, 15))
        defaults = service.renewal_defaults(test_contract.id)
        assert defaults["start_date"] == "2024-06-16"
        assert defaults["grace_period_months"] == 0
        assert defaults["duration_years"] == 2
        assert Decimal(defaults["royalty_amount"]) == Decimal("1000")

    def test_renewal_defaults_active_contract(self, db_session, test_contract):
        defaults = ContractLifecycleService(db_session).renewal_defaults(test_contract.id)
        assert defaults["start_date"] == "2026-01-02"

    def test_renew_creates_new_contract(self, db_session, test_contract):
        service = ContractLifecycleService(db_session)
        service.terminate_contract(test_contract.id, date(2024, 6, 15))

        renewed = service.renew_contract(test_contract.id, {
            "royalty_amount": Decimal("1100"),
            "renewal_fee": Decimal("5000"),
        })

        assert renewed.id != test_contract.id
        assert renewed.renewed_from_id == test_contract.id
        assert renewed.start_date == date(2024, 6, 16)
        assert renewed.duration_years == 2
        assert renewed.royalty_amount == Decimal("1100")
        assert renewed.marketing_amount == Decimal("200")
        assert renewed.renewal_fee == Decimal("5000")
        assert renewed.grace_period_months == 0

        # The old contract is kept as history
        assert db_session.get(FranchiseContract, test_contract.id) is not None

        payments = _payments(db_session, renewed.id)
        assert len(payments) == 24
        assert payments[0].due_date == date(2024, 6, 16)
        assert all(p.status == PaymentStatus.UPCOMING for p in payments)

    def test_renew_reactivates_franchise(self, db_session, test_contract):
        service = ContractLifecycleService(db_session)
        service.terminate_contract(test_contract.id, date(2024, 6, 15))
        renewed = service.renew_contract(test_contract.id, {})
        assert renewed.franchise.status == FranchiseStatus.ACTIVE

    def test_renew_with_explicit_start(self, db_session, test_contract):
        renewed = ContractLifecycleService(db_session).renew_contract(test_contract.id, {
            "start_date": date(2026, 1, 1),
            "duration_years": 3,
            "grace_period_months": 1,
        })
        assert renewed.start_date == date(2026, 1, 1)
        payments = _payments(db_session, renewed.id)
        assert len(payments) == 36
        assert payments[0].status == PaymentStatus.GRACE
        assert payments[1].status == PaymentStatus.UPCOMING

    def test_renew_invalid_terms(self, db_session, test_contract):
        with pytest.raises(InvalidConfiguration):
            ContractLifecycleService(db_session).renew_contract(
                test_contract.id, {"royalty_amount": Decimal("-1")}
            )
