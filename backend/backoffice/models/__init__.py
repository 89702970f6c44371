"""SQLAlchemy models."""

from backoffice.models.franchise import Franchise, FranchiseStatus
from backoffice.models.contract import FranchiseContract, ContractStatus
from backoffice.models.royalty import RoyaltyPayment, PaymentLog, PaymentStatus

__all__ = [
    "Franchise",
    "FranchiseStatus",
    "FranchiseContract",
    "ContractStatus",
    "RoyaltyPayment",
    "PaymentLog",
    "PaymentStatus",
]
