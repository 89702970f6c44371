# Services module

from backoffice.services.schedule import (
    PaymentObligation,
    generate_schedule,
    suggest_renewal_start,
)
from backoffice.services.contract_service import ContractLifecycleService
from backoffice.services.franchise_service import FranchiseService
from backoffice.services.royalty_service import RoyaltyService
