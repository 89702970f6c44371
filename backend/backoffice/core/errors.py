"""Domain errors raised by the service layer.

Routes let these propagate; ``backoffice.main`` maps them to HTTP responses.
"""

from typing import Any, Dict, List, Optional


class BackOfficeError(Exception):
    """Base class for errors the API reports to the caller."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": type(self).__name__, "detail": self.message}


class InvalidConfiguration(BackOfficeError):
    """Raised when contract terms cannot produce a payment schedule."""

    status_code = 422

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("Invalid contract configuration: " + "; ".join(problems))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["problems"] = self.problems
        return data


class NotFoundError(BackOfficeError):
    """Raised when a franchise, contract or payment does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ContractLocked(BackOfficeError):
    """Raised when commercial terms change on a contract that already has payments."""

    status_code = 409

    def __init__(self, contract_id: int, fields: Optional[List[str]] = None):
        self.contract_id = contract_id
        self.fields = fields or []
        super().__init__(
            f"Contract {contract_id} terms are frozen once its schedule is generated; "
            f"cannot change {', '.join(self.fields) or 'its terms'}. Renew it instead."
        )


class ContractAlreadyTerminated(BackOfficeError):
    """Raised when terminating a contract twice."""

    status_code = 409

    def __init__(self, contract_id: int):
        self.contract_id = contract_id
        super().__init__(f"Contract {contract_id} is already terminated")


class PaymentAlreadyPaid(BackOfficeError):
    """Raised when recording a payment on an obligation that is already paid."""

    status_code = 409

    def __init__(self, payment_id: int):
        self.payment_id = payment_id
        super().__init__(f"Payment {payment_id} is already paid")
