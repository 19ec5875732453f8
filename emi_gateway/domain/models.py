"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class LoanInput:
    """Validated loan terms. monthly_rate is a percentage applied per month."""

    principal: float
    monthly_rate: float
    months: int


@dataclass(frozen=True)
class CalculationResult:
    """Output of an EMI calculation, echoing its inputs"""

    principal: float
    monthly_rate: float
    months: int
    monthly_payment: float
    formatted_monthly_payment: str
    currency: str

    @property
    def total_payment(self) -> float:
        return self.monthly_payment * self.months

    @property
    def total_interest(self) -> float:
        return self.total_payment - self.principal


@dataclass(frozen=True)
class CalculationEntry:
    """A result plus the metadata written alongside it"""

    result: CalculationResult
    version: str = "emi-v1"
    user_id: Optional[str] = None
    client_request_id: Optional[str] = None


@dataclass
class StoredCalculation:
    """Record held by the in-memory store"""

    id: str
    principal: float
    monthly_rate: float
    months: int
    monthly_payment: float
    formatted_monthly_payment: str
    currency: str
    version: str
    user_id: Optional[str]
    client_request_id: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ValidationSuccess:
    data: LoanInput
    success: bool = True


@dataclass(frozen=True)
class ValidationFailure:
    field_errors: Dict[str, List[str]]
    success: bool = False


ValidationResult = Union[ValidationSuccess, ValidationFailure]


@dataclass(frozen=True)
class SaveResult:
    """Returned to callers once a calculation is persisted"""

    id: str
    success: bool = True
