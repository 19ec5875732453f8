"""Pydantic schemas for API request/response documentation and serialization"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from emi_gateway.domain.formatting import format_currency
from emi_gateway.domain.models import CalculationResult


class EmiRequest(BaseModel):
    """
    Request body for POST /v1/emi.

    Fields are left untyped here: coercion and bounds belong to the loan
    validator so every field error is reported in one response.
    """

    model_config = ConfigDict(extra="ignore")

    principal: Any = Field(None, description="Loan amount, 1 to 10,000,000")
    monthly_rate: Any = Field(None, description="Interest per month in percent, 0.1 to 100")
    months: Any = Field(None, description="Tenure in whole months, 1 to 360")


class CalculationRequest(EmiRequest):
    """Request body for POST /v1/calculations"""

    currency: Optional[str] = Field(None, description="Currency code, must match the service currency")
    user_id: Optional[str] = None
    client_request_id: Optional[str] = Field(
        None, min_length=1, description="Repeat submissions with the same id overwrite one record"
    )


class SaveResponse(BaseModel):
    """Response for POST /v1/calculations"""

    success: bool = True
    id: str


class EmiResponse(BaseModel):
    """Response for POST /v1/emi"""

    principal: float
    monthly_rate: float
    months: int
    monthly_payment: float
    formatted_monthly_payment: str
    total_payment: float
    formatted_total_payment: str
    total_interest: float
    formatted_total_interest: str
    currency: str

    @classmethod
    def from_result(cls, result: CalculationResult, currency_symbol: str) -> "EmiResponse":
        return cls(
            principal=result.principal,
            monthly_rate=result.monthly_rate,
            months=result.months,
            monthly_payment=result.monthly_payment,
            formatted_monthly_payment=result.formatted_monthly_payment,
            total_payment=result.total_payment,
            formatted_total_payment=format_currency(result.total_payment, currency_symbol),
            total_interest=result.total_interest,
            formatted_total_interest=format_currency(result.total_interest, currency_symbol),
            currency=result.currency,
        )


class FieldErrorResponse(BaseModel):
    """422 body carrying per-field validation messages"""

    success: bool = False
    field_errors: Dict[str, List[str]]
