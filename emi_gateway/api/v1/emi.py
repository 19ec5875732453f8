"""POST /v1/emi - calculate an EMI without saving it"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from emi_gateway.api.dependencies import get_calculation_service
from emi_gateway.api.v1.schemas import EmiRequest, EmiResponse, FieldErrorResponse
from emi_gateway.domain.exceptions import LoanValidationError
from emi_gateway.services.calculation import CalculationService

router = APIRouter()


@router.post("/emi", response_model=EmiResponse, responses={422: {"model": FieldErrorResponse}})
def preview_emi(
    request_body: EmiRequest,
    service: CalculationService = Depends(get_calculation_service),
):
    """
    Validate loan terms and return the monthly payment with totals.

    Used by the form for real-time feedback; nothing is persisted.
    """
    try:
        result = service.preview(request_body.model_dump())
    except LoanValidationError as e:
        return JSONResponse(
            status_code=422,
            content=FieldErrorResponse(field_errors=e.field_errors).model_dump(),
        )

    return EmiResponse.from_result(result, service.currency_symbol)
