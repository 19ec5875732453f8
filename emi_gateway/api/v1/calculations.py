"""POST /v1/calculations - calculate an EMI and persist it"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from emi_gateway.api.dependencies import get_calculation_service, get_request_id
from emi_gateway.api.v1.schemas import CalculationRequest, FieldErrorResponse, SaveResponse
from emi_gateway.domain.exceptions import LoanValidationError, PersistenceError
from emi_gateway.services.calculation import CalculationService

router = APIRouter()


@router.post(
    "/calculations",
    response_model=SaveResponse,
    status_code=201,
    responses={422: {"model": FieldErrorResponse}, 503: {"description": "Calculation store unavailable"}},
)
def create_calculation(
    request_body: CalculationRequest,
    request: Request,
    service: CalculationService = Depends(get_calculation_service),
):
    """
    Calculate the monthly payment and log it to the configured store.

    Sending the same client_request_id again overwrites the earlier record
    (durable store) instead of creating a duplicate.
    """
    request_id = get_request_id(request)

    try:
        saved = service.compute_and_log(
            principal=request_body.principal,
            monthly_rate=request_body.monthly_rate,
            months=request_body.months,
            currency_code=request_body.currency,
            user_id=request_body.user_id,
            client_request_id=request_body.client_request_id,
            request_id=request_id,
        )
        return SaveResponse(success=saved.success, id=saved.id)

    except LoanValidationError as e:
        return JSONResponse(
            status_code=422,
            content=FieldErrorResponse(field_errors=e.field_errors).model_dump(),
        )

    except PersistenceError:
        raise HTTPException(status_code=503, detail="Calculation store unavailable")

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
