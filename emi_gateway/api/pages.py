"""GET / - EMI calculator form"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from emi_gateway.api.dependencies import get_calculation_service
from emi_gateway.services.calculation import CalculationService
from emi_gateway.web.form import DEFAULT_VALUES, render_form_page

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def calculator_page(
    principal: Optional[str] = None,
    monthly_rate: Optional[str] = None,
    months: Optional[str] = None,
    service: CalculationService = Depends(get_calculation_service),
):
    """
    Render the calculator.

    With no query parameters the defaults are shown and calculated. Nothing
    is persisted here; saving is a separate call from the page.
    """
    submitted = {"principal": principal, "monthly_rate": monthly_rate, "months": months}
    if all(value is None for value in submitted.values()):
        submitted = dict(DEFAULT_VALUES)

    result, field_errors = service.evaluate(submitted)
    values = {name: value or "" for name, value in submitted.items()}

    return render_form_page(
        values,
        result,
        field_errors,
        currency_code=service.currency_code,
        currency_symbol=service.currency_symbol,
    )
