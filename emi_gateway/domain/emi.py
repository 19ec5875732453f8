"""EMI calculation engine - closed-form amortized monthly payment"""

import sys

from emi_gateway.domain.formatting import format_currency
from emi_gateway.domain.models import CalculationResult, LoanInput

EPSILON = sys.float_info.epsilon


def calculate_emi(loan: LoanInput) -> float:
    """
    Monthly payment that amortizes the loan over its tenure.

    EMI = P * r * (1 + r)^N / ((1 + r)^N - 1)

    Where:
    - P = principal
    - r = monthly_rate / 100 (the rate is already per month)
    - N = months

    A rate indistinguishable from zero, or a compounding factor that is,
    falls back to a flat P / N split.

    Example:
        P=100000, monthly_rate=1, N=12 -> 8884.88
    """
    principal = loan.principal
    months = loan.months
    rate = loan.monthly_rate / 100

    if abs(rate) < EPSILON:
        return principal / months

    factor = (1 + rate) ** months
    if abs(factor - 1) < EPSILON:
        return principal / months

    return principal * rate * factor / (factor - 1)


def build_result(loan: LoanInput, currency_code: str, currency_symbol: str) -> CalculationResult:
    """Calculate and format the payment for display and storage"""
    monthly_payment = calculate_emi(loan)

    return CalculationResult(
        principal=loan.principal,
        monthly_rate=loan.monthly_rate,
        months=loan.months,
        monthly_payment=monthly_payment,
        formatted_monthly_payment=format_currency(monthly_payment, currency_symbol),
        currency=currency_code,
    )
