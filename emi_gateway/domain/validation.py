"""Loan input validation - coerces raw records and reports per-field errors"""

import re
from collections.abc import Mapping
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from emi_gateway.domain.models import LoanInput, ValidationFailure, ValidationResult, ValidationSuccess

PRINCIPAL_MIN = 1
PRINCIPAL_MAX = 10_000_000
RATE_MIN = 0.1
RATE_MAX = 100
MONTHS_MIN = 1
MONTHS_MAX = 360

FIELD_LABELS = {
    "principal": "Principal",
    "monthly_rate": "Monthly rate",
    "months": "Months",
}

ROOT_FIELD = "__root__"

# Plain decimal or scientific notation; no digit separators, no inf/nan words
NUMBER_PATTERN = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")


class LoanInputSchema(BaseModel):
    """Lax pydantic schema: numeric strings are coerced, unknown keys ignored"""

    model_config = ConfigDict(extra="ignore")

    principal: float = Field(ge=PRINCIPAL_MIN, le=PRINCIPAL_MAX, allow_inf_nan=False)
    monthly_rate: float = Field(ge=RATE_MIN, le=RATE_MAX, allow_inf_nan=False)
    months: int = Field(ge=MONTHS_MIN, le=MONTHS_MAX)

    @field_validator("principal", "monthly_rate", "months", mode="before")
    @classmethod
    def parse_numeric_string(cls, value: Any) -> Any:
        # Strings parse as floats first so "1e1" months is 10 and "12.5" fails as fractional
        if isinstance(value, str):
            if not NUMBER_PATTERN.match(value):
                raise ValueError("not a number")
            return float(value)
        return value


def _format_bound(value: Any) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:g}"


def _message(field: str, error: Dict[str, Any]) -> str:
    label = FIELD_LABELS.get(field, field)
    kind = error["type"]
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f"{label} is required"
    if kind == "greater_than_equal":
        return f"{label} must be greater than or equal to {_format_bound(ctx['ge'])}"
    if kind == "less_than_equal":
        return f"{label} must be less than or equal to {_format_bound(ctx['le'])}"
    if kind == "finite_number":
        return f"{label} must be a finite number"
    if field == "months" and kind.startswith("int_"):
        return "Months must be a whole number"
    return f"{label} must be a number"


def _drop_blank(raw: Mapping) -> Dict[str, Any]:
    # Empty form inputs arrive as "" and count as missing
    return {
        key: value
        for key, value in raw.items()
        if value is not None and not (isinstance(value, str) and not value.strip())
    }


def validate(raw: Any) -> ValidationResult:
    """
    Validate an untyped record into a LoanInput.

    Never raises for bad user input. All failing fields are reported together,
    each with an ordered list of messages.

    Example:
        validate({"principal": "100000", "monthly_rate": 1, "months": 12})
        -> ValidationSuccess(data=LoanInput(principal=100000.0, monthly_rate=1.0, months=12))
    """
    if not isinstance(raw, Mapping):
        return ValidationFailure(field_errors={ROOT_FIELD: ["Input must be an object"]})

    try:
        parsed = LoanInputSchema.model_validate(_drop_blank(raw))
    except ValidationError as e:
        field_errors: Dict[str, List[str]] = {}
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else ROOT_FIELD
            field_errors.setdefault(field, []).append(_message(field, error))
        return ValidationFailure(field_errors=field_errors)

    return ValidationSuccess(
        data=LoanInput(
            principal=parsed.principal,
            monthly_rate=parsed.monthly_rate,
            months=parsed.months,
        )
    )
