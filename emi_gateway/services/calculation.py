"""Calculation service - validate, calculate, format and persist EMI requests"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from emi_gateway.domain.emi import build_result
from emi_gateway.domain.exceptions import LoanValidationError, PersistenceError
from emi_gateway.domain.models import CalculationEntry, CalculationResult, SaveResult, ValidationFailure
from emi_gateway.domain.ports import CalculationRepository
from emi_gateway.domain.validation import validate
from emi_gateway.infrastructure.observability.logging import log_calculation
from emi_gateway.infrastructure.observability.metrics import persistence_failure_counter, record_calculation


class CalculationService:
    """Orchestrates one EMI request against a store chosen at startup"""

    def __init__(
        self,
        repository: CalculationRepository,
        currency_code: str = "ZMW",
        currency_symbol: str = "K",
        version: str = "emi-v1",
    ):
        self.repository = repository
        self.currency_code = currency_code
        self.currency_symbol = currency_symbol
        self.version = version

    @property
    def backend(self) -> str:
        return type(self.repository).__name__

    def evaluate(self, raw: Any) -> Tuple[Optional[CalculationResult], Dict[str, List[str]]]:
        """Validate and calculate without persisting; returns (result, field_errors)"""
        outcome = validate(raw)
        if isinstance(outcome, ValidationFailure):
            return None, outcome.field_errors

        return build_result(outcome.data, self.currency_code, self.currency_symbol), {}

    def preview(self, raw: Any) -> CalculationResult:
        """
        Validate and calculate without persisting.

        Raises:
            LoanValidationError: Any field missing, malformed or out of range
        """
        result, field_errors = self.evaluate(raw)
        if result is None:
            record_calculation("invalid")
            raise LoanValidationError(field_errors)

        record_calculation("previewed", result.monthly_payment)
        return result

    def compute_and_log(
        self,
        principal: Any,
        monthly_rate: Any,
        months: Any,
        currency_code: str,
        user_id: Optional[str] = None,
        client_request_id: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> SaveResult:
        """
        Calculate the EMI and persist it.

        Flow:
        1. Validate loan fields and currency
        2. Calculate and format the monthly payment
        3. Save through the configured store (upsert when client_request_id is given)
        4. Return the record id

        Raises:
            LoanValidationError: Invalid loan fields or unsupported currency
            PersistenceError: The store failed; nothing was saved
        """
        start_time = time.time()

        result, field_errors = self.evaluate(
            {"principal": principal, "monthly_rate": monthly_rate, "months": months}
        )
        if currency_code != self.currency_code:
            field_errors = {**field_errors, "currency": [f"Currency must be {self.currency_code}"]}

        if field_errors:
            record_calculation("invalid")
            logging.warning(
                "Calculation rejected",
                extra={"request_id": request_id, "fields": sorted(field_errors)},
            )
            raise LoanValidationError(field_errors)

        entry = CalculationEntry(
            result=result,
            version=self.version,
            user_id=user_id,
            client_request_id=client_request_id,
        )

        try:
            record_id = self.repository.save(entry)
        except PersistenceError as e:
            record_calculation("persistence_failed", result.monthly_payment)
            persistence_failure_counter.labels(backend=self.backend).inc()
            logging.error(f"Persistence error: {e}", extra={"request_id": request_id})
            raise

        duration_ms = (time.time() - start_time) * 1000
        record_calculation("saved", result.monthly_payment)
        log_calculation(request_id, record_id, result.months, result.monthly_payment, duration_ms, user_id)

        return SaveResult(id=record_id)

