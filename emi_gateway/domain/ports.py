"""Storage port implemented by the transient and durable calculation stores"""

from typing import Protocol

from emi_gateway.domain.models import CalculationEntry


class CalculationRepository(Protocol):
    def save(self, entry: CalculationEntry) -> str:
        ...
