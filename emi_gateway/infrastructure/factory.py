"""Startup-time selection of the calculation store"""

import logging

from emi_gateway.config import Settings
from emi_gateway.domain.ports import CalculationRepository
from emi_gateway.infrastructure.database.repositories import SqlCalculationRepository
from emi_gateway.infrastructure.database.session import StoreHandle
from emi_gateway.infrastructure.memory.repositories import InMemoryCalculationRepository


def build_repository(config: Settings) -> CalculationRepository:
    """Create the store named by PERSISTENCE_BACKEND; the durable one connects lazily"""
    if config.persistence_backend == "database":
        repository: CalculationRepository = SqlCalculationRepository(StoreHandle(config))
    else:
        repository = InMemoryCalculationRepository()

    logging.info("Calculation store selected", extra={"backend": config.persistence_backend})
    return repository
