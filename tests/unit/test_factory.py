"""Unit tests for startup store selection"""

from emi_gateway.config import Settings
from emi_gateway.infrastructure.database.repositories import SqlCalculationRepository
from emi_gateway.infrastructure.factory import build_repository
from emi_gateway.infrastructure.memory.repositories import InMemoryCalculationRepository


def test_memory_backend_selected_by_default():
    assert isinstance(build_repository(Settings(persistence_backend="memory")), InMemoryCalculationRepository)


def test_database_backend_selected_without_connecting():
    """Missing credentials only surface on first save"""
    repository = build_repository(
        Settings(persistence_backend="database", store_credentials=None, store_emulator_url=None)
    )

    assert isinstance(repository, SqlCalculationRepository)
    assert not repository.handle.initialized
