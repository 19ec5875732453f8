"""Pytest fixtures for testing"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from emi_gateway.api.main import create_app
from emi_gateway.config import Settings
from emi_gateway.domain.exceptions import PersistenceError
from emi_gateway.domain.models import CalculationEntry, LoanInput
from emi_gateway.infrastructure.database.repositories import SqlCalculationRepository
from emi_gateway.infrastructure.database.session import StoreHandle
from emi_gateway.infrastructure.memory.repositories import InMemoryCalculationRepository
from emi_gateway.services.calculation import CalculationService


class FailingRepository:
    """Store stand-in whose writes always fail"""

    def __init__(self):
        self.attempts = 0

    def save(self, entry: CalculationEntry) -> str:
        self.attempts += 1
        raise PersistenceError("store unreachable")


@pytest.fixture
def memory_repository() -> Generator[InMemoryCalculationRepository, None, None]:
    repository = InMemoryCalculationRepository()
    yield repository
    repository.reset()


@pytest.fixture
def database_settings(tmp_path) -> Settings:
    """Durable-store settings pointing at a throwaway SQLite file"""
    return Settings(
        persistence_backend="database",
        store_emulator_url=f"sqlite:///{tmp_path / 'test.db'}",
    )


@pytest.fixture
def store_handle(database_settings: Settings) -> Generator[StoreHandle, None, None]:
    handle = StoreHandle(database_settings)
    yield handle
    handle.dispose()


@pytest.fixture
def sql_repository(store_handle: StoreHandle) -> SqlCalculationRepository:
    return SqlCalculationRepository(store_handle)


@pytest.fixture
def service(memory_repository: InMemoryCalculationRepository) -> CalculationService:
    return CalculationService(memory_repository)


@pytest.fixture
def client(memory_repository: InMemoryCalculationRepository) -> TestClient:
    """Create FastAPI test client backed by the in-memory store"""
    app = create_app(Settings(persistence_backend="memory"), repository=memory_repository)
    return TestClient(app)


@pytest.fixture
def database_client(sql_repository: SqlCalculationRepository, database_settings: Settings) -> TestClient:
    """Create FastAPI test client backed by the SQLite durable store"""
    app = create_app(database_settings, repository=sql_repository)
    return TestClient(app)


@pytest.fixture
def failing_repository() -> FailingRepository:
    return FailingRepository()


@pytest.fixture
def failing_client(failing_repository: FailingRepository) -> TestClient:
    app = create_app(Settings(persistence_backend="memory"), repository=failing_repository)
    return TestClient(app)


@pytest.fixture
def benchmark_loan() -> LoanInput:
    """100,000 at 1% a month over a year"""
    return LoanInput(principal=100_000, monthly_rate=1, months=12)
