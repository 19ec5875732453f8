"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from emi_gateway.services.calculation import CalculationService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_calculation_service(request: Request) -> CalculationService:
    """Provide the service built at startup with the configured store"""
    return request.app.state.calculation_service
