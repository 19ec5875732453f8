"""Domain-specific exceptions"""

from typing import Dict, List


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class LoanValidationError(DomainException):
    """One or more loan fields are missing, malformed or out of range"""

    def __init__(self, field_errors: Dict[str, List[str]]):
        self.field_errors = field_errors
        fields = ", ".join(sorted(field_errors))
        super().__init__(f"Invalid loan input: {fields}")


class PersistenceError(DomainException):
    """Calculation store is unreachable or rejected the write"""

    pass


class ConfigurationError(PersistenceError):
    """Durable store selected but its connection settings are missing or invalid"""

    pass
