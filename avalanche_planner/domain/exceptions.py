"""Domain-specific exceptions"""

from typing import List


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DebtNotFoundError(DomainException):
    """No debt with the given identifier exists for the user"""

    def __init__(self, debt_id: str):
        super().__init__(f"Debt with ID {debt_id} not found")
        self.debt_id = debt_id


class DebtValidationError(DomainException):
    """Candidate debt failed validation"""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors
