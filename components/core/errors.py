"""Domain errors raised by the ledger components."""

from typing import Any, Dict, List, Optional


class LedgerError(Exception):
    """Base class for ledger errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LedgerError):
    """Record or budget is absent or belongs to another user."""


class ValidationError(LedgerError):
    """Field values are malformed or out of range."""

    def __init__(self, message: str = "Validation failed", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class DuplicateActiveBudgetError(ValidationError):
    """An active budget already exists for the category."""

    def __init__(self, category: str):
        super().__init__("Active budget already exists for this category")
        self.category = category


class ReconciliationError(LedgerError):
    """Spent amount could not be recomputed; the cached value stays in place."""
