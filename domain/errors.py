class DomainError(ValueError):
    """Base error for ledger domain rules."""


class LedgerShapeError(DomainError):
    """Ledger document does not have the expected incomes/expenses shape."""
