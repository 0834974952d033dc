class PersistenceError(Exception):
    """Raised when the invoices store rejects or fails an operation."""


class RecordNotFoundError(PersistenceError):
    """Raised when an invoice row does not exist."""
