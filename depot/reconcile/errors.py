"""
Errors raised by the reconciliation core.

All are synchronous and local; nothing in the core retries.
"""


class ReconcileError(Exception):
    """Base class for reconciliation failures."""
    pass


class ValidationError(ReconcileError):
    """Malformed or missing input (bad quantity, empty id, bad barcode)."""
    pass


class NotFoundError(ReconcileError):
    """A referenced product or other record does not exist."""
    pass


class InsufficientTransitError(ReconcileError):
    """Receipt requested for a product with nothing left in transit."""
    pass
