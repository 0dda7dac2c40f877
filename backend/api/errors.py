"""
Translate reconciliation errors into HTTP errors.
"""
from fastapi import HTTPException

from depot.reconcile import InsufficientTransitError, NotFoundError, ReconcileError, ValidationError

STATUS_BY_ERROR = {
    ValidationError: 400,
    NotFoundError: 404,
    InsufficientTransitError: 409,
}


def http_error(error: ReconcileError) -> HTTPException:
    """HTTPException carrying the core error message."""
    status = next(
        (code for cls, code in STATUS_BY_ERROR.items() if isinstance(error, cls)),
        500,
    )
    return HTTPException(status_code=status, detail=str(error))
