"""
Service errors.

Each one is an HTTPException so routes can let them propagate and FastAPI
renders the status and detail as-is.
"""

from fastapi import HTTPException, status


class ServiceError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class ValidationError(ServiceError):
    """Malformed or out-of-range input, rejected before anything is written."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"


class NotFoundError(ServiceError):
    """Resource is missing, or exists but is not visible to the caller."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ForbiddenError(ServiceError):
    """Caller can see the resource but does not own it."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to modify this resource"


class StoreUnavailableError(ServiceError):
    """Supabase could not be reached or rejected the query. Safe to retry."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage temporarily unavailable"
