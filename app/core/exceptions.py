"""
Error taxonomy for the API.

Every error is an HTTPException so services can raise them directly and the
`except HTTPException: raise` guard in each service lets them through. The
app-level handlers in app.main render them as {"error": {"message": ...}}.
"""

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    def __init__(self, message: str = "Validation failed"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class AuthenticationError(HTTPException):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(HTTPException):
    def __init__(self, message: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=message)


ForbiddenError = AuthorizationError


class NotFoundError(HTTPException):
    def __init__(self, message: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=message)


class ConflictError(HTTPException):
    def __init__(self, message: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class CapacityError(HTTPException):
    def __init__(self, message: str = "Capacity exceeded"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class InternalError(HTTPException):
    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


def is_unique_violation(exc: Exception) -> bool:
    """True when a PostgREST error came from a unique constraint."""
    if getattr(exc, "code", None) == "23505":
        return True
    message = str(exc).lower()
    return "unique" in message or "duplicate" in message


def is_foreign_key_violation(exc: Exception) -> bool:
    if getattr(exc, "code", None) == "23503":
        return True
    return "foreign key" in str(exc).lower()
