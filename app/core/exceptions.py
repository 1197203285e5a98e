from typing import List, Optional
from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    def __init__(self, status_code: int, detail: str, details: Optional[List[str]] = None, headers: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.details = details

class UnauthenticatedError(BaseAppException):
    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class ForbiddenError(BaseAppException):
    def __init__(self, detail: str = "Insufficient permissions"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class ValidationFailedError(BaseAppException):
    def __init__(self, details: List[str], detail: str = "Validation failed"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail, details=list(details))

class NoFieldsProvidedError(BaseAppException):
    def __init__(self, detail: str = "No valid fields provided for update"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class NotFoundError(BaseAppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class InvalidTransitionError(BaseAppException):
    def __init__(self, current: str, requested: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status transition from {current} to {requested}",
        )
        self.current = current
        self.requested = requested

class ConflictError(BaseAppException):
    def __init__(self, detail: str = "Operation conflicts with the current resource state"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class StorageFailureError(BaseAppException):
    def __init__(self, detail: str = "Unable to complete the request at this time"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class DuplicateEmailError(BaseAppException):
    def __init__(self, detail: str = "Email already registered"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class InvalidCredentialsError(BaseAppException):
    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
