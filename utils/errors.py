# utils/errors.py
from fastapi import HTTPException


class EmployeeValidationError(HTTPException):
    """Client-correctable input problem; the message is shown to the caller as is."""

    def __init__(self, message: str):
        super().__init__(status_code=400, detail=message)


class EmployeeNotFound(HTTPException):
    def __init__(self, message: str = "Employee not found"):
        super().__init__(status_code=404, detail=message)


class StorageFailure(HTTPException):
    """Unexpected persistence error. The cause is logged, never returned."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(status_code=500, detail=message)


class Unauthorized(HTTPException):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(
            status_code=401,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )
