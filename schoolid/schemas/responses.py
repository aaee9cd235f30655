"""Standardized API Response Schemas"""

from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel


T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """
    Standard success response envelope.

    Example:
        {
            "success": true,
            "data": {"kind": "student", "identifier": "ABC25A005"},
            "message": "Identifier allocated"
        }
    """
    success: bool = True
    data: T
    message: str = "Operation successful"


class ErrorDetail(BaseModel):
    """Error code, message, and the error's structured context (scope prefix, attempts...)"""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """
    Standard error response envelope.

    Example:
        {
            "success": false,
            "error": {
                "code": "CAPACITY_EXCEEDED",
                "message": "Scope ABC25A is full: student sequence cannot exceed 999",
                "details": {"prefix": "ABC25A", "capacity": 999}
            }
        }
    """
    success: bool = False
    error: ErrorDetail
