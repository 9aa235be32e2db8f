# genbot/utils/error_handler.py

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Caller-visible error kinds"""
    ACCESS_DENIED = "access_denied"
    OPERATION_FAILED = "operation_failed"


class GenBotError(Exception):
    """Base exception for handler and service failures"""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.OPERATION_FAILED,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }


class AccessDeniedError(GenBotError):
    """Caller company identifier does not match the configured one"""

    def __init__(self, company_id: Any):
        super().__init__(
            f"Access denied, invalid company ID provided: {company_id}",
            category=ErrorCategory.ACCESS_DENIED,
            details={"company_id": company_id},
        )


class RequestParseError(GenBotError):
    """Inbound request body or path could not be read"""


class ImageGenerationError(GenBotError):
    """Model invocation failed or the model reported an error"""


class StorageError(GenBotError):
    """Object storage read/write/sign failure"""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.details["key"] = key


class ImageNotFoundError(StorageError):
    """Requested object does not exist in the bucket"""
