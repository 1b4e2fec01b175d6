"""
Custom exception classes for the Hacker News newest-stories backend
Provides structured error handling with proper HTTP status codes and error messages
"""

from typing import Optional, Dict, Any
from fastapi import HTTPException


class NewsBaseException(Exception):
    """Base exception class for the newest-stories backend"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(NewsBaseException):
    """Raised when request arguments are invalid"""
    pass


class UpstreamUnavailableError(NewsBaseException):
    """Raised when the upstream id feed cannot be read"""
    pass


class UpstreamItemError(NewsBaseException):
    """Raised when a single upstream story cannot be read"""
    pass


class ServiceUnavailableError(NewsBaseException):
    """Raised when a service is unavailable"""
    pass


# HTTP Exception mappings
EXCEPTION_TO_HTTP_STATUS = {
    ValidationError: 400,
    UpstreamUnavailableError: 502,
    UpstreamItemError: 502,
    ServiceUnavailableError: 503,
}


def convert_to_http_exception(exc: Exception) -> HTTPException:
    """Convert any exception to FastAPI HTTPException"""
    if isinstance(exc, NewsBaseException):
        status_code = EXCEPTION_TO_HTTP_STATUS.get(type(exc), 500)

        detail = {
            "error": exc.message,
            "error_code": exc.error_code,
            "details": exc.details
        }
    else:
        status_code = 500
        detail = {
            "error": "An unexpected internal server error occurred.",
            "error_code": "INTERNAL_SERVER_ERROR",
            "details": {"original_error": str(exc)}
        }

    return HTTPException(status_code=status_code, detail=detail)


# Specific error constructors for common scenarios
def create_validation_error(message: str, field: Optional[str] = None) -> ValidationError:
    """Create validation error"""
    details = {"field": field} if field else {}
    return ValidationError(
        message=message,
        error_code="VALIDATION_ERROR",
        details=details
    )


def create_upstream_unavailable_error(message: str = "Hacker News id feed unavailable") -> UpstreamUnavailableError:
    """Create id feed error"""
    return UpstreamUnavailableError(
        message=message,
        error_code="UPSTREAM_UNAVAILABLE",
        details={"service": "hackernews", "operation": "newstories"}
    )


def create_upstream_item_error(story_id: int, message: str = "Hacker News item fetch failed") -> UpstreamItemError:
    """Create per-story fetch error"""
    return UpstreamItemError(
        message=message,
        error_code="UPSTREAM_ITEM_ERROR",
        details={"service": "hackernews", "operation": "item", "story_id": story_id}
    )


def create_service_unavailable_error(service: str) -> ServiceUnavailableError:
    """Create service unavailable error"""
    return ServiceUnavailableError(
        message=f"{service} is not available.",
        error_code="SERVICE_UNAVAILABLE",
        details={"service": service}
    )
