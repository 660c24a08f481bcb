"""
Centralized error handling for the quickconvert API.

This module provides the conversion exception types, standardized error codes,
and the JSON error responses the /convert endpoints return for failures.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for consistent error handling."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    MISSING_PARAMETER = "MISSING_PARAMETER"

    # Conversion-specific errors
    CONVERSION_NOT_SUPPORTED = "CONVERSION_NOT_SUPPORTED"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_FILE = "INVALID_FILE"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"


class ErrorSeverity(str, Enum):
    """Error severity levels for logging and response handling."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Error code to HTTP status code mapping
ERROR_STATUS_MAP: Dict[ErrorCode, int] = {
    # 4xx Client Errors
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.MISSING_PARAMETER: 400,
    ErrorCode.INVALID_FORMAT: 400,
    ErrorCode.CONVERSION_NOT_SUPPORTED: 400,
    ErrorCode.INVALID_FILE: 400,
    ErrorCode.FILE_TOO_LARGE: 413,
    ErrorCode.EXTRACTION_FAILED: 422,

    # 5xx Server Errors
    ErrorCode.INTERNAL_ERROR: 500,
}

# Error code to severity mapping
ERROR_SEVERITY_MAP: Dict[ErrorCode, ErrorSeverity] = {
    ErrorCode.INTERNAL_ERROR: ErrorSeverity.CRITICAL,
    ErrorCode.EXTRACTION_FAILED: ErrorSeverity.MEDIUM,
    ErrorCode.INVALID_REQUEST: ErrorSeverity.MEDIUM,
    ErrorCode.MISSING_PARAMETER: ErrorSeverity.LOW,
    ErrorCode.INVALID_FORMAT: ErrorSeverity.LOW,
    ErrorCode.CONVERSION_NOT_SUPPORTED: ErrorSeverity.LOW,
    ErrorCode.INVALID_FILE: ErrorSeverity.LOW,
    ErrorCode.FILE_TOO_LARGE: ErrorSeverity.LOW,
}


# ===== EXCEPTIONS =====

class ConversionError(Exception):
    """Base class for errors raised inside a conversion pipeline."""

    error_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MalformedInputError(ConversionError):
    """Raised when an upload cannot be parsed as its declared format."""
    error_code = ErrorCode.INVALID_FILE


class ExtractionFailedError(ConversionError):
    """Raised when a document text extractor itself fails."""
    error_code = ErrorCode.EXTRACTION_FAILED


# ===== RESPONSES =====

def create_error_response(
    error_code: Union[ErrorCode, str],
    details: Optional[Any] = None,
    status_code: Optional[int] = None,
    **kwargs
) -> JSONResponse:
    """
    Create a consistent JSON error response across all endpoints.

    Args:
        error_code: Error code from ErrorCode enum or custom string
        details: Structured or textual error details
        status_code: Override the default HTTP status code
        **kwargs: Additional fields to include in the error response

    Returns:
        JSONResponse with standardized error format
    """
    if isinstance(error_code, ErrorCode):
        error_type = error_code.value
        if status_code is None:
            status_code = ERROR_STATUS_MAP.get(error_code, 500)
        severity = ERROR_SEVERITY_MAP.get(error_code, ErrorSeverity.MEDIUM)
    else:
        error_type = str(error_code)
        if status_code is None:
            status_code = 500
        severity = ErrorSeverity.MEDIUM

    error_data = {
        "error": error_type,
        "timestamp": datetime.now().isoformat() + "Z",
        "status_code": status_code,
        "severity": severity.value
    }

    if details is not None:
        # Plain-text details are capped, structured details pass through
        error_data["details"] = details if isinstance(details, dict) else str(details)[:1000]

    error_data.update(kwargs)

    log_message = f"Error response: {error_type} ({status_code}) {kwargs.get('message', '')}"
    if severity == ErrorSeverity.CRITICAL:
        logger.critical(log_message)
    elif severity == ErrorSeverity.HIGH:
        logger.error(log_message)
    elif severity == ErrorSeverity.MEDIUM:
        logger.warning(log_message)
    else:
        logger.info(log_message)

    return JSONResponse(status_code=status_code, content=error_data)


def failure_response(failure) -> JSONResponse:
    """
    Map a conversion Failure onto its HTTP error response.

    Unsupported and malformed inputs become client errors, internal faults
    become server errors, following ERROR_STATUS_MAP.
    """
    return create_error_response(
        failure.code,
        details=failure.diagnostics,
        message=failure.message,
        kind=failure.kind.value,
    )
