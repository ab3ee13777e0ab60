"""
Unified response envelope for IPC handlers.

All handlers should build their return values with these functions so the
front end sees one consistent format:

    {"success": True, "data": ..., "timestamp": 1700000000000}
    {"success": False, "error": {"code": ..., "message": ..., "details": ...},
     "timestamp": 1700000000000}
"""

import time
from enum import Enum
from typing import Any, Dict, Optional, Union

from janitor.security.results import CommandValidationResult, ValidationResult


class IPCErrorCode(str, Enum):
    """Error codes for IPC operations."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    COMMAND_REJECTED = "COMMAND_REJECTED"
    TIMEOUT = "TIMEOUT"
    NOT_FOUND = "NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    CANCELLED = "CANCELLED"


# User-facing messages by error code
ERROR_MESSAGES = {
    IPCErrorCode.VALIDATION_ERROR: "Input validation failed",
    IPCErrorCode.COMMAND_REJECTED: "Command was rejected",
    IPCErrorCode.TIMEOUT: "Operation timed out",
    IPCErrorCode.NOT_FOUND: "Requested resource not found",
    IPCErrorCode.PERMISSION_DENIED: "Permission denied",
    IPCErrorCode.INTERNAL_ERROR: "Internal error",
    IPCErrorCode.NETWORK_ERROR: "Network connection error",
    IPCErrorCode.CANCELLED: "Operation cancelled",
}


class IPCError(RuntimeError):
    """Raised by unwrap_response for error envelopes."""

    def __init__(self, message: str, code: Optional[IPCErrorCode] = None):
        super().__init__(message)
        self.code = code


def _now_ms() -> int:
    return int(time.time() * 1000)


def create_success_response(data: Any = None) -> Dict[str, Any]:
    """Create a standardized success response."""
    return {"success": True, "data": data, "timestamp": _now_ms()}


def create_error_response(
    code: IPCErrorCode,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Create a standardized error response.

    Args:
        code: Error code from IPCErrorCode
        message: Custom error message (uses default if not provided)
        details: Additional error details

    Returns:
        Standardized error response dict
    """
    code = IPCErrorCode(code)
    error: Dict[str, Any] = {
        "code": code.value,
        "message": message or get_error_message(code),
    }
    if details:
        error["details"] = details

    return {"success": False, "error": error, "timestamp": _now_ms()}


def from_validation_result(
    result: Union[ValidationResult, CommandValidationResult],
    code: IPCErrorCode = IPCErrorCode.VALIDATION_ERROR,
) -> Dict[str, Any]:
    """Convert a rejected validation outcome into an error response."""
    if result.valid:
        raise ValueError("cannot build an error response from an accepted result")
    return create_error_response(code, result.error, {"kind": result.kind.value})


def is_success_response(response: Dict[str, Any]) -> bool:
    return response.get("success") is True and "data" in response


def is_error_response(response: Dict[str, Any]) -> bool:
    return response.get("success") is False and response.get("error") is not None


def unwrap_response(response: Dict[str, Any]) -> Any:
    """Return the data of a success response or raise IPCError."""
    if is_success_response(response):
        return response["data"]

    error = response.get("error") or {}
    try:
        code = IPCErrorCode(error.get("code"))
    except ValueError:
        code = None
    raise IPCError(error.get("message", "Unknown error"), code)


def get_error_message(code: IPCErrorCode) -> str:
    """Map an error code to a user-friendly message."""
    return ERROR_MESSAGES.get(code, "Unknown error")


__all__ = [
    "IPCErrorCode",
    "IPCError",
    "ERROR_MESSAGES",
    "create_success_response",
    "create_error_response",
    "from_validation_result",
    "is_success_response",
    "is_error_response",
    "unwrap_response",
    "get_error_message",
]
