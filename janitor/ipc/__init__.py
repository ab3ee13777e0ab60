"""IPC response envelope and command handlers."""
from janitor.ipc.response import (
    IPCError,
    IPCErrorCode,
    create_error_response,
    create_success_response,
    from_validation_result,
    get_error_message,
    is_error_response,
    is_success_response,
    unwrap_response,
)
from janitor.ipc.handlers import CommandHandlers

__all__ = [
    "IPCError",
    "IPCErrorCode",
    "create_error_response",
    "create_success_response",
    "from_validation_result",
    "get_error_message",
    "is_error_response",
    "is_success_response",
    "unwrap_response",
    "CommandHandlers",
]
