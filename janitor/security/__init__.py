"""Trust-boundary validators and CSP management."""
from janitor.security.errors import ValidationError, ValidationErrorKind
from janitor.security.results import CommandValidationResult, ValidationResult
from janitor.security.command_validator import (
    ALLOWED_COMMANDS,
    DANGEROUS_CHARS,
    DEFAULT_COMMAND_POLICY,
    CommandPolicy,
    CommandValidator,
    command_validator,
)
from janitor.security.input_validator import (
    NPM_PACKAGE_PATTERN,
    PATH_TRAVERSAL_PATTERN,
    PIP_PACKAGE_PATTERN,
    VALID_PACKAGE_MANAGERS,
    InputValidator,
    PackageManager,
    input_validator,
)
from janitor.security.csp_manager import (
    CSP_HEADER,
    CSP_POLICY,
    CSPConfig,
    CSPManager,
    csp_manager,
)
from janitor.security.ipc_sender import validate_ipc_sender

__all__ = [
    "ValidationError",
    "ValidationErrorKind",
    "CommandValidationResult",
    "ValidationResult",
    "ALLOWED_COMMANDS",
    "DANGEROUS_CHARS",
    "DEFAULT_COMMAND_POLICY",
    "CommandPolicy",
    "CommandValidator",
    "command_validator",
    "NPM_PACKAGE_PATTERN",
    "PATH_TRAVERSAL_PATTERN",
    "PIP_PACKAGE_PATTERN",
    "VALID_PACKAGE_MANAGERS",
    "InputValidator",
    "PackageManager",
    "input_validator",
    "CSP_HEADER",
    "CSP_POLICY",
    "CSPConfig",
    "CSPManager",
    "csp_manager",
    "validate_ipc_sender",
]
