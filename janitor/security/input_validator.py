"""Input validation for individual IPC parameters.

Each validator checks one kind of value against a narrow grammar and returns
a ValidationResult. None of them raise for malformed values.

Usage:
    from janitor.security.input_validator import InputValidator

    validator = InputValidator()
    name = validator.validate_package_name(raw_name)
    if not name.valid:
        return create_error_response(IPCErrorCode.VALIDATION_ERROR, name.error)
"""

import math
import numbers
import re
from enum import Enum
from typing import Any, Tuple

from janitor.security.errors import ValidationErrorKind
from janitor.security.results import ValidationResult


class PackageManager(str, Enum):
    """Supported package managers."""
    NPM = "npm"
    PIP = "pip"
    COMPOSER = "composer"


# npm is lowercase-only, with optional @scope/ prefix
NPM_PACKAGE_PATTERN = re.compile(r"^(@[a-z0-9\-~][a-z0-9\-._~]*/)?[a-z0-9\-~][a-z0-9\-._~]*$")

# pip allows both cases; must start and end alphanumeric
PIP_PACKAGE_PATTERN = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?$")

PATH_TRAVERSAL_PATTERN = re.compile(r"\.\.")

VALID_PACKAGE_MANAGERS: Tuple[str, ...] = tuple(manager.value for manager in PackageManager)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


class InputValidator:
    """Validators for package names, PIDs, paths and package managers."""

    __slots__ = ()

    def validate_package_name(self, name: Any) -> ValidationResult[str]:
        """Validate an npm or pip package name.

        Args:
            name: Package name as received over IPC

        Returns:
            ValidationResult holding the trimmed name (case preserved)
        """
        if _is_blank(name):
            return ValidationResult.fail(
                ValidationErrorKind.EMPTY_INPUT, "package name must not be empty"
            )

        trimmed = name.strip()
        if NPM_PACKAGE_PATTERN.fullmatch(trimmed) or PIP_PACKAGE_PATTERN.fullmatch(trimmed):
            return ValidationResult.ok(trimmed)

        return ValidationResult.fail(
            ValidationErrorKind.MALFORMED_FORMAT,
            "invalid package name format: must follow npm or pip naming rules",
        )

    def validate_pid(self, pid: Any) -> ValidationResult[int]:
        """Validate a process identifier.

        Checks run from least to most specific so the first failing check
        gives the most useful reason: numeric, not NaN, finite, integral,
        positive.

        Args:
            pid: Process ID as received over IPC

        Returns:
            ValidationResult holding the PID as an int
        """
        if isinstance(pid, bool) or not isinstance(pid, numbers.Real):
            return ValidationResult.fail(ValidationErrorKind.NOT_NUMERIC, "PID must be numeric")

        if not isinstance(pid, numbers.Integral):
            value = float(pid)
            if math.isnan(value):
                return ValidationResult.fail(ValidationErrorKind.NOT_NUMERIC, "PID must not be NaN")
            if math.isinf(value):
                return ValidationResult.fail(ValidationErrorKind.NOT_FINITE, "PID must be finite")
            if not value.is_integer():
                return ValidationResult.fail(
                    ValidationErrorKind.NOT_AN_INTEGER, "PID must be an integer"
                )

        pid_int = int(pid)
        if pid_int <= 0:
            return ValidationResult.fail(
                ValidationErrorKind.OUT_OF_RANGE, "PID must be a positive integer"
            )

        return ValidationResult.ok(pid_int)

    def validate_path(self, path: Any) -> ValidationResult[str]:
        """
        Reject empty paths and anything containing "..".

        The trimmed path is returned as given. It is deliberately not
        normalized, so a traversal can't be hidden behind normalization.
        """
        if _is_blank(path):
            return ValidationResult.fail(ValidationErrorKind.EMPTY_INPUT, "path must not be empty")

        trimmed = path.strip()
        if PATH_TRAVERSAL_PATTERN.search(trimmed):
            return ValidationResult.fail(
                ValidationErrorKind.MALFORMED_FORMAT,
                "path contains unsafe sequence (..): possible path traversal",
            )

        return ValidationResult.ok(trimmed)

    def validate_package_manager(self, manager: Any) -> ValidationResult[PackageManager]:
        if _is_blank(manager):
            return ValidationResult.fail(
                ValidationErrorKind.EMPTY_INPUT, "package manager must not be empty"
            )

        normalized = manager.strip().lower()
        if normalized in VALID_PACKAGE_MANAGERS:
            return ValidationResult.ok(PackageManager(normalized))

        return ValidationResult.fail(
            ValidationErrorKind.MALFORMED_FORMAT,
            f"invalid package manager. Supported package managers: {', '.join(VALID_PACKAGE_MANAGERS)}",
        )


input_validator = InputValidator()

__all__ = [
    "PackageManager",
    "NPM_PACKAGE_PATTERN",
    "PIP_PACKAGE_PATTERN",
    "PATH_TRAVERSAL_PATTERN",
    "VALID_PACKAGE_MANAGERS",
    "InputValidator",
    "input_validator",
]
