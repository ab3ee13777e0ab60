"""
Outcome types returned by the validators.

Every outcome is either accepted (carrying a value) or rejected (carrying a
reason and an error kind), never both. Use the ``ok``/``fail`` constructors
rather than building instances by hand.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from janitor.security.errors import ValidationError, ValidationErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Result of validating a single IPC parameter."""
    valid: bool
    value: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[ValidationErrorKind] = None

    def __post_init__(self):
        if self.valid and (self.error is not None or self.kind is not None):
            raise ValueError("accepted result cannot carry an error")
        if not self.valid and (self.error is None or self.kind is None or self.value is not None):
            raise ValueError("rejected result needs an error and kind, and no value")

    @classmethod
    def ok(cls, value: T) -> "ValidationResult[T]":
        return cls(valid=True, value=value)

    @classmethod
    def fail(cls, kind: ValidationErrorKind, error: str) -> "ValidationResult[T]":
        return cls(valid=False, error=error, kind=kind)

    def unwrap(self) -> T:
        """Return the accepted value or raise ValidationError."""
        if not self.valid:
            raise ValidationError(self.error, self.kind)
        return self.value


@dataclass(frozen=True)
class CommandValidationResult:
    """Result of validating a full command line."""
    valid: bool
    sanitized_command: Optional[str] = None
    error: Optional[str] = None
    kind: Optional[ValidationErrorKind] = None

    def __post_init__(self):
        if self.valid and (self.sanitized_command is None or self.error is not None):
            raise ValueError("accepted command needs a sanitized command and no error")
        if not self.valid and (self.error is None or self.kind is None or self.sanitized_command is not None):
            raise ValueError("rejected command needs an error and kind, and no command")

    @classmethod
    def ok(cls, sanitized_command: str) -> "CommandValidationResult":
        return cls(valid=True, sanitized_command=sanitized_command)

    @classmethod
    def fail(cls, kind: ValidationErrorKind, error: str) -> "CommandValidationResult":
        return cls(valid=False, error=error, kind=kind)

    def unwrap(self) -> str:
        """Return the sanitized command or raise ValidationError."""
        if not self.valid:
            raise ValidationError(self.error, self.kind)
        return self.sanitized_command
