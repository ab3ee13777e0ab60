"""Validation error taxonomy for the trust boundary."""

from enum import Enum


class ValidationErrorKind(str, Enum):
    """Why a value was rejected."""
    EMPTY_INPUT = "empty_input"
    NOT_ALLOW_LISTED = "not_allow_listed"
    DANGEROUS_CHARACTER = "dangerous_character"
    MALFORMED_FORMAT = "malformed_format"
    OUT_OF_RANGE = "out_of_range"
    NOT_AN_INTEGER = "not_an_integer"
    NOT_FINITE = "not_finite"
    NOT_NUMERIC = "not_numeric"


class ValidationError(ValueError):
    """Raised when a rejected outcome is unwrapped."""

    def __init__(self, message: str, kind: ValidationErrorKind):
        super().__init__(message)
        self.kind = kind
