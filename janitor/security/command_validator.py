"""
Shell command validation for the command-execution IPC handler.

A command line is accepted only when its base command is allow-listed and
no shell metacharacter appears anywhere in it. Accepted arguments are then
escaped so the result can be handed to an executor.

Usage:
    from janitor.security.command_validator import CommandValidator

    result = CommandValidator().validate_command("npm install lodash")
    if result.valid:
        run(result.sanitized_command)
"""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Tuple

from janitor.security.errors import ValidationErrorKind
from janitor.security.results import CommandValidationResult

# Developer tooling only
ALLOWED_COMMANDS: Tuple[str, ...] = (
    "npm",
    "npx",
    "pip",
    "pip3",
    "composer",
    "cargo",
    "gem",
    "node",
    "python",
    "python3",
)

# ; & | ` $ ( ) { } [ ] < > \ ' "
DANGEROUS_CHARS: FrozenSet[str] = frozenset(";&|`$(){}[]<>\\'\"")


@dataclass(frozen=True)
class CommandPolicy:
    """Allow-list and metacharacter set shared by every validation call."""
    allowed_commands: Tuple[str, ...] = ALLOWED_COMMANDS
    dangerous_chars: FrozenSet[str] = DANGEROUS_CHARS
    _allowed_lookup: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "allowed_commands", tuple(self.allowed_commands))
        object.__setattr__(self, "dangerous_chars", frozenset(self.dangerous_chars))
        object.__setattr__(self, "_allowed_lookup", frozenset(self.allowed_commands))

    def is_allowed(self, base_command: str) -> bool:
        return base_command in self._allowed_lookup


DEFAULT_COMMAND_POLICY = CommandPolicy()


class CommandValidator:
    """Validates and sanitizes command lines against a CommandPolicy."""

    __slots__ = ("_policy",)

    def __init__(self, policy: CommandPolicy = DEFAULT_COMMAND_POLICY):
        self._policy = policy

    @property
    def policy(self) -> CommandPolicy:
        return self._policy

    def validate_command(self, command: Any) -> CommandValidationResult:
        """Validate a full command line.

        Gates run in order and the first failure wins: empty input, base
        command not allow-listed, dangerous character anywhere in the line.

        Args:
            command: Raw command line from the caller

        Returns:
            CommandValidationResult with the sanitized command or the reason

        Example:
            >>> CommandValidator().validate_command("npm install lodash").sanitized_command
            'npm install lodash'
            >>> CommandValidator().validate_command("rm -rf /").error
            'command not in allow-list: rm'
        """
        if not isinstance(command, str) or not command.strip():
            return CommandValidationResult.fail(
                ValidationErrorKind.EMPTY_INPUT, "command must not be empty"
            )

        trimmed = command.strip()
        parts = trimmed.split()
        base_command = parts[0]

        if not self._policy.is_allowed(base_command):
            return CommandValidationResult.fail(
                ValidationErrorKind.NOT_ALLOW_LISTED,
                f"command not in allow-list: {base_command}",
            )

        # Whole line, base command included
        if self.contains_dangerous_chars(trimmed):
            return CommandValidationResult.fail(
                ValidationErrorKind.DANGEROUS_CHARACTER, "unsafe characters present"
            )

        escaped_args = [self.escape_argument(arg) for arg in parts[1:]]
        return CommandValidationResult.ok(" ".join([base_command, *escaped_args]))

    def contains_dangerous_chars(self, value: Any) -> bool:
        """Check whether a string holds any shell metacharacter."""
        if not isinstance(value, str) or not value:
            return False
        dangerous = self._policy.dangerous_chars
        return any(char in dangerous for char in value)

    def escape_argument(self, arg: Any) -> str:
        """
        Backslash-escape shell metacharacters in a single argument.

        Already-escaped pairs are kept as they are, so applying this to its
        own output changes nothing.
        """
        if not isinstance(arg, str) or not arg:
            return ""

        dangerous = self._policy.dangerous_chars
        escapable = dangerous - {"\\"}
        result = []
        i = 0
        length = len(arg)

        while i < length:
            char = arg[i]
            nxt = arg[i + 1] if i + 1 < length else None

            if char == "\\":
                if nxt is not None and nxt in escapable:
                    result.append(char + nxt)
                    i += 2
                elif nxt == "\\":
                    result.append("\\\\")
                    i += 2
                else:
                    result.append("\\\\")
                    i += 1
                continue

            if char in dangerous:
                result.append("\\" + char)
            else:
                result.append(char)
            i += 1

        return "".join(result)

    def get_allowed_commands(self) -> Tuple[str, ...]:
        """Allow-list in declaration order, for display and audit."""
        return self._policy.allowed_commands


command_validator = CommandValidator()

__all__ = [
    "ALLOWED_COMMANDS",
    "DANGEROUS_CHARS",
    "CommandPolicy",
    "DEFAULT_COMMAND_POLICY",
    "CommandValidator",
    "command_validator",
]
