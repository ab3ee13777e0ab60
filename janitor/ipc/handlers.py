"""
IPC handlers that reach the command executor.

Every parameter goes through InputValidator first, the assembled command
line then goes through CommandValidator, and only a fully accepted command
is handed to the runner. Rejections are logged here and returned as error
envelopes; nothing is raised to the IPC transport.
"""

import logging
import os
import shlex
import signal
import subprocess
from typing import Any, Callable, Dict, List, Optional

from janitor.config import GuardSettings
from janitor.ipc.response import (
    IPCErrorCode,
    create_error_response,
    create_success_response,
    from_validation_result,
)
from janitor.logging_utils import truncate_for_log
from janitor.security.command_validator import CommandValidator, command_validator
from janitor.security.input_validator import InputValidator, PackageManager, input_validator
from janitor.security.ipc_sender import validate_ipc_sender

logger = logging.getLogger(__name__)

Runner = Callable[[List[str], int], subprocess.CompletedProcess]
ProcessKiller = Callable[[int], None]

INSTALL_COMMANDS = {
    PackageManager.NPM: "npm install {package}",
    PackageManager.PIP: "pip install {package}",
    PackageManager.COMPOSER: "composer require {package}",
}

UNINSTALL_COMMANDS = {
    PackageManager.NPM: "npm uninstall {package}",
    PackageManager.PIP: "pip uninstall -y {package}",
    PackageManager.COMPOSER: "composer remove {package}",
}


def run_subprocess(argv: List[str], timeout: int) -> subprocess.CompletedProcess:
    """Default runner: no shell, captured text output."""
    return subprocess.run(
        argv,
        shell=False,
        capture_output=True,
        text=True,
        timeout=timeout,
        check=False,
    )


def terminate_process(pid: int) -> None:
    """Default process killer."""
    os.kill(pid, signal.SIGTERM)


class CommandHandlers:
    """IPC entry points for command execution and package management."""

    def __init__(
        self,
        runner: Optional[Runner] = None,
        killer: Optional[ProcessKiller] = None,
        settings: Optional[GuardSettings] = None,
        commands: CommandValidator = command_validator,
        inputs: InputValidator = input_validator,
    ):
        self.runner = runner or run_subprocess
        self.killer = killer or terminate_process
        self.settings = settings if settings is not None else GuardSettings()
        self.commands = commands
        self.inputs = inputs

    def execute_command(self, command: Any, sender_url: Optional[str] = None) -> Dict[str, Any]:
        """Validate and run a command line.

        Args:
            command: Raw command line from the renderer
            sender_url: URL of the sending page; checked when given

        Returns:
            Success envelope with stdout/stderr/returncode, or error envelope
        """
        if sender_url is not None and not validate_ipc_sender(sender_url):
            logger.warning(f"Rejected IPC sender: {truncate_for_log(sender_url)}")
            return create_error_response(
                IPCErrorCode.PERMISSION_DENIED, "IPC sender is not trusted"
            )

        result = self.commands.validate_command(command)
        if not result.valid:
            logger.warning(
                f"Rejected command ({result.kind.value}): {result.error} "
                f"in: {truncate_for_log(command)}"
            )
            return from_validation_result(result, IPCErrorCode.COMMAND_REJECTED)

        argv = shlex.split(result.sanitized_command)
        timeout = self.settings.command_timeout
        logger.info(f"Executing: {result.sanitized_command}")

        try:
            completed = self.runner(argv, timeout)
        except subprocess.TimeoutExpired:
            logger.error(f"Command timed out after {timeout}s: {result.sanitized_command}")
            return create_error_response(
                IPCErrorCode.TIMEOUT,
                f"command timed out after {timeout}s",
                {"command": result.sanitized_command},
            )
        except (OSError, ValueError) as e:
            logger.error(f"Command failed to start: {truncate_for_log(result.sanitized_command)}: {e}")
            return create_error_response(
                IPCErrorCode.INTERNAL_ERROR,
                f"command failed to start: {e}",
                {"command": result.sanitized_command},
            )

        return create_success_response({
            "command": result.sanitized_command,
            "stdout": completed.stdout,
            "stderr": completed.stderr,
            "returncode": completed.returncode,
        })

    def install_package(self, manager: Any, package: Any, sender_url: Optional[str] = None) -> Dict[str, Any]:
        return self._package_command(INSTALL_COMMANDS, manager, package, sender_url)

    def uninstall_package(self, manager: Any, package: Any, sender_url: Optional[str] = None) -> Dict[str, Any]:
        return self._package_command(UNINSTALL_COMMANDS, manager, package, sender_url)

    def _package_command(
        self,
        templates: Dict[PackageManager, str],
        manager: Any,
        package: Any,
        sender_url: Optional[str],
    ) -> Dict[str, Any]:
        manager_result = self.inputs.validate_package_manager(manager)
        if not manager_result.valid:
            logger.warning(f"Rejected package manager: {truncate_for_log(manager)}")
            return from_validation_result(manager_result)

        package_result = self.inputs.validate_package_name(package)
        if not package_result.valid:
            logger.warning(f"Rejected package name: {truncate_for_log(package)}")
            return from_validation_result(package_result)

        command = templates[manager_result.value].format(package=package_result.value)
        return self.execute_command(command, sender_url=sender_url)

    def kill_process(self, pid: Any) -> Dict[str, Any]:
        """Terminate a process after validating its PID."""
        pid_result = self.inputs.validate_pid(pid)
        if not pid_result.valid:
            logger.warning(f"Rejected PID: {truncate_for_log(pid)}")
            return from_validation_result(pid_result)

        try:
            self.killer(pid_result.value)
        except ProcessLookupError:
            return create_error_response(
                IPCErrorCode.NOT_FOUND, f"no process with PID {pid_result.value}"
            )
        except PermissionError:
            logger.warning(f"Not permitted to terminate PID {pid_result.value}")
            return create_error_response(
                IPCErrorCode.PERMISSION_DENIED,
                f"not permitted to terminate PID {pid_result.value}",
            )
        except (OverflowError, ValueError):
            logger.warning(f"PID out of range for this platform: {truncate_for_log(pid_result.value)}")
            return create_error_response(
                IPCErrorCode.NOT_FOUND, "PID is out of range for this platform"
            )

        logger.info(f"Terminated PID {pid_result.value}")
        return create_success_response({"pid": pid_result.value})

    def check_path(self, path: Any) -> Dict[str, Any]:
        path_result = self.inputs.validate_path(path)
        if not path_result.valid:
            logger.warning(f"Rejected path: {truncate_for_log(path)}")
            return from_validation_result(path_result)
        return create_success_response({"path": path_result.value})


__all__ = [
    "CommandHandlers",
    "INSTALL_COMMANDS",
    "UNINSTALL_COMMANDS",
    "run_subprocess",
    "terminate_process",
]
