"""
Deployment settings for the guard layer.

Values come from environment variables (optionally seeded from a .env file)
at process start. They tune the surrounding handlers and middleware only:
the command allow-list and the base CSP table are not configurable.

Usage:
    from janitor.config import load_settings

    settings = load_settings()
    if settings.is_development:
        ...
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from janitor.security.csp_manager import CSPConfig

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 120
DEVELOPMENT_ENVS = {"development", "dev"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class GuardSettings(BaseModel):
    """Settings for IPC handlers, CSP middleware and logging."""
    model_config = ConfigDict(frozen=True)

    is_development: bool = False
    dev_server_url: Optional[str] = None
    command_timeout: int = Field(ge=1, le=3600, default=DEFAULT_COMMAND_TIMEOUT)
    log_level: str = "INFO"
    log_dir: Path = Path("logs")

    @field_validator("dev_server_url")
    @classmethod
    def dev_server_url_is_http(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        v = v.rstrip("/")
        # Same rules the CSP builder enforces per request
        CSPConfig(is_development=True, dev_server_url=v)
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_is_known(cls, v):
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return level


def _parse_timeout(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_COMMAND_TIMEOUT
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid JANITOR_COMMAND_TIMEOUT={raw!r}, using {DEFAULT_COMMAND_TIMEOUT}")
        return DEFAULT_COMMAND_TIMEOUT
    if not 1 <= value <= 3600:
        logger.warning(f"JANITOR_COMMAND_TIMEOUT={value} out of range, using {DEFAULT_COMMAND_TIMEOUT}")
        return DEFAULT_COMMAND_TIMEOUT
    return value


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
) -> GuardSettings:
    """
    Build GuardSettings from the environment.

    Args:
        env: Mapping to read instead of os.environ (tests)
        env_file: .env file loaded with override=False before reading

    Returns:
        Frozen GuardSettings
    """
    if env is None:
        if env_file is not None and env_file.exists():
            from dotenv import load_dotenv
            load_dotenv(env_file, override=False)
            logger.debug(f"Loaded .env from {env_file}")
        env = os.environ

    return GuardSettings(
        is_development=env.get("JANITOR_ENV", "production").strip().lower() in DEVELOPMENT_ENVS,
        dev_server_url=env.get("JANITOR_DEV_SERVER_URL") or None,
        command_timeout=_parse_timeout(env.get("JANITOR_COMMAND_TIMEOUT")),
        log_level=env.get("JANITOR_LOG_LEVEL", "INFO"),
        log_dir=Path(env.get("JANITOR_LOG_DIR", "logs")),
    )


__all__ = ["GuardSettings", "load_settings", "DEFAULT_COMMAND_TIMEOUT"]
