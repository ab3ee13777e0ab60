"""
Dev Janitor Guard Test Configuration

Central pytest configuration and shared fixtures for all tests.
"""

import os
import subprocess
import sys
from unittest.mock import MagicMock

# Add project root to path FIRST
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from janitor.config import GuardSettings
from janitor.security.command_validator import CommandValidator
from janitor.security.csp_manager import CSPManager
from janitor.security.input_validator import InputValidator


@pytest.fixture
def command_validator():
    return CommandValidator()


@pytest.fixture
def input_validator():
    return InputValidator()


@pytest.fixture
def csp_manager():
    return CSPManager()


@pytest.fixture
def settings(tmp_path):
    return GuardSettings(log_dir=tmp_path / "logs")


@pytest.fixture
def dev_settings(tmp_path):
    return GuardSettings(
        is_development=True,
        dev_server_url="http://localhost:5173",
        log_dir=tmp_path / "logs",
    )


# Mock command runner
@pytest.fixture
def mock_runner():
    runner = MagicMock()
    runner.return_value = subprocess.CompletedProcess(
        args=[], returncode=0, stdout="ok\n", stderr=""
    )
    return runner


# Mock process killer
@pytest.fixture
def mock_killer():
    return MagicMock(return_value=None)


# Test client for FastAPI
@pytest.fixture
def client(settings):
    from fastapi.testclient import TestClient
    from janitor.api.app import create_app
    app = create_app(settings)
    return TestClient(app)


@pytest.fixture
def dev_client(dev_settings):
    from fastapi.testclient import TestClient
    from janitor.api.app import create_app
    app = create_app(dev_settings)
    return TestClient(app)


# Environment setup
@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    for name in (
        "JANITOR_ENV",
        "JANITOR_DEV_SERVER_URL",
        "JANITOR_COMMAND_TIMEOUT",
        "JANITOR_LOG_LEVEL",
        "JANITOR_LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
