"""IPC sender verification."""

from typing import Any
from urllib.parse import urlsplit

LOCAL_HOSTS = frozenset({"localhost"})


def validate_ipc_sender(url: Any) -> bool:
    """
    Return True when an IPC message comes from the app's own renderer.

    Trusted senders are pages loaded from ``file://`` and the local dev
    server on ``http://localhost``. The host is compared exactly, so
    ``http://localhost.example.com`` is rejected.
    """
    if not isinstance(url, str) or not url:
        return False
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return False
    if parts.scheme == "file":
        return True
    return parts.scheme == "http" and hostname in LOCAL_HOSTS


__all__ = ["validate_ipc_sender"]
