"""HTTP surface: security middleware and the application factory."""
from janitor.api.app import create_app

__all__ = ["create_app"]
