"""Security headers middleware."""
from typing import Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    Content-Security-Policy is left to CSPNonceMiddleware, which needs the
    per-request nonce.
    """

    DEFAULT_HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
        "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    }

    def __init__(self, app, custom_headers: Optional[Dict[str, str]] = None):
        """
        Initialize security headers middleware.

        Args:
            app: The ASGI application
            custom_headers: Additional custom headers to add
        """
        super().__init__(app)
        self.custom_headers = custom_headers or {}

    def get_security_headers(self) -> Dict[str, str]:
        """
        Get all security headers as a dictionary.

        Returns:
            Dict of header name -> value
        """
        headers = dict(self.DEFAULT_HEADERS)
        headers.update(
            (name, value) for name, value in self.custom_headers.items()
            if name.lower() != "content-security-policy"
        )
        return headers

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)

        for header, value in self.get_security_headers().items():
            # Only add HSTS for HTTPS requests
            if header == "Strict-Transport-Security" and request.url.scheme != "https":
                continue
            response.headers[header] = value

        return response
