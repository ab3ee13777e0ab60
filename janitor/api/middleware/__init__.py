"""API Middleware modules."""
from janitor.api.middleware.csp_nonce import CSPNonceMiddleware, get_csp_nonce
from janitor.api.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "CSPNonceMiddleware",
    "SecurityHeadersMiddleware",
    "get_csp_nonce",
]
