"""CSP nonce middleware for inline script security."""
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from janitor.config import GuardSettings
from janitor.security.csp_manager import CSP_HEADER, CSPConfig, CSPManager, csp_manager


class CSPNonceMiddleware(BaseHTTPMiddleware):
    """Generate a CSP nonce per request and attach the matching header."""

    def __init__(
        self,
        app,
        settings: Optional[GuardSettings] = None,
        manager: CSPManager = csp_manager,
    ):
        super().__init__(app)
        self.settings = settings if settings is not None else GuardSettings()
        self.manager = manager

    async def dispatch(self, request: Request, call_next) -> Response:
        nonce = self.manager.generate_nonce()
        request.state.csp_nonce = nonce

        response = await call_next(request)

        config = CSPConfig(
            is_development=self.settings.is_development,
            dev_server_url=self.settings.dev_server_url,
            nonce=nonce,
        )
        # Only the CSP entry is copied back; assigning it drops any duplicates
        merged = self.manager.apply_to_response(response.headers, config, as_list=False)
        response.headers[CSP_HEADER] = merged[CSP_HEADER]

        return response


def get_csp_nonce(request: Request) -> str:
    """Get CSP nonce from request state."""
    return getattr(request.state, "csp_nonce", "")
