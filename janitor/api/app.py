"""
FastAPI application serving the rendered shell.

Every response carries a fresh CSP nonce header and the standard security
headers. The HTML shell threads the same nonce into its inline script tag.
"""

import html
import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from janitor.api.middleware.csp_nonce import CSPNonceMiddleware, get_csp_nonce
from janitor.api.middleware.security_headers import SecurityHeadersMiddleware
from janitor.config import GuardSettings, load_settings
from janitor.ipc.response import (
    IPCErrorCode,
    create_error_response,
    create_success_response,
    from_validation_result,
)
from janitor.logging_utils import configure_logging, truncate_for_log
from janitor.security.command_validator import command_validator

logger = logging.getLogger("janitor.api")

SHELL_TEMPLATE = """<!doctype html>
<html>
  <head>
    <meta charset="utf-8">
    <title>Dev Janitor</title>
  </head>
  <body>
    <div id="root"></div>
    <script nonce="{nonce}">window.__JANITOR_BOOT__ = true;</script>
  </body>
</html>
"""


class CommandRequest(BaseModel):
    command: str


def create_app(settings: Optional[GuardSettings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings if settings is not None else GuardSettings()

    app = FastAPI(
        title="Dev Janitor Guard",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    # Added last runs first: the nonce exists before any route renders
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(CSPNonceMiddleware, settings=settings)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        error_map = {
            400: IPCErrorCode.VALIDATION_ERROR,
            403: IPCErrorCode.PERMISSION_DENIED,
            404: IPCErrorCode.NOT_FOUND,
        }
        error_code = error_map.get(exc.status_code, IPCErrorCode.INTERNAL_ERROR)
        return JSONResponse(
            status_code=exc.status_code,
            content=create_error_response(error_code, str(exc.detail)),
        )

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        nonce = html.escape(get_csp_nonce(request), quote=True)
        return HTMLResponse(SHELL_TEMPLATE.format(nonce=nonce))

    @app.get("/api/health")
    async def health() -> Dict[str, Any]:
        return {"status": "ok", "development": settings.is_development}

    @app.post("/api/commands/validate")
    async def validate_command(body: CommandRequest) -> JSONResponse:
        result = command_validator.validate_command(body.command)
        if not result.valid:
            logger.warning(f"Rejected command ({result.kind.value}): {truncate_for_log(body.command)}")
            return JSONResponse(
                status_code=400,
                content=from_validation_result(result, IPCErrorCode.COMMAND_REJECTED),
            )
        return JSONResponse(
            content=create_success_response({"sanitized_command": result.sanitized_command})
        )

    return app


def main() -> None:
    import uvicorn

    settings = load_settings()
    configure_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=os.getenv("JANITOR_HOST", "127.0.0.1"),
        port=int(os.getenv("JANITOR_PORT", "8766")),
    )


if __name__ == "__main__":
    main()
