"""Content Security Policy management for rendered content.

Builds the Content-Security-Policy header value from a read-only base policy
plus per-response settings (nonce, development mode, dev server origin).
"""

import base64
import re
import secrets
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Union

CSP_HEADER = "Content-Security-Policy"

NONCE_BYTES = 16

UNSAFE_INLINE = "'unsafe-inline'"

DEV_CONNECT_SOURCES = ("http://localhost:*", "ws://localhost:*")

# Directives that are pinned to 'none' whatever the base table says
LOCKED_DIRECTIVES = ("object-src", "frame-ancestors")


def _freeze_policy(policy: Mapping[str, Sequence[str]]) -> Mapping[str, tuple]:
    return MappingProxyType({name: tuple(tokens) for name, tokens in policy.items()})


CSP_POLICY: Mapping[str, tuple] = _freeze_policy({
    "default-src": ["'self'"],
    "script-src": ["'self'"],
    # UI toolkit injects inline styles; scripts never get this exception
    "style-src": ["'self'", UNSAFE_INLINE],
    "img-src": ["'self'", "data:", "https:"],
    "connect-src": ["'self'"],
    "font-src": ["'self'"],
    "object-src": ["'none'"],
    "base-uri": ["'self'"],
    "form-action": ["'self'"],
    "frame-ancestors": ["'none'"],
})


NONCE_PATTERN = re.compile(r"[A-Za-z0-9+/=_-]+")

# Anything that could end a source token or a directive
SOURCE_BREAKERS = re.compile(r"[\s;,'\"]")


@dataclass(frozen=True)
class CSPConfig:
    """
    Per-window / per-response CSP settings.

    Nonces must be base64/base64url text and the dev server URL a single
    http(s) source expression; anything else raises ValueError so a value
    can never smuggle extra tokens into the header.
    """
    is_development: bool = False
    dev_server_url: Optional[str] = None
    nonce: Optional[str] = None

    def __post_init__(self):
        if self.nonce and not NONCE_PATTERN.fullmatch(self.nonce):
            raise ValueError("nonce must be base64 text")
        if self.dev_server_url:
            if SOURCE_BREAKERS.search(self.dev_server_url):
                raise ValueError("dev_server_url must be a single source expression")
            if not self.dev_server_url.startswith(("http://", "https://")):
                raise ValueError("dev_server_url must start with http:// or https://")


def to_websocket_url(url: str) -> str:
    """Map an http(s) origin to its ws(s) equivalent."""
    if url.startswith("https"):
        return "wss" + url[len("https"):]
    if url.startswith("http"):
        return "ws" + url[len("http"):]
    return url


class CSPManager:
    """
    Generates CSP headers and nonces.

    The base policy is frozen on construction and only ever copied, so a
    single manager can serve concurrent requests.
    """

    __slots__ = ("_policy",)

    def __init__(self, policy: Mapping[str, Sequence[str]] = CSP_POLICY):
        self._policy = _freeze_policy(policy)

    @property
    def policy(self) -> Mapping[str, tuple]:
        return self._policy

    def generate_nonce(self) -> str:
        """Return a fresh base64 nonce (16 random bytes, 24 characters)."""
        return base64.b64encode(secrets.token_bytes(NONCE_BYTES)).decode("ascii")

    def build_directives(self, config: CSPConfig) -> Dict[str, List[str]]:
        """Return a request-scoped copy of the policy with config applied."""
        directives = {name: list(tokens) for name, tokens in self._policy.items()}

        script_src = [
            token for token in directives.setdefault("script-src", ["'self'"])
            if token != UNSAFE_INLINE
        ]
        if config.nonce:
            script_src.append(f"'nonce-{config.nonce}'")
        directives["script-src"] = script_src

        if config.is_development:
            connect_src = directives.setdefault("connect-src", ["'self'"])
            connect_src.extend(DEV_CONNECT_SOURCES)
            if config.dev_server_url:
                connect_src.append(config.dev_server_url)
                connect_src.append(to_websocket_url(config.dev_server_url))

        for name in LOCKED_DIRECTIVES:
            directives[name] = ["'none'"]

        return directives

    def generate_csp_header(self, config: CSPConfig) -> str:
        """Serialize the policy as ``name tok tok; name tok``.

        Args:
            config: Per-response settings

        Returns:
            Header value ready for Content-Security-Policy
        """
        directives = self.build_directives(config)
        return "; ".join(
            f"{name} {' '.join(tokens)}" for name, tokens in directives.items()
        )

    def apply_to_response(
        self,
        headers: Optional[Mapping[str, Union[str, List[str]]]],
        config: CSPConfig,
        as_list: Optional[bool] = None,
    ) -> Dict[str, Union[str, List[str]]]:
        """
        Return a new header map carrying exactly one CSP value.

        Existing headers are kept unchanged except for any previous CSP entry
        (matched case-insensitively), which is replaced.

        Args:
            headers: Incoming header map, string or list valued.
            config: Mode, nonce and dev server for this response.
            as_list: Emit the CSP value as a one-element list. When None the
                shape follows the incoming map: a list if any value there is
                a list, a plain string otherwise (including an empty map).
                Pass True for list-valued header tables that start empty.
        """
        headers = headers or {}
        merged = {
            name: value for name, value in headers.items()
            if name.lower() != CSP_HEADER.lower()
        }
        header_value = self.generate_csp_header(config)
        if as_list is None:
            as_list = any(isinstance(value, list) for value in headers.values())
        merged[CSP_HEADER] = [header_value] if as_list else header_value
        return merged


csp_manager = CSPManager()

__all__ = [
    "CSP_HEADER",
    "CSP_POLICY",
    "CSPConfig",
    "CSPManager",
    "csp_manager",
    "to_websocket_url",
]
