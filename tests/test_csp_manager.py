"""Tests for Content Security Policy generation."""
import base64
import re
from itertools import product

import pytest

from janitor.security.csp_manager import (
    CSP_HEADER,
    CSP_POLICY,
    CSPConfig,
    CSPManager,
    to_websocket_url,
)


def _directive(header, name):
    match = re.search(rf"(?:^|; ){re.escape(name)} ([^;]+)", header)
    assert match, f"{name} missing from {header}"
    return match.group(1).split(" ")


class TestGenerateNonce:
    """Tests for nonce generation."""

    def test_nonce_is_base64_of_16_bytes(self, csp_manager):
        nonce = csp_manager.generate_nonce()
        assert len(nonce) == 24
        assert re.fullmatch(r"[A-Za-z0-9+/=]+", nonce)
        assert len(base64.b64decode(nonce)) == 16

    def test_nonces_are_unique(self, csp_manager):
        nonces = {csp_manager.generate_nonce() for _ in range(200)}
        assert len(nonces) == 200


class TestGenerateHeader:
    """Tests for header generation."""

    def test_production_policy(self, csp_manager):
        header = csp_manager.generate_csp_header(CSPConfig(is_development=False))
        assert header == (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data: https:; "
            "connect-src 'self'; "
            "font-src 'self'; "
            "object-src 'none'; "
            "base-uri 'self'; "
            "form-action 'self'; "
            "frame-ancestors 'none'"
        )

    def test_no_localhost_in_production(self, csp_manager):
        header = csp_manager.generate_csp_header(CSPConfig())
        assert "localhost" not in header

    def test_nonce_added_to_script_src(self, csp_manager):
        header = csp_manager.generate_csp_header(CSPConfig(nonce="test-nonce-123"))
        script_src = _directive(header, "script-src")
        assert script_src == ["'self'", "'nonce-test-nonce-123'"]

    def test_style_src_keeps_unsafe_inline(self, csp_manager):
        header = csp_manager.generate_csp_header(CSPConfig(nonce="n"))
        assert "'unsafe-inline'" in _directive(header, "style-src")

    def test_development_adds_localhost(self, csp_manager):
        header = csp_manager.generate_csp_header(CSPConfig(is_development=True))
        connect_src = _directive(header, "connect-src")
        assert connect_src == ["'self'", "http://localhost:*", "ws://localhost:*"]

    def test_dev_server_url_and_websocket_variant(self, csp_manager):
        config = CSPConfig(is_development=True, nonce="abc", dev_server_url="http://localhost:5173")
        header = csp_manager.generate_csp_header(config)
        connect_src = _directive(header, "connect-src")
        assert "http://localhost:5173" in connect_src
        assert "ws://localhost:5173" in connect_src
        assert "'nonce-abc'" in _directive(header, "script-src")

    def test_https_dev_server_maps_to_wss(self, csp_manager):
        config = CSPConfig(is_development=True, dev_server_url="https://dev.local:8443")
        connect_src = _directive(csp_manager.generate_csp_header(config), "connect-src")
        assert "https://dev.local:8443" in connect_src
        assert "wss://dev.local:8443" in connect_src

    def test_dev_server_url_ignored_outside_development(self, csp_manager):
        config = CSPConfig(is_development=False, dev_server_url="http://localhost:5173")
        assert "localhost" not in csp_manager.generate_csp_header(config)

    def test_locked_directives(self, csp_manager):
        header = csp_manager.generate_csp_header(CSPConfig(is_development=True, nonce="x"))
        assert _directive(header, "object-src") == ["'none'"]
        assert _directive(header, "frame-ancestors") == ["'none'"]

    def test_locked_directives_survive_custom_policy(self):
        manager = CSPManager({
            "default-src": ["*"],
            "object-src": ["*"],
            "frame-ancestors": ["https://embed.example"],
        })
        header = manager.generate_csp_header(CSPConfig())
        assert _directive(header, "object-src") == ["'none'"]
        assert _directive(header, "frame-ancestors") == ["'none'"]

    def test_unsafe_inline_stripped_from_custom_script_src(self):
        manager = CSPManager({"script-src": ["'self'", "'unsafe-inline'"]})
        header = manager.generate_csp_header(CSPConfig(nonce="n"))
        assert "'unsafe-inline'" not in _directive(header, "script-src")

    def test_script_src_never_unsafe_inline(self, csp_manager):
        for is_dev, nonce, url in product(
            [True, False], [None, "", "abc", "YWJj+/=="], [None, "http://localhost:3000"]
        ):
            header = csp_manager.generate_csp_header(
                CSPConfig(is_development=is_dev, nonce=nonce, dev_server_url=url)
            )
            assert "'unsafe-inline'" not in _directive(header, "script-src")

    @pytest.mark.parametrize("nonce", ["abc' 'unsafe-inline", "a b", "x;script-src *", "'"])
    def test_nonce_cannot_inject_tokens(self, nonce):
        with pytest.raises(ValueError):
            CSPConfig(nonce=nonce)

    @pytest.mark.parametrize("url", [
        "http://localhost:5173 'unsafe-inline'",
        "http://a;script-src *",
        "javascript:alert(1)",
        "localhost:5173",
    ])
    def test_dev_server_url_cannot_inject_tokens(self, url):
        with pytest.raises(ValueError):
            CSPConfig(is_development=True, dev_server_url=url)


class TestPolicyImmutability:
    """Tests that the base table is never mutated."""

    def test_base_table_unchanged_after_calls(self, csp_manager):
        snapshot = {name: tuple(tokens) for name, tokens in CSP_POLICY.items()}
        for i in range(50):
            csp_manager.generate_csp_header(CSPConfig(
                is_development=bool(i % 2),
                dev_server_url=f"http://localhost:{3000 + i}",
                nonce=csp_manager.generate_nonce(),
            ))
            csp_manager.apply_to_response({"X-Test": "1"}, CSPConfig(nonce=str(i)))
        assert dict(CSP_POLICY) == snapshot
        assert dict(csp_manager.policy) == snapshot

    def test_base_table_is_read_only(self):
        with pytest.raises(TypeError):
            CSP_POLICY["script-src"] = ("'unsafe-inline'",)
        assert isinstance(CSP_POLICY["script-src"], tuple)

    def test_build_directives_returns_copies(self, csp_manager):
        directives = csp_manager.build_directives(CSPConfig())
        directives["script-src"].append("'unsafe-eval'")
        assert "'unsafe-eval'" not in csp_manager.generate_csp_header(CSPConfig())

    def test_custom_policy_frozen_on_construction(self):
        source = {"script-src": ["'self'"]}
        manager = CSPManager(source)
        source["script-src"].append("https://cdn.example")
        assert "cdn.example" not in manager.generate_csp_header(CSPConfig())

    def test_required_directives_present(self):
        for name in (
            "default-src", "script-src", "style-src", "img-src", "connect-src",
            "font-src", "object-src", "base-uri", "form-action", "frame-ancestors",
        ):
            assert name in CSP_POLICY


class TestApplyToResponse:
    """Tests for merging the header into a response header map."""

    def test_adds_header(self, csp_manager):
        headers = csp_manager.apply_to_response({}, CSPConfig())
        assert headers[CSP_HEADER] == csp_manager.generate_csp_header(CSPConfig())

    def test_preserves_existing_headers(self, csp_manager):
        existing = {"Content-Type": "text/html", "X-Custom-Header": "custom-value"}
        headers = csp_manager.apply_to_response(existing, CSPConfig())
        assert headers["Content-Type"] == "text/html"
        assert headers["X-Custom-Header"] == "custom-value"
        assert CSP_HEADER in headers
        assert CSP_HEADER not in existing

    def test_list_valued_headers(self, csp_manager):
        existing = {"Content-Type": ["text/html"], "X-Custom-Header": ["custom-value"]}
        config = CSPConfig(is_development=True, nonce="test-nonce", dev_server_url="http://localhost:5173")
        headers = csp_manager.apply_to_response(existing, config)
        assert headers["Content-Type"] == ["text/html"]
        assert headers["X-Custom-Header"] == ["custom-value"]
        assert len(headers[CSP_HEADER]) == 1
        value = headers[CSP_HEADER][0]
        assert "'nonce-test-nonce'" in value
        assert "http://localhost:5173" in value
        assert "ws://localhost:5173" in value

    def test_replaces_existing_csp_case_insensitively(self, csp_manager):
        existing = {
            "content-security-policy": ["default-src *"],
            "Content-Security-Policy": ["script-src 'unsafe-inline'"],
        }
        headers = csp_manager.apply_to_response(existing, CSPConfig())
        csp_keys = [name for name in headers if name.lower() == "content-security-policy"]
        assert csp_keys == [CSP_HEADER]
        assert headers[CSP_HEADER] == [csp_manager.generate_csp_header(CSPConfig())]

    def test_empty_map_defaults_to_string(self, csp_manager):
        headers = csp_manager.apply_to_response({}, CSPConfig())
        assert isinstance(headers[CSP_HEADER], str)

    def test_explicit_list_shape_for_empty_map(self, csp_manager):
        headers = csp_manager.apply_to_response({}, CSPConfig(), as_list=True)
        assert headers[CSP_HEADER] == [csp_manager.generate_csp_header(CSPConfig())]

    def test_explicit_string_shape_overrides_lists(self, csp_manager):
        headers = csp_manager.apply_to_response({"Content-Type": ["text/html"]}, CSPConfig(), as_list=False)
        assert isinstance(headers[CSP_HEADER], str)
        assert headers["Content-Type"] == ["text/html"]

    def test_none_headers(self, csp_manager):
        headers = csp_manager.apply_to_response(None, CSPConfig())
        assert list(headers) == [CSP_HEADER]


class TestWebsocketUrl:
    """Tests for dev server websocket mapping."""

    @pytest.mark.parametrize("url,expected", [
        ("http://localhost:5173", "ws://localhost:5173"),
        ("https://localhost:5173", "wss://localhost:5173"),
        ("ws://localhost:5173", "ws://localhost:5173"),
    ])
    def test_mapping(self, url, expected):
        assert to_websocket_url(url) == expected
