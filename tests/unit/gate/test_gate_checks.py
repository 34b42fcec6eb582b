"""Tests for the individual request gate checks."""

import pytest

from notevault.web.gate import (
    is_origin_allowed,
    is_protected_path,
    is_static_path,
    is_trusted_hostname,
    login_redirect_url,
)


class TestStaticPaths:
    @pytest.mark.parametrize("path", ["/_next/static/app.js", "/static/logo.svg", "/images/a.png", "/favicon.ico"])
    def test_static(self, path):
        assert is_static_path(path)

    @pytest.mark.parametrize("path", ["/", "/notes", "/api/notes", "/login"])
    def test_not_static(self, path):
        assert not is_static_path(path)


class TestProtectedPaths:
    """Tests for protected and public path classification."""

    @pytest.mark.parametrize("path", ["/notes", "/notes/abc", "/api/notes", "/api/notes/abc", "/settings", "/api/user/export"])
    def test_protected(self, path):
        assert is_protected_path(path)

    @pytest.mark.parametrize("path", ["/", "/login", "/register", "/api/auth/login", "/api/auth/csrf", "/health"])
    def test_public_or_unlisted(self, path):
        assert not is_protected_path(path)


class TestTrustedHostname:
    """Tests for hostname comparison against the Host header."""

    def test_same_host_ignores_port(self):
        assert is_trusted_hostname("notes.example", "notes.example:8443")

    def test_case_insensitive(self):
        assert is_trusted_hostname("Notes.Example", "notes.example")

    @pytest.mark.parametrize("hostname", ["localhost", "127.0.0.1", "127.10.20.30"])
    def test_loopback(self, hostname):
        assert is_trusted_hostname(hostname, "notes.example")

    def test_other_host(self):
        assert not is_trusted_hostname("evil.example", "notes.example")

    def test_missing_hostname(self):
        assert not is_trusted_hostname(None, "notes.example")


class TestOriginCheck:
    """Tests for Origin/Referer validation of API requests."""

    def test_foreign_origin_rejected(self):
        assert not is_origin_allowed("/api/notes", "https://evil.example", None, "notes.example")

    def test_own_origin_allowed(self):
        assert is_origin_allowed("/api/notes", "https://notes.example", None, "notes.example")

    def test_origin_takes_precedence_over_referer(self):
        assert not is_origin_allowed("/api/notes", "https://evil.example", "https://notes.example/notes", "notes.example")

    def test_foreign_referer_rejected(self):
        assert not is_origin_allowed("/api/notes", None, "https://evil.example/page", "notes.example")

    def test_own_referer_allowed(self):
        assert is_origin_allowed("/api/notes", None, "https://notes.example/notes", "notes.example")

    def test_unparseable_referer_rejected(self):
        assert not is_origin_allowed("/api/notes", None, "not a url", "notes.example")

    def test_referer_ignored_on_auth_bootstrap(self):
        assert is_origin_allowed("/api/auth/login", None, "https://evil.example/", "notes.example")

    def test_no_headers_allowed(self):
        assert is_origin_allowed("/api/notes", None, None, "notes.example")

    def test_null_origin_rejected(self):
        assert not is_origin_allowed("/api/notes", "null", None, "notes.example")


def test_login_redirect_url_encodes_path():
    assert login_redirect_url("/notes/abc") == "/login?redirect=%2Fnotes%2Fabc"
