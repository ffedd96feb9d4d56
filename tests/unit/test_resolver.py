"""Tests for chained URL resolution."""

import pytest

from ccportal.exceptions import InvalidURLError
from ccportal.resolver import ChainingResolver, resolve_api

ROOT = "https://portal.example.com/"


class TestChainingResolver:
    """Each resolution is computed against the previous result."""

    def test_relative_reference_resolves_against_root(self):
        resolver = ChainingResolver(ROOT)
        assert resolver.resolve("login/start") == "https://portal.example.com/login/start"

    def test_resolved_url_becomes_new_base(self):
        resolver = ChainingResolver(ROOT)
        resolver.resolve("/saml2/idp/sso")
        assert resolver.base == "https://portal.example.com/saml2/idp/sso"

    def test_chain_follows_previous_result_not_root(self):
        resolver = ChainingResolver(ROOT)
        first = resolver.resolve("https://idp.example.net/auth/login")
        second = resolver.resolve("consent")
        third = resolver.resolve("../assert?x=1")
        assert first == "https://idp.example.net/auth/login"
        assert second == "https://idp.example.net/auth/consent"
        assert third == "https://idp.example.net/assert?x=1"

    def test_absolute_path_keeps_current_host(self):
        resolver = ChainingResolver(ROOT)
        resolver.resolve("https://idp.example.net/a/b")
        assert resolver.resolve("/c") == "https://idp.example.net/c"

    def test_empty_reference_stays_on_current_page(self):
        resolver = ChainingResolver(ROOT)
        resolver.resolve("https://idp.example.net/page?step=2")
        assert resolver.resolve("") == "https://idp.example.net/page?step=2"

    def test_independent_resolvers_do_not_share_state(self):
        one = ChainingResolver(ROOT)
        two = ChainingResolver(ROOT)
        one.resolve("https://idp.example.net/x")
        assert two.resolve("y") == "https://portal.example.com/y"

    @pytest.mark.parametrize(
        "reference",
        ["http://[::1/broken", "https://host:notaport/", "/path\nwith-newline"],
    )
    def test_malformed_reference_raises(self, reference):
        resolver = ChainingResolver(ROOT)
        with pytest.raises(InvalidURLError):
            resolver.resolve(reference)

    def test_malformed_reference_leaves_base_untouched(self):
        resolver = ChainingResolver(ROOT)
        with pytest.raises(InvalidURLError):
            resolver.resolve("http://[::1/broken")
        assert resolver.base == ROOT

    def test_relative_base_rejected(self):
        with pytest.raises(InvalidURLError, match="absolute"):
            ChainingResolver("portal/")


class TestResolveApi:
    def test_does_not_chain(self):
        first = resolve_api(ROOT, "/v2/subscriptions/abc/builds/")
        second = resolve_api(ROOT, "v1/other")
        assert first == "https://portal.example.com/v2/subscriptions/abc/builds/"
        assert second == "https://portal.example.com/v1/other"

    def test_keeps_query_string(self):
        url = resolve_api(ROOT, "/v2/x/?$top=20&$orderby=ts%20desc")
        assert url == "https://portal.example.com/v2/x/?$top=20&$orderby=ts%20desc"
