"""Tests for the file-backed cookie store."""

from pathlib import Path

import pytest
from requests.cookies import create_cookie

from ccportal.cookies import CookieStore
from ccportal.exceptions import CookieStoreError

URL = "https://portal.example.com/v2/subscriptions/abc/builds/"


@pytest.fixture
def store(tmp_path: Path) -> CookieStore:
    return CookieStore(tmp_path / "cookies.txt")


class TestLoadAndSave:
    """Persistence across process restarts."""

    def test_missing_file_starts_empty(self, store):
        assert not store.path.exists()
        store.load()
        assert len(store) == 0

    def test_load_returns_store(self, store):
        assert store.load() is store

    def test_session_cookies_survive_restart(self, store):
        store.jar.set_cookie(create_cookie("JSESSIONID", "abc123", domain="portal.example.com"))
        store.save()

        reloaded = CookieStore(store.path).load()
        assert len(reloaded) == 1
        assert reloaded.lookup("JSESSIONID", URL) == "abc123"

    def test_save_creates_parent_directory(self, tmp_path):
        store = CookieStore(tmp_path / "nested" / "dir" / "cookies.txt")
        store.jar.set_cookie(create_cookie("a", "1", domain="portal.example.com"))
        store.save()
        assert store.path.exists()

    def test_file_only_written_on_save(self, store):
        store.jar.set_cookie(create_cookie("a", "1", domain="portal.example.com"))
        assert not store.path.exists()

    def test_clear_does_not_touch_file(self, store):
        store.jar.set_cookie(create_cookie("a", "1", domain="portal.example.com"))
        store.save()
        store.clear()
        assert len(store) == 0
        assert len(CookieStore(store.path).load()) == 1

    def test_corrupt_file_raises(self, store):
        store.path.write_text("this is not a cookie file\n")
        with pytest.raises(CookieStoreError, match="Cannot read cookie file"):
            store.load()

    def test_unwritable_location_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = CookieStore(blocker / "cookies.txt")
        with pytest.raises(CookieStoreError, match="Cannot write cookie file"):
            store.save()


class TestLookup:
    """Cookie lookup honours domain, path, secure flag and expiry."""

    def test_matching_cookie_returned(self, store):
        store.jar.set_cookie(create_cookie("XSRF-TOKEN", "tok123", domain="portal.example.com"))
        assert store.lookup("XSRF-TOKEN", URL) == "tok123"

    def test_missing_cookie_returns_none(self, store):
        assert store.lookup("XSRF-TOKEN", URL) is None

    def test_other_host_not_returned(self, store):
        store.jar.set_cookie(create_cookie("XSRF-TOKEN", "tok123", domain="idp.example.net"))
        assert store.lookup("XSRF-TOKEN", URL) is None

    def test_parent_domain_cookie_returned(self, store):
        store.jar.set_cookie(create_cookie("XSRF-TOKEN", "tok123", domain=".example.com"))
        assert store.lookup("XSRF-TOKEN", URL) == "tok123"

    def test_path_scoped_cookie(self, store):
        store.jar.set_cookie(
            create_cookie("XSRF-TOKEN", "tok123", domain="portal.example.com", path="/v1")
        )
        assert store.lookup("XSRF-TOKEN", URL) is None
        assert store.lookup("XSRF-TOKEN", "https://portal.example.com/v1/x") == "tok123"

    def test_secure_cookie_not_returned_for_http(self, store):
        store.jar.set_cookie(
            create_cookie("XSRF-TOKEN", "tok123", domain="portal.example.com", secure=True)
        )
        assert store.lookup("XSRF-TOKEN", URL) == "tok123"
        assert store.lookup("XSRF-TOKEN", "http://portal.example.com/") is None

    def test_expired_cookie_not_returned(self, store):
        store.jar.set_cookie(
            create_cookie("XSRF-TOKEN", "old", domain="portal.example.com", expires=1)
        )
        assert store.lookup("XSRF-TOKEN", URL) is None

    def test_name_match_is_exact(self, store):
        store.jar.set_cookie(create_cookie("xsrf-token", "lower", domain="portal.example.com"))
        assert store.lookup("XSRF-TOKEN", URL) is None
