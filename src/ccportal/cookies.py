"""File-backed cookie persistence shared by every portal request.

The jar lives in a libwww-perl (LWP) format file so that an authenticated
session survives process restarts. Session cookies and expired cookies are
written and read back as well: the portal decides whether they are still
good, not the client.
"""

from __future__ import annotations

import urllib.request
from http.cookiejar import DefaultCookiePolicy, LoadError, LWPCookieJar
from pathlib import Path

from ccportal.exceptions import CookieStoreError
from ccportal.logging import get_logger

LOG = get_logger(__name__)


class CookieStore:
    """Persistent cookie jar bound to a single file.

    Args:
        path: Location of the cookie file. It does not need to exist yet.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.policy = DefaultCookiePolicy()
        self._jar = LWPCookieJar(str(self.path), policy=self.policy)

    @property
    def jar(self) -> LWPCookieJar:
        """The underlying jar, suitable for ``requests.Session.cookies``."""
        return self._jar

    def __len__(self) -> int:
        return len(self._jar)

    def load(self) -> CookieStore:
        """Read cookies from disk. A missing file leaves the store empty.

        Returns:
            This store, for chaining.

        Raises:
            CookieStoreError: If the file exists but cannot be read.
        """
        try:
            self._jar.load(ignore_discard=True, ignore_expires=True)
        except FileNotFoundError:
            LOG.info("cookie_file_missing", path=str(self.path))
            return self
        except (LoadError, OSError) as exc:
            raise CookieStoreError(f"Cannot read cookie file {self.path}: {exc}") from exc
        LOG.debug("cookies_loaded", path=str(self.path), count=len(self._jar))
        return self

    def save(self) -> None:
        """Write every cookie to disk, replacing the previous file.

        Raises:
            CookieStoreError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._jar.save(ignore_discard=True, ignore_expires=True)
        except OSError as exc:
            raise CookieStoreError(f"Cannot write cookie file {self.path}: {exc}") from exc
        LOG.info("cookies_saved", path=str(self.path), count=len(self._jar))

    def clear(self) -> None:
        """Drop all cookies from memory. The file is untouched until ``save()``."""
        self._jar.clear()

    def lookup(self, name: str, url: str) -> str | None:
        """Return the value of cookie *name* as it would be sent to *url*.

        Domain and path matching follow the store's cookie policy, so a cookie
        scoped to another host is never returned. Expired cookies are skipped,
        and so are secure cookies when *url* is not HTTPS.

        Args:
            name: Cookie name (exact match).
            url: Absolute request URL.

        Returns:
            The cookie value, or None if no matching cookie applies.
        """
        request = urllib.request.Request(url)
        value = None
        for cookie in self._jar:
            if cookie.name != name or cookie.is_expired():
                continue
            if cookie.secure and request.type != "https":
                continue
            if not self.policy.domain_return_ok(cookie.domain, request):
                continue
            if self.policy.path_return_ok(cookie.path, request):
                value = cookie.value
        return value
