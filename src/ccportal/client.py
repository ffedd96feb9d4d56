"""Authenticated portal client.

Constructing a ``PortalClient`` loads the persisted cookies, sets up the
mutual TLS transport and runs the SSO bootstrap once. Afterwards the client
only hands out the authenticated request primitives.

Example::

    from ccportal.client import PortalClient

    with PortalClient.from_settings() as client:
        response = client.get("https://portal.commerce.ondemand.com/v2/...")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

import requests

from ccportal.bootstrap import LoginState, SessionBootstrapper
from ccportal.config import (
    DEFAULT_PORTAL_URL,
    LOGIN_REQUIRED_HEADER,
    LOGIN_STEPS,
    PortalSettings,
    get_settings,
)
from ccportal.cookies import CookieStore
from ccportal.logging import get_logger
from ccportal.request import AuthenticatedRequester, read_json
from ccportal.resolver import resolve_api
from ccportal.transport import build_transport

LOG = get_logger(__name__)

T = TypeVar("T")


class PortalClient:
    """One authenticated identity against one portal, for the life of the process.

    Args:
        subscription: Tenant code used in API paths.
        cert_file: PEM encoded client certificate.
        key_file: PEM encoded private key.
        cookie_file: Persisted cookie jar. Missing means "start empty".
        portal_url: Portal root URL.
        login_header: Response header signalling that login is required.
        login_steps: Number of chained login form submissions.
        verify_login: Re-probe after login and fail if still unauthenticated.
        save_on_close: Persist cookies in ``close()``.
    """

    def __init__(
        self,
        subscription: str,
        cert_file: Path | str,
        key_file: Path | str,
        cookie_file: Path | str,
        *,
        portal_url: str = DEFAULT_PORTAL_URL,
        login_header: str = LOGIN_REQUIRED_HEADER,
        login_steps: int = LOGIN_STEPS,
        verify_login: bool = False,
        save_on_close: bool = False,
    ) -> None:
        self.subscription = subscription
        self.portal_url = portal_url
        self.save_on_close = save_on_close
        self.cookies = CookieStore(cookie_file).load()
        self.http: requests.Session = build_transport(cert_file, key_file, self.cookies)
        try:
            self.bootstrapper = SessionBootstrapper(
                self.http,
                portal_url,
                login_header=login_header,
                steps=login_steps,
                verify=verify_login,
            )
            self.state: LoginState = self.bootstrapper.run()
        except BaseException:
            self.http.close()
            raise
        self.requester = AuthenticatedRequester(self.http, self.cookies)
        LOG.info(
            "portal_client_ready",
            portal=portal_url,
            subscription=subscription,
            logged_in=self.bootstrapper.logged_in,
        )

    @classmethod
    def from_settings(
        cls, settings: PortalSettings | None = None, **kwargs: Any
    ) -> PortalClient:
        """Build a client from ``CCPORTAL_*`` settings.

        Raises:
            ValueError: If the certificate or key path is not configured.
        """
        settings = settings or get_settings()
        cert_file, key_file = settings.require_identity()
        return cls(
            settings.subscription,
            cert_file,
            key_file,
            settings.cookie_path,
            portal_url=settings.portal_url,
            login_header=settings.login_header,
            login_steps=settings.login_steps,
            verify_login=settings.verify_login,
            **kwargs,
        )

    def url(self, path: str) -> str:
        """Absolute URL for an API path on this portal."""
        return resolve_api(self.portal_url, path)

    def get(self, url: str) -> requests.Response:
        return self.requester.get(url)

    def post_json(self, url: str, payload: Any) -> requests.Response:
        return self.requester.post_json(url, payload)

    def put_json(self, url: str, payload: Any) -> requests.Response:
        return self.requester.put_json(url, payload)

    def read_json(self, response: requests.Response, shape: type[T] | Any) -> T:
        return read_json(response, shape)

    def save_cookies(self) -> None:
        """Flush the cookie jar to disk so the next run can skip the login chain."""
        self.cookies.save()

    def close(self) -> None:
        """Optionally persist cookies, then release pooled connections."""
        try:
            if self.save_on_close:
                self.save_cookies()
        finally:
            self.http.close()

    def __enter__(self) -> PortalClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
