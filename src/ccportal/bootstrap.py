"""SSO login state machine.

The portal answers an unauthenticated request with a page carrying a login
header and an auto-submitting form. Logging in means replaying that form, and
the form on each following page, a fixed number of times: login page,
identity provider, assertion, and the hop back to the portal.

States::

    PROBING --(no login header)--> AUTHENTICATED
    PROBING --(login header)--> LOGIN_STEP(1) -> ... -> LOGIN_STEP(n) -> AUTHENTICATED

There is no error state; any failure raises out of ``run()``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import requests

from ccportal import console
from ccportal.config import LOGIN_REQUIRED_HEADER, LOGIN_STEPS
from ccportal.exceptions import LoginFailedError
from ccportal.forms import extract_response_form
from ccportal.logging import get_logger
from ccportal.request import dispatch
from ccportal.resolver import ChainingResolver

LOG = get_logger(__name__)


class LoginState(enum.Enum):
    PROBING = "probing"
    LOGIN_STEP = "login_step"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class LoginSubmission:
    """One form POST issued during the login chain."""

    step: int
    url: str
    fields: dict[str, str] = field(default_factory=dict)


class SessionBootstrapper:
    """Drive a session from unauthenticated to authenticated.

    Args:
        http: Transport with the cookie jar attached. Cookies set along the
            way land in that jar.
        root: Portal root URL. Probed first and used as the starting base
            for chained form actions.
        login_header: Response header whose presence means "log in first".
        steps: Number of chained form submissions.
        verify: Re-probe after the last step and fail if the login header
            is still present.
    """

    def __init__(
        self,
        http: requests.Session,
        root: str,
        *,
        login_header: str = LOGIN_REQUIRED_HEADER,
        steps: int = LOGIN_STEPS,
        verify: bool = False,
    ) -> None:
        if steps < 1:
            raise ValueError(f"steps must be positive, got {steps}")
        self.http = http
        self.root = root
        self.login_header = login_header
        self.steps = steps
        self.verify = verify
        self.state = LoginState.PROBING
        self.step = 0
        self.submissions: list[LoginSubmission] = []

    @property
    def logged_in(self) -> bool:
        """Whether ``run()`` went through the login chain."""
        return bool(self.submissions)

    def _probe(self) -> requests.Response:
        return dispatch(self.http, "GET", self.root)

    def _needs_login(self, response: requests.Response) -> bool:
        return bool(response.headers.get(self.login_header))

    def _submit(
        self, resolver: ChainingResolver, response: requests.Response
    ) -> requests.Response:
        form = extract_response_form(response)
        if not form.found:
            LOG.warning("login_page_without_form", step=self.step, base=resolver.base)
        url = resolver.resolve(form.action)
        self.submissions.append(LoginSubmission(step=self.step, url=url, fields=form.fields))
        LOG.info("login_step", step=self.step, url=url, fields=sorted(form.fields))
        return dispatch(self.http, "POST", url, data=form.fields)

    def run(self) -> LoginState:
        """Probe the portal and log in if it asks for it.

        Returns:
            ``LoginState.AUTHENTICATED``.

        Raises:
            TransportError: Network, TLS, URL or HTML parsing failure.
            UnexpectedStatusError: Any probe or login response outside 2xx.
            AmbiguousFormError: A login page carried more than one form.
            LoginFailedError: ``verify`` is set and the portal still asks
                for a login after the last step.
        """
        self.state = LoginState.PROBING
        response = self._probe()

        if not self._needs_login(response):
            response.close()
            LOG.debug("session_still_valid", root=self.root)
            self.state = LoginState.AUTHENTICATED
            return self.state

        console.info("Session expired, logging in...")
        resolver = ChainingResolver(self.root)
        for step in range(1, self.steps + 1):
            self.state = LoginState.LOGIN_STEP
            self.step = step
            response = self._submit(resolver, response)
        response.close()

        if self.verify:
            check = self._probe()
            still_required = self._needs_login(check)
            check.close()
            if still_required:
                raise LoginFailedError(
                    f"Portal still requires login after {self.steps} form submissions"
                )

        self.state = LoginState.AUTHENTICATED
        LOG.info("login_complete", steps=self.steps)
        return self.state
