"""ccportal - authenticated access to the Commerce Cloud portal.

Log in through the portal's SSO chain once, keep the cookies, script the
REST API.

This package provides:
- A chained URL resolver and single-form extractor for the SSO login pages
- A file-backed cookie store reused across runs
- Mutual TLS transport and XSRF-aware JSON request primitives
- Endpoint helpers for builds, deployments, passwords and properties

Example:
    >>> from ccportal import PortalClient, api
    >>> with PortalClient.from_settings(save_on_close=True) as client:
    ...     builds = api.get_all_builds(client)
"""

from ccportal import api
from ccportal.bootstrap import LoginState, SessionBootstrapper
from ccportal.client import PortalClient
from ccportal.config import PortalSettings, get_settings
from ccportal.cookies import CookieStore
from ccportal.exceptions import (
    AmbiguousFormError,
    CertificateError,
    CookieStoreError,
    DecodeError,
    FormParseError,
    InvalidURLError,
    LoginFailedError,
    PortalError,
    TransportError,
    UnexpectedStatusError,
)
from ccportal.forms import Form, extract_form
from ccportal.request import AuthenticatedRequester, read_json
from ccportal.resolver import ChainingResolver

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Client
    "PortalClient",
    "api",
    # Building blocks
    "ChainingResolver",
    "CookieStore",
    "Form",
    "extract_form",
    "SessionBootstrapper",
    "LoginState",
    "AuthenticatedRequester",
    "read_json",
    # Configuration
    "PortalSettings",
    "get_settings",
    # Exceptions
    "PortalError",
    "TransportError",
    "CertificateError",
    "InvalidURLError",
    "CookieStoreError",
    "FormParseError",
    "AmbiguousFormError",
    "UnexpectedStatusError",
    "DecodeError",
    "LoginFailedError",
]
