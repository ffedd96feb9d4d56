"""The one place where errors stop the run.

Library code raises; commands open the portal through ``portal_client()``
which reports any failure and exits with status 1.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from ccportal import console as cc_console
from ccportal.client import PortalClient
from ccportal.config import get_settings
from ccportal.exceptions import PortalError
from ccportal.logging import get_logger

LOG = get_logger(__name__)


@contextmanager
def abort_on_error() -> Iterator[None]:
    """Report any portal, file or configuration error and exit with status 1."""
    try:
        yield
    except PortalError as exc:
        LOG.debug("command_failed", error=str(exc), exc_type=type(exc).__name__)
        cc_console.error(str(exc))
        raise typer.Exit(1) from exc
    except (OSError, ValueError) as exc:
        LOG.debug("command_failed", error=str(exc), exc_type=type(exc).__name__)
        cc_console.error(str(exc))
        raise typer.Exit(1) from exc


@contextmanager
def portal_client(*, save_cookies: bool = True) -> Iterator[PortalClient]:
    """Open an authenticated client from settings for the duration of a command.

    Cookies are saved after the command body succeeds so the next run can
    reuse the session.
    """
    with abort_on_error():
        client = PortalClient.from_settings(get_settings())
        try:
            yield client
            if save_cookies:
                client.save_cookies()
        finally:
            client.close()
