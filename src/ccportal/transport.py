"""Shared HTTP transport: one connection pool, one TLS identity, one cookie jar."""

from __future__ import annotations

import ssl
from pathlib import Path

import requests

from ccportal.cookies import CookieStore
from ccportal.exceptions import CertificateError
from ccportal.logging import get_logger

LOG = get_logger(__name__)


def check_identity(cert_file: Path | str, key_file: Path | str) -> None:
    """Parse the client certificate and key now instead of on first connect.

    Raises:
        CertificateError: If either file is missing or not valid PEM, or the
            key does not match the certificate.
    """
    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
    try:
        context.load_cert_chain(certfile=str(cert_file), keyfile=str(key_file))
    except (ssl.SSLError, OSError) as exc:
        raise CertificateError(
            f"Cannot load client certificate {cert_file} with key {key_file}: {exc}"
        ) from exc


def build_transport(
    cert_file: Path | str,
    key_file: Path | str,
    cookies: CookieStore,
) -> requests.Session:
    """Create the session every portal request goes through.

    Args:
        cert_file: PEM encoded client certificate.
        key_file: PEM encoded private key.
        cookies: Store whose jar receives and supplies all cookies.

    Returns:
        A ``requests.Session`` presenting the client certificate on every
        TLS handshake and reading and writing cookies through *cookies*.
    """
    check_identity(cert_file, key_file)
    http = requests.Session()
    http.cert = (str(cert_file), str(key_file))
    http.cookies = cookies.jar  # type: ignore[assignment]
    LOG.debug("transport_ready", cert=str(cert_file), cookie_file=str(cookies.path))
    return http
