"""Authenticated request primitives.

Every call either returns a 2xx response or raises. Error bodies from the
portal are opaque and are the only clue to what went wrong, so they are
written to the diagnostic stream before the error propagates.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError

from ccportal import console
from ccportal.cookies import CookieStore
from ccportal.exceptions import DecodeError, TransportError, UnexpectedStatusError
from ccportal.logging import get_logger

LOG = get_logger(__name__)

T = TypeVar("T")

XSRF_COOKIE = "XSRF-TOKEN"
XSRF_HEADER = "x-xsrf-token"
JSON_CONTENT_TYPE = "application/json"

# Only state-changing calls echo the XSRF token; reads never carry it.
MUTATION_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def ensure_success(
    response: requests.Response,
    method: str | None = None,
    url: str | None = None,
) -> requests.Response:
    """Pass a 2xx response through; fail on anything else.

    Args:
        response: Response to check.
        method: Method label for the error message. Defaults to the
            request's own method.
        url: Requested URL for the error message. Defaults to the
            response URL.

    Returns:
        The same response.

    Raises:
        UnexpectedStatusError: If the status is outside [200, 299]. The body
            has already been dumped and the response closed.
    """
    if 200 <= response.status_code < 300:
        return response

    label = method or (response.request.method if response.request is not None else "") or "?"
    target = url or response.url
    try:
        body = response.text
    finally:
        response.close()
    LOG.error("unexpected_status", method=label, url=target, status=response.status_code)
    console.dump_body(body)
    raise UnexpectedStatusError(label, target, response.status_code, body)


def dispatch(http: requests.Session, method: str, url: str, **kwargs: Any) -> requests.Response:
    """Send one request over *http* and enforce the 2xx contract.

    Raises:
        TransportError: If the request could not be completed.
        UnexpectedStatusError: If the portal answered with a non-2xx status.
    """
    LOG.debug("request", method=method, url=url)
    try:
        response = http.request(method, url, **kwargs)
    except requests.RequestException as exc:
        raise TransportError(f"{method} {url}: {exc}") from exc
    return ensure_success(response, method, url)


def _encode(payload: Any) -> str:
    if isinstance(payload, BaseModel):
        return payload.model_dump_json(by_alias=True)
    return json.dumps(payload)


class AuthenticatedRequester:
    """GET / POST / PUT with JSON bodies and XSRF token echo on POST and PUT.

    Args:
        http: Transport carrying the TLS identity and the cookie jar.
        cookies: Store consulted for the ``XSRF-TOKEN`` cookie.
    """

    def __init__(self, http: requests.Session, cookies: CookieStore) -> None:
        self.http = http
        self.cookies = cookies

    def _headers(self, method: str, url: str) -> dict[str, str]:
        headers: dict[str, str] = {}
        if method not in MUTATION_METHODS:
            return headers
        headers["content-type"] = JSON_CONTENT_TYPE
        token = self.cookies.lookup(XSRF_COOKIE, url)
        if token is not None:
            headers[XSRF_HEADER] = token
        return headers

    def get(self, url: str) -> requests.Response:
        """GET *url* and return the 2xx response."""
        return dispatch(self.http, "GET", url, headers=self._headers("GET", url))

    def post_json(self, url: str, payload: Any) -> requests.Response:
        """POST *payload* as JSON to *url* and return the 2xx response."""
        return dispatch(
            self.http,
            "POST",
            url,
            data=_encode(payload),
            headers=self._headers("POST", url),
        )

    def put_json(self, url: str, payload: Any) -> requests.Response:
        """PUT *payload* as JSON to *url* and return the 2xx response."""
        return dispatch(
            self.http,
            "PUT",
            url,
            data=_encode(payload),
            headers=self._headers("PUT", url),
        )


def read_json(response: requests.Response, shape: type[T] | Any) -> T:
    """Read the whole body and validate it into *shape*.

    Args:
        response: A successful response. It is closed before returning.
        shape: Any type pydantic can validate: a model, ``dict[str, Any]``,
            ``list[Model]`` and so on.

    Returns:
        The decoded value.

    Raises:
        DecodeError: If the body is not JSON or does not match *shape*. The
            raw body has already been dumped.
    """
    try:
        content = response.content
    finally:
        response.close()
    try:
        return TypeAdapter(shape).validate_json(content)
    except ValidationError as exc:
        body = content.decode("utf-8", errors="replace")
        LOG.error("json_decode_failed", url=response.url, errors=exc.error_count())
        console.error("Could not parse JSON!")
        console.info("API Response:")
        console.dump_body(body)
        raise DecodeError(f"Could not decode response from {response.url}: {exc}", body) from exc
