"""Shared helpers for unit tests: response builders and a transport double."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any
from unittest.mock import MagicMock

import requests

PORTAL = "https://portal.example.com/"


def make_response(
    status: int = 200,
    body: str | bytes = b"",
    *,
    headers: dict[str, str] | None = None,
    url: str = PORTAL,
    method: str = "GET",
) -> requests.Response:
    """Build a real ``requests.Response`` without touching the network."""
    response = requests.Response()
    response.status_code = status
    response._content = body.encode() if isinstance(body, str) else body
    response._content_consumed = True
    response.encoding = "utf-8"
    response.url = url
    response.headers.update(headers or {})
    response.request = requests.Request(method, url).prepare()
    return response


def form_page(action: str, fields: dict[str, str] | None = None) -> str:
    """HTML page with one auto-submitting form and hidden inputs."""
    inputs = "".join(
        f'<input type="hidden" name="{name}" value="{value}"/>'
        for name, value in (fields or {}).items()
    )
    return (
        "<html><body onload='document.forms[0].submit()'>"
        f'<form method="post" action="{action}">{inputs}'
        '<noscript><input type="submit" value="Continue"/></noscript>'
        "</form></body></html>"
    )


def fake_transport(
    responses: Iterable[requests.Response] | Callable[..., requests.Response],
) -> MagicMock:
    """A ``requests.Session`` double whose ``request()`` replays *responses*."""
    http = MagicMock(spec=requests.Session)
    if callable(responses):
        http.request.side_effect = responses
    else:
        http.request.side_effect = list(responses)
    return http


def calls_of(http: MagicMock) -> list[tuple[str, str, dict[str, Any]]]:
    """(method, url, kwargs) for every request issued on a fake transport."""
    return [(c.args[0], c.args[1], c.kwargs) for c in http.request.call_args_list]
