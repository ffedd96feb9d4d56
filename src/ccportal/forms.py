"""Single-form extraction from login pages.

Every page in the SSO chain carries exactly one auto-submitting form whose
hidden inputs must be replayed to the form's action. Anything else on the
page is noise.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

import requests
from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from ccportal.exceptions import AmbiguousFormError, FormParseError
from ccportal.logging import get_logger

LOG = get_logger(__name__)


@dataclass(frozen=True)
class Form:
    """The one form found on a page.

    Attributes:
        action: Raw ``action`` attribute, possibly relative or empty.
        fields: Hidden input names mapped to their values.
        found: Whether a ``<form>`` element was seen at all.
    """

    action: str = ""
    fields: dict[str, str] = field(default_factory=dict)
    found: bool = False


def _attr(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _visit(tag: Tag, form: Form) -> Form:
    """Fold one element into the partial result and return the new result."""
    if tag.name == "form":
        if form.found:
            raise AmbiguousFormError("found more than one <form>")
        return dataclasses.replace(form, action=_attr(tag, "action"), found=True)
    if tag.name == "input" and _attr(tag, "type").lower() == "hidden":
        fields = dict(form.fields)
        fields[_attr(tag, "name")] = _attr(tag, "value")
        return dataclasses.replace(form, fields=fields)
    return form


def extract_form(body: str | bytes) -> Form:
    """Extract the form action and hidden fields from an HTML document.

    Elements are visited depth-first in document order. Hidden inputs are
    collected wherever they appear; a repeated name keeps the last value.

    Args:
        body: HTML document.

    Returns:
        The extracted form, or an empty ``Form`` when the page has none.

    Raises:
        FormParseError: If the body cannot be parsed as HTML.
        AmbiguousFormError: If the page contains more than one form.
    """
    if not isinstance(body, (str, bytes)):
        raise FormParseError(f"Expected an HTML document, got {type(body).__name__}")
    try:
        soup = BeautifulSoup(body, "html.parser")
    except (ParserRejectedMarkup, AssertionError) as exc:
        raise FormParseError(f"Could not parse HTML: {exc}") from exc

    form = Form()
    for element in soup.descendants:
        if isinstance(element, Tag):
            form = _visit(element, form)

    LOG.debug("form_extracted", found=form.found, action=form.action, fields=sorted(form.fields))
    return form


def extract_response_form(response: requests.Response) -> Form:
    """Extract the form from a response body, releasing the response on every path."""
    try:
        return extract_form(response.content)
    finally:
        response.close()
