"""Chained URL resolution across the pages of a login flow.

Each page of an SSO redirect chain posts its form to an action that is
relative to the page's own address. The caller never sees those addresses,
so the resolver remembers the last URL it produced and resolves the next
reference against it.
"""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit

from ccportal.exceptions import InvalidURLError
from ccportal.logging import get_logger

LOG = get_logger(__name__)

# Characters no URL reference may carry, even after whitespace stripping.
_FORBIDDEN = frozenset("\x00\r\n\t")


def _check_reference(reference: str) -> None:
    if any(ch in _FORBIDDEN for ch in reference):
        raise InvalidURLError(f"URL reference contains control characters: {reference!r}")
    try:
        urlsplit(reference).port  # noqa: B018 - port is validated lazily
    except ValueError as exc:
        raise InvalidURLError(f"Malformed URL reference {reference!r}: {exc}") from exc


class ChainingResolver:
    """Resolve references against a moving base URL.

    After ``resolve(ref)`` returns ``url``, ``url`` becomes the base for the
    next call. Create one resolver per login sequence.

    Args:
        base: Absolute starting URL, typically the portal root.
    """

    def __init__(self, base: str) -> None:
        _check_reference(base)
        if not urlsplit(base).scheme:
            raise InvalidURLError(f"Resolver base must be absolute, got {base!r}")
        self.base = base

    def resolve(self, reference: str) -> str:
        """Resolve *reference* against the current base and advance the base.

        Args:
            reference: Absolute or relative URL reference.

        Returns:
            The absolute URL, which is also the new base.

        Raises:
            InvalidURLError: If the reference cannot be parsed.
        """
        _check_reference(reference)
        resolved = urljoin(self.base, reference)
        LOG.debug("url_resolved", reference=reference, base=self.base, resolved=resolved)
        self.base = resolved
        return resolved


def resolve_api(root: str, path: str) -> str:
    """Resolve an API path against the fixed portal root, without chaining."""
    _check_reference(path)
    return urljoin(root, path)
