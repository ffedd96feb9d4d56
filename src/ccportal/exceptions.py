"""Custom exceptions for ccportal package."""


class PortalError(Exception):
    """Base exception class for all ccportal errors."""


class TransportError(PortalError):
    """Raised when a request cannot be issued or its input is malformed."""


class CertificateError(TransportError):
    """Raised when the client certificate or private key cannot be loaded."""


class InvalidURLError(TransportError):
    """Raised when a URL reference cannot be parsed."""


class CookieStoreError(TransportError):
    """Raised when the persisted cookie file exists but cannot be read or written."""


class FormParseError(TransportError):
    """Raised when a response body is not parseable as HTML."""


class AmbiguousFormError(PortalError):
    """Raised when a page contains more than one <form> element."""


class LoginFailedError(PortalError):
    """Raised when login verification still reports an unauthenticated session."""


class UnexpectedStatusError(PortalError):
    """A response came back with a status outside the 2xx range.

    Attributes:
        method: HTTP method of the failed request.
        url: Target URL of the failed request.
        status_code: Status code returned by the portal.
        body: Full response body, kept for troubleshooting.
    """

    def __init__(self, method: str, url: str, status_code: int, body: str = "") -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(f"{method} {url}: Expected HTTP 2XX status, got {status_code}")


class DecodeError(PortalError):
    """A response body is not valid JSON or does not match the expected shape.

    Attributes:
        body: Raw response body that failed to decode.
    """

    def __init__(self, message: str, body: str = "") -> None:
        self.body = body
        super().__init__(message)
