from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .._request import Request


class NappingError(Exception):
    """Base class for every error raised by napping."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidURLError(NappingError):
    def __init__(self, url: str, reason: str = ""):
        self.url = url
        message = f"Invalid URL {url!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TransportError(NappingError):
    """The request could not be delivered or its response could not be read.

    Covers refused connections, DNS failures, unsupported schemes and
    protocol errors. The original httpx exception is available as
    ``__cause__``.
    """


class RequestTimeoutError(TransportError):
    pass


class ConfigurationError(NappingError, ValueError):
    """A setting read from the environment could not be parsed."""


class InvalidEncodingError(NappingError, ValueError):
    def __init__(self, encoding: object):
        self.encoding = encoding
        super().__init__(
            f"Invalid encoding {encoding!r}. Supported encodings are 'json' and 'xml'."
        )


class EncodeError(NappingError):
    pass


class DecodeError(NappingError):
    """The response body could not be decoded into the destination type.

    The executed request, with status and raw body populated, is kept on
    ``request`` so callers can still inspect what the server sent.
    """

    def __init__(self, message: str, request: Optional["Request"] = None):
        self.request = request
        super().__init__(message)


class RawPayloadTypeError(NappingError, TypeError):
    def __init__(self, payload: object):
        super().__init__(
            "Payload must be bytes or bytearray when raw_payload is set, "
            f"got {type(payload).__name__}"
        )


class UnsafeBasicAuthError(NappingError):
    def __init__(
        self,
        message="Unsafe to use HTTP Basic authentication without HTTPS. Pass unsafe_basic_auth=True to allow it.",
    ):
        super().__init__(message)


class UnexpectedStatusError(NappingError):
    """Raised when ``expected_status`` is set and the server returned another code.

    Result or error values are decoded before this is raised, so
    ``request.result_value`` / ``request.error_value`` are usable.
    """

    def __init__(self, expected: int, actual: int, request: "Request"):
        self.expected = expected
        self.status_code = actual
        self.request = request
        super().__init__(f"Expected status {expected} but server returned {actual}")


class SocketNotFoundError(NappingError, FileNotFoundError):
    def __init__(self, raw_path: str):
        self.raw_path = raw_path
        super().__init__(f"No Unix domain socket found in {raw_path}")


class RequestAlreadySentError(NappingError, RuntimeError):
    def __init__(self, method: str, url: str):
        super().__init__(
            f"{method} {url} has already been sent. Build a new Request to send it again."
        )
