from .errors import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    InvalidEncodingError,
    InvalidURLError,
    NappingError,
    RawPayloadTypeError,
    RequestAlreadySentError,
    RequestTimeoutError,
    SocketNotFoundError,
    TransportError,
    UnexpectedStatusError,
    UnsafeBasicAuthError,
)

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "InvalidEncodingError",
    "InvalidURLError",
    "NappingError",
    "RawPayloadTypeError",
    "RequestAlreadySentError",
    "RequestTimeoutError",
    "SocketNotFoundError",
    "TransportError",
    "UnexpectedStatusError",
    "UnsafeBasicAuthError",
]
