from ._encoding import (
    Encoding,
    EncodingType,
    JsonEncoding,
    XmlEncoding,
    get_encoding,
    parse_encoding,
)
from ._errors import handle_transport_errors
from ._logs import setup_logging
from ._ssl_context import get_httpx_client_kwargs, new_timeout
from ._unix_socket import (
    is_unix_socket,
    is_unix_url,
    locate_socket,
    resolve_unix_url,
    unix_url_credentials,
)

__all__ = [
    "Encoding",
    "EncodingType",
    "JsonEncoding",
    "XmlEncoding",
    "get_encoding",
    "parse_encoding",
    "handle_transport_errors",
    "setup_logging",
    "get_httpx_client_kwargs",
    "new_timeout",
    "is_unix_socket",
    "is_unix_url",
    "locate_socket",
    "resolve_unix_url",
    "unix_url_credentials",
]
