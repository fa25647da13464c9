"""napping: a small client library for RESTful APIs.

Example:
    ```python
    from pydantic import BaseModel

    import napping


    class Foo(BaseModel):
        bar: str


    class Spam(BaseModel):
        eggs: int


    req = napping.post("https://foo.com/bar", Foo(bar="baz"), result=Spam)
    if req.status == 200:
        print(req.result_value.eggs)
    ```
"""

from ._api import delete, get, head, options, patch, post, put, send
from ._config import Options, SessionConfig, resolve_config
from ._request import Request
from ._session import Session
from ._utils import (
    EncodingType,
    locate_socket,
    new_timeout,
    setup_logging,
)
from .models.errors import (
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
    "delete",
    "get",
    "head",
    "options",
    "patch",
    "post",
    "put",
    "send",
    "Options",
    "SessionConfig",
    "resolve_config",
    "Request",
    "Session",
    "EncodingType",
    "locate_socket",
    "new_timeout",
    "setup_logging",
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
