from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from httpx import Response

from ._config import Options
from ._utils._encoding import Encoding


@dataclass
class Request:
    """An HTTP request to execute, and the server's response once executed.

    The same object describes the outgoing call (method, URL, params,
    payload, destination types, per-call options) and, after
    ``Session.send``, holds the status, raw body and decoded values.

    ``result`` and ``error`` are destination *types*: on success (status
    < 300) a non-empty body is decoded into ``result``; on failure (status
    >= 300) into ``error``.

    A request can be sent once. Sending it again raises
    ``RequestAlreadySentError``.
    """

    method: str
    url: str
    params: Optional[dict[str, str]] = None
    payload: Any = None
    raw_payload: bool = False
    result: Any = None
    error: Any = None
    options: Options = field(default_factory=Options)

    timestamp: Optional[datetime] = field(default=None, init=False)
    status: int = field(default=0, init=False)
    raw_bytes: bytes = field(default=b"", init=False, repr=False)
    http_response: Optional[Response] = field(default=None, init=False, repr=False)
    result_value: Any = field(default=None, init=False)
    error_value: Any = field(default=None, init=False)
    _encoding: Optional[Encoding] = field(default=None, init=False, repr=False)

    @property
    def sent(self) -> bool:
        return self.timestamp is not None

    @property
    def raw_text(self) -> str:
        """Body of the server's response as stripped text."""
        return self.raw_bytes.decode("utf-8", errors="replace").strip()

    @property
    def ok(self) -> bool:
        return self.sent and self.status < 300

    def unmarshal(self, target: Any) -> Any:
        """Decode the response body into ``target`` with the encoding used to send it."""
        if self._encoding is None:
            raise RuntimeError(f"{self.method} {self.url} has not been sent yet")
        return self._encoding.decode(self.raw_bytes, target)
