import os
import posixpath
import stat
from logging import getLogger
from typing import Optional
from urllib.parse import SplitResult, quote, unquote, urlsplit, urlunsplit

from ..models.errors import SocketNotFoundError
from .constants import LOGGER_NAME, UNIX_SCHEME, UNIX_SOCKET_HOST

logger = getLogger(LOGGER_NAME)

_PATH_SAFE = "/:@!$&'()*+,;="


def is_unix_socket(path: str) -> bool:
    try:
        mode = os.lstat(path).st_mode
    except OSError as e:
        logger.debug(f"{path}: {e}")
        return False
    return stat.S_ISSOCK(mode)


def locate_socket(raw_path: str) -> tuple[str, str]:
    """Split a path into the Unix domain socket it contains and the request path.

    Paths like ``/var/run/docker.sock/v1.10/images/json`` hold two parts: the
    socket ``/var/run/docker.sock`` and the request path
    ``/v1.10/images/json``. The path is walked from its full form toward
    ``/`` and the first prefix that is a socket on the filesystem wins.

    Raises:
        SocketNotFoundError: If no prefix of the path is a Unix domain socket.
    """
    remaining = raw_path if raw_path.startswith("/") else "/" + raw_path
    request_path = ""
    while remaining:
        remaining = remaining.rstrip("/")
        if remaining and is_unix_socket(remaining):
            return remaining, "/" + request_path
        remaining, tail = posixpath.split(remaining)
        request_path = posixpath.join(tail, request_path) if request_path else tail
    raise SocketNotFoundError(raw_path)


def is_unix_url(url: str) -> bool:
    try:
        return urlsplit(url).scheme.lower() == UNIX_SCHEME
    except ValueError:
        return False


def resolve_unix_url(url: str) -> tuple[str, str]:
    """Resolve a ``unix://`` URL into ``(socket_path, http_url)``.

    The host part, if any, is treated as the first path segment so both
    ``unix://var/run/x.sock/v1`` and ``unix:///var/run/x.sock/v1`` resolve to
    the socket ``/var/run/x.sock``. The returned URL targets ``localhost``
    over plain HTTP and keeps the query string.
    """
    parts = urlsplit(url)
    socket_path, request_path = locate_socket(_socket_search_path(parts))
    http_url = urlunsplit(
        (
            "http",
            UNIX_SOCKET_HOST,
            quote(request_path, safe=_PATH_SAFE),
            parts.query,
            parts.fragment,
        )
    )
    return socket_path, http_url


def _socket_search_path(parts: SplitResult) -> str:
    # the filesystem knows "my dir", not "my%20dir"
    host = unquote(parts.netloc.rpartition("@")[2])
    path = unquote(parts.path)
    if host:
        return "/" + host + path
    return path


def unix_url_credentials(url: str) -> Optional[tuple[str, str]]:
    parts = urlsplit(url)
    if not parts.username:
        return None
    return unquote(parts.username), unquote(parts.password or "")
