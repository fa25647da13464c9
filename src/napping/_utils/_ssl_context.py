import os
import ssl
from typing import Any, Optional, Union

import httpx

TimeoutTypes = Union[float, httpx.Timeout, None]


def expand_path(path):
    """Expand environment variables and user home directory in path."""
    if not path:
        return path
    # Expand environment variables like $HOME
    path = os.path.expandvars(path)
    # Expand user home directory ~
    path = os.path.expanduser(path)
    return path


def create_ssl_context():
    # Try truststore first (system certificates)
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        # Fallback to manual certificate configuration
        import certifi

        ssl_cert_file = expand_path(os.environ.get("SSL_CERT_FILE"))
        requests_ca_bundle = expand_path(os.environ.get("REQUESTS_CA_BUNDLE"))
        ssl_cert_dir = expand_path(os.environ.get("SSL_CERT_DIR"))

        return ssl.create_default_context(
            cafile=ssl_cert_file or requests_ca_bundle or certifi.where(),
            capath=ssl_cert_dir,
        )


def new_timeout(
    connect_timeout: Optional[float], read_write_timeout: Optional[float]
) -> httpx.Timeout:
    """Build a timeout with separate connect and read/write limits.

    A limit of ``0`` or ``None`` disables that timeout.
    """
    connect = connect_timeout or None
    read_write = read_write_timeout or None
    return httpx.Timeout(connect=connect, read=read_write, write=read_write, pool=None)


def get_httpx_client_kwargs(
    timeout: TimeoutTypes = None,
    transport: Optional[Any] = None,
) -> dict[str, Any]:
    """Keyword arguments shared by every httpx client a session creates."""
    kwargs: dict[str, Any] = {
        "follow_redirects": True,
        "timeout": timeout,
    }
    if transport is not None:
        kwargs["transport"] = transport
    else:
        kwargs["verify"] = create_ssl_context()
    return kwargs
