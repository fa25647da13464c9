from contextlib import contextmanager
from typing import Generator

import httpx

from ..models.errors import InvalidURLError, RequestTimeoutError, TransportError


@contextmanager
def handle_transport_errors(url: str) -> Generator[None, None, None]:
    """Context manager converting httpx errors raised while sending a request.

    Yields:
        None: The context manager yields control to the wrapped code.

    Raises:
        InvalidURLError: If httpx rejects the URL.
        RequestTimeoutError: If connecting, reading or writing timed out.
        TransportError: For any other failure to deliver the request.
    """
    try:
        yield
    except httpx.InvalidURL as e:
        raise InvalidURLError(url, str(e)) from e
    except httpx.TimeoutException as e:
        raise RequestTimeoutError(f"Request to {url} timed out: {e}") from e
    except httpx.TransportError as e:
        raise TransportError(f"Request to {url} failed: {e}") from e
    except httpx.RequestError as e:
        raise TransportError(f"Request to {url} failed: {e}") from e
