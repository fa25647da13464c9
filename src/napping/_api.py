"""Module-level shortcuts for one-off requests.

Each call builds a throwaway Session, sends one request and closes the
session again; nothing is shared between calls. Extra keyword arguments
(``encoding``, ``unsafe_basic_auth``, ``log``, ``timeout``, ``transport``, ...)
are passed to the Session constructor. Use a Session directly to reuse
connections or defaults across calls.
"""

from typing import Any, Optional

from ._config import Options
from ._request import Request
from ._session import Session


def send(request: Request, **session_kwargs: Any) -> Request:
    with Session(**session_kwargs) as session:
        return session.send(request)


def get(
    url: str,
    params: Optional[dict[str, str]] = None,
    *,
    result: Any = None,
    error: Any = None,
    options: Optional[Options] = None,
    **session_kwargs: Any,
) -> Request:
    with Session(**session_kwargs) as session:
        return session.get(url, params, result=result, error=error, options=options)


def head(
    url: str,
    *,
    result: Any = None,
    error: Any = None,
    options: Optional[Options] = None,
    **session_kwargs: Any,
) -> Request:
    with Session(**session_kwargs) as session:
        return session.head(url, result=result, error=error, options=options)


def options(
    url: str,
    *,
    result: Any = None,
    error: Any = None,
    options: Optional[Options] = None,
    **session_kwargs: Any,
) -> Request:
    with Session(**session_kwargs) as session:
        return session.options(url, result=result, error=error, options=options)


def post(
    url: str,
    payload: Any = None,
    *,
    raw_payload: bool = False,
    result: Any = None,
    error: Any = None,
    options: Optional[Options] = None,
    **session_kwargs: Any,
) -> Request:
    with Session(**session_kwargs) as session:
        return session.post(
            url,
            payload,
            raw_payload=raw_payload,
            result=result,
            error=error,
            options=options,
        )


def put(
    url: str,
    payload: Any = None,
    *,
    raw_payload: bool = False,
    result: Any = None,
    error: Any = None,
    options: Optional[Options] = None,
    **session_kwargs: Any,
) -> Request:
    with Session(**session_kwargs) as session:
        return session.put(
            url,
            payload,
            raw_payload=raw_payload,
            result=result,
            error=error,
            options=options,
        )


def patch(
    url: str,
    payload: Any = None,
    *,
    raw_payload: bool = False,
    result: Any = None,
    error: Any = None,
    options: Optional[Options] = None,
    **session_kwargs: Any,
) -> Request:
    with Session(**session_kwargs) as session:
        return session.patch(
            url,
            payload,
            raw_payload=raw_payload,
            result=result,
            error=error,
            options=options,
        )


def delete(
    url: str,
    *,
    result: Any = None,
    error: Any = None,
    options: Optional[Options] = None,
    **session_kwargs: Any,
) -> Request:
    with Session(**session_kwargs) as session:
        return session.delete(url, result=result, error=error, options=options)
