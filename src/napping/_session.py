from dataclasses import dataclass
from datetime import datetime, timezone
from logging import getLogger
from types import TracebackType
from typing import Any, Optional, Union

from httpx import (
    URL,
    AsyncBaseTransport,
    AsyncClient,
    AsyncHTTPTransport,
    BaseTransport,
    BasicAuth,
    Client,
    Headers,
    HTTPTransport,
    InvalidURL,
    Response,
    Timeout,
)

from ._config import Options, SessionConfig, resolve_config
from ._request import Request
from ._utils._encoding import EncodingType, get_encoding
from ._utils._errors import handle_transport_errors
from ._utils._logs import log_request, log_response, setup_logging
from ._utils._ssl_context import get_httpx_client_kwargs
from ._utils._unix_socket import is_unix_url, resolve_unix_url, unix_url_credentials
from ._utils.constants import (
    HEADER_ACCEPT,
    HEADER_CONTENT_TYPE,
    LOGGER_NAME,
    SECURE_SCHEMES,
    UNIX_SCHEME,
)
from .models.errors import (
    DecodeError,
    InvalidURLError,
    RawPayloadTypeError,
    RequestAlreadySentError,
    UnexpectedStatusError,
    UnsafeBasicAuthError,
)


@dataclass
class _Outgoing:
    method: str
    url: URL
    headers: Headers
    content: Optional[bytes]
    auth: Optional[BasicAuth]
    options: Options
    socket_path: Optional[str] = None

    def request_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "headers": self.headers,
            "content": self.content,
            "auth": self.auth,
        }
        if self.options.timeout is not None:
            kwargs["timeout"] = self.options.timeout
        return kwargs


class Session:
    """Holds default request settings and the HTTP clients used to send requests.

    Session defaults (headers, params, credentials, expected status, timeout)
    are merged with each request's options, with the request winning. Header
    and param maps merge key by key.

    Example:
        ```python
        with Session(headers={"X-Api-Key": "..."}) as session:
            req = session.get(
                "https://api.example.com/users",
                {"page": "2"},
                result=list[User],
                error=ApiError,
            )
            users = req.result_value
        ```
    """

    def __init__(
        self,
        *,
        encoding: Union[EncodingType, str, None] = None,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, str]] = None,
        credentials: Optional[tuple[str, str]] = None,
        expected_status: Optional[int] = None,
        unsafe_basic_auth: Optional[bool] = None,
        log: Optional[bool] = None,
        timeout: Union[float, Timeout, None] = None,
        transport: Optional[BaseTransport] = None,
        async_transport: Optional[AsyncBaseTransport] = None,
        config: Optional[SessionConfig] = None,
    ) -> None:
        """Create a session.

        Args:
            encoding: ``"json"`` (default) or ``"xml"``. Unset values fall back
                to the ``NAPPING_ENCODING`` environment variable.
            headers: Default headers for every request.
            params: Default query parameters for every GET request.
            credentials: Default ``(username, password)`` for HTTP Basic auth.
            expected_status: Status code every request is expected to return.
            unsafe_basic_auth: Allow Basic auth over plain HTTP.
            log: Dump requests and responses to the ``napping`` logger.
            timeout: Seconds, or an ``httpx.Timeout`` (see ``new_timeout``).
            transport: Replaces the network transport of the sync client.
            async_transport: Replaces the network transport of the async client.
            config: A prebuilt SessionConfig; when given, the keyword settings
                above are ignored.
        """
        self._logger = getLogger(LOGGER_NAME)

        if config is None:
            config = resolve_config(
                encoding=encoding,
                unsafe_basic_auth=unsafe_basic_auth,
                log=log,
                timeout=None if isinstance(timeout, Timeout) else timeout,
                defaults=Options(
                    credentials=credentials,
                    headers=headers,
                    params=params,
                    expected_status=expected_status,
                ),
            )
        self._config = config
        self._encoding = get_encoding(config.encoding)
        self._timeout = timeout if isinstance(timeout, Timeout) else config.timeout

        if config.log:
            setup_logging(debug=True)

        self._transport = transport
        self._async_transport = async_transport
        self._client: Optional[Client] = None
        self._client_async: Optional[AsyncClient] = None

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def content_type(self) -> str:
        return self._encoding.content_type

    @property
    def _http_client(self) -> Client:
        if self._client is None:
            self._client = Client(
                **get_httpx_client_kwargs(self._timeout, self._transport)
            )
        return self._client

    @property
    def _http_client_async(self) -> AsyncClient:
        if self._client_async is None:
            self._client_async = AsyncClient(
                **get_httpx_client_kwargs(self._timeout, self._async_transport)
            )
        return self._client_async

    def send(self, request: Request) -> Request:
        """Send ``request`` and populate it with the server's response.

        Returns:
            Request: The same request, now sent.

        Raises:
            InvalidURLError: The URL could not be parsed.
            SocketNotFoundError: A ``unix://`` URL names no socket.
            RawPayloadTypeError: ``raw_payload`` is set but the payload is not bytes.
            EncodeError: The payload could not be encoded.
            UnsafeBasicAuthError: Credentials over plain HTTP without ``unsafe_basic_auth``.
            TransportError: The request could not be delivered.
            DecodeError: The response body did not fit the destination type.
            UnexpectedStatusError: ``expected_status`` is set and did not match.
        """
        outgoing = self._prepare(request)
        self._mark_sent(request, outgoing)

        with handle_transport_errors(str(outgoing.url)):
            if outgoing.socket_path is not None:
                transport = HTTPTransport(uds=outgoing.socket_path)
                with Client(
                    **get_httpx_client_kwargs(self._timeout, transport)
                ) as client:
                    response = client.request(
                        outgoing.method, outgoing.url, **outgoing.request_kwargs()
                    )
            else:
                response = self._http_client.request(
                    outgoing.method, outgoing.url, **outgoing.request_kwargs()
                )

        return self._complete(request, response, outgoing.options)

    async def send_async(self, request: Request) -> Request:
        """Async version of send()."""
        outgoing = self._prepare(request)
        self._mark_sent(request, outgoing)

        with handle_transport_errors(str(outgoing.url)):
            if outgoing.socket_path is not None:
                transport = AsyncHTTPTransport(uds=outgoing.socket_path)
                async with AsyncClient(
                    **get_httpx_client_kwargs(self._timeout, transport)
                ) as client:
                    response = await client.request(
                        outgoing.method, outgoing.url, **outgoing.request_kwargs()
                    )
            else:
                response = await self._http_client_async.request(
                    outgoing.method, outgoing.url, **outgoing.request_kwargs()
                )

        return self._complete(request, response, outgoing.options)

    def get(
        self,
        url: str,
        params: Optional[dict[str, str]] = None,
        *,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        """Send a GET request. ``params`` are merged into the URL's query string."""
        return self.send(
            _new_request(
                "GET",
                url,
                params=params,
                result=result,
                error=error,
                options=options,
            )
        )

    def head(
        self,
        url: str,
        *,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return self.send(
            _new_request("HEAD", url, result=result, error=error, options=options)
        )

    def options(
        self,
        url: str,
        *,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return self.send(
            _new_request("OPTIONS", url, result=result, error=error, options=options)
        )

    def post(
        self,
        url: str,
        payload: Any = None,
        *,
        raw_payload: bool = False,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        """Send a POST request with ``payload`` encoded as the request body.

        With ``raw_payload=True`` the payload must already be ``bytes`` and is
        sent unchanged.
        """
        return self.send(
            _new_request(
                "POST",
                url,
                payload=payload,
                raw_payload=raw_payload,
                result=result,
                error=error,
                options=options,
            )
        )

    def put(
        self,
        url: str,
        payload: Any = None,
        *,
        raw_payload: bool = False,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return self.send(
            _new_request(
                "PUT",
                url,
                payload=payload,
                raw_payload=raw_payload,
                result=result,
                error=error,
                options=options,
            )
        )

    def patch(
        self,
        url: str,
        payload: Any = None,
        *,
        raw_payload: bool = False,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return self.send(
            _new_request(
                "PATCH",
                url,
                payload=payload,
                raw_payload=raw_payload,
                result=result,
                error=error,
                options=options,
            )
        )

    def delete(
        self,
        url: str,
        *,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return self.send(
            _new_request("DELETE", url, result=result, error=error, options=options)
        )

    async def get_async(
        self,
        url: str,
        params: Optional[dict[str, str]] = None,
        *,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        """Async version of get()."""
        return await self.send_async(
            _new_request(
                "GET",
                url,
                params=params,
                result=result,
                error=error,
                options=options,
            )
        )

    async def head_async(
        self,
        url: str,
        *,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return await self.send_async(
            _new_request("HEAD", url, result=result, error=error, options=options)
        )

    async def options_async(
        self,
        url: str,
        *,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return await self.send_async(
            _new_request("OPTIONS", url, result=result, error=error, options=options)
        )

    async def post_async(
        self,
        url: str,
        payload: Any = None,
        *,
        raw_payload: bool = False,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        """Async version of post()."""
        return await self.send_async(
            _new_request(
                "POST",
                url,
                payload=payload,
                raw_payload=raw_payload,
                result=result,
                error=error,
                options=options,
            )
        )

    async def put_async(
        self,
        url: str,
        payload: Any = None,
        *,
        raw_payload: bool = False,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return await self.send_async(
            _new_request(
                "PUT",
                url,
                payload=payload,
                raw_payload=raw_payload,
                result=result,
                error=error,
                options=options,
            )
        )

    async def patch_async(
        self,
        url: str,
        payload: Any = None,
        *,
        raw_payload: bool = False,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return await self.send_async(
            _new_request(
                "PATCH",
                url,
                payload=payload,
                raw_payload=raw_payload,
                result=result,
                error=error,
                options=options,
            )
        )

    async def delete_async(
        self,
        url: str,
        *,
        result: Any = None,
        error: Any = None,
        options: Optional[Options] = None,
    ) -> Request:
        return await self.send_async(
            _new_request("DELETE", url, result=result, error=error, options=options)
        )

    def close(self) -> None:
        """Close the sync client. Use aclose() once async methods were used."""
        if self._client is not None:
            self._client.close()

    async def aclose(self) -> None:
        if self._client is not None:
            self._client.close()
        if self._client_async is not None:
            await self._client_async.aclose()

    def __enter__(self) -> "Session":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    def _prepare(self, request: Request) -> _Outgoing:
        """Compose the outgoing call. Performs no network I/O."""
        if request.sent:
            raise RequestAlreadySentError(request.method, request.url)

        method = request.method.upper()
        options = self._config.defaults.merge(request.options)

        raw_url = request.url
        socket_path = None
        if is_unix_url(raw_url):
            socket_path, raw_url = resolve_unix_url(raw_url)

        try:
            url = URL(raw_url)
        except (InvalidURL, TypeError) as e:
            raise InvalidURLError(request.url, str(e)) from e

        if socket_path is not None:
            # resolve_unix_url drops userinfo from the URL it returns
            url_credentials = unix_url_credentials(request.url)
        else:
            url_credentials = _url_credentials(url)
            if url.userinfo:
                url = url.copy_with(username="", password="")

        if method == "GET":
            params = {**(options.params or {}), **(request.params or {})}
            if params:
                url = url.copy_merge_params(params)

        headers = Headers(options.headers or {})

        content: Optional[bytes] = None
        if request.raw_payload:
            if request.payload is not None and not isinstance(
                request.payload, (bytes, bytearray)
            ):
                raise RawPayloadTypeError(request.payload)
            content = bytes(request.payload) if request.payload is not None else None
        elif request.payload is not None:
            content = self._encoding.encode(request.payload)

        if content is not None and HEADER_CONTENT_TYPE not in headers:
            headers[HEADER_CONTENT_TYPE] = self._encoding.content_type
        if HEADER_ACCEPT not in headers:
            headers[HEADER_ACCEPT] = self._encoding.content_type

        credentials = options.credentials or url_credentials
        auth = None
        if credentials is not None:
            scheme = UNIX_SCHEME if socket_path is not None else url.scheme
            if scheme not in SECURE_SCHEMES:
                if not self._config.unsafe_basic_auth:
                    raise UnsafeBasicAuthError()
                self._logger.warning(
                    "Using HTTP Basic Auth in cleartext is insecure."
                )
            auth = BasicAuth(*credentials)

        return _Outgoing(
            method=method,
            url=url,
            headers=headers,
            content=content,
            auth=auth,
            options=options,
            socket_path=socket_path,
        )

    def _mark_sent(self, request: Request, outgoing: _Outgoing) -> None:
        request.method = outgoing.method
        request.timestamp = datetime.now(timezone.utc)
        request._encoding = self._encoding

        if self._config.log:
            log_request(
                self._logger,
                outgoing.method,
                str(outgoing.url),
                outgoing.headers,
                request.payload,
                outgoing.content if request.raw_payload else None,
            )

    def _complete(
        self, request: Request, response: Response, options: Options
    ) -> Request:
        request.status = response.status_code
        request.http_response = response
        request.raw_bytes = response.content

        if self._config.log:
            log_response(
                self._logger, response.status_code, response.headers, response.text
            )

        if request.raw_text:
            if request.status < 300 and request.result is not None:
                request.result_value = self._decode(request, request.result)
            elif request.status >= 300 and request.error is not None:
                request.error_value = self._decode(request, request.error)

        expected = options.expected_status
        if expected and request.status != expected:
            self._logger.debug(
                f"Expected status {expected} but got {request.status}"
            )
            raise UnexpectedStatusError(expected, request.status, request)

        return request

    def _decode(self, request: Request, target: Any) -> Any:
        try:
            return self._encoding.decode(request.raw_bytes, target)
        except DecodeError as e:
            e.request = request
            raise


def _url_credentials(url: URL) -> Optional[tuple[str, str]]:
    if not url.username:
        return None
    return url.username, url.password


def _new_request(
    method: str,
    url: str,
    *,
    params: Optional[dict[str, str]] = None,
    payload: Any = None,
    raw_payload: bool = False,
    result: Any = None,
    error: Any = None,
    options: Optional[Options] = None,
) -> Request:
    return Request(
        method,
        url,
        params=params,
        payload=payload,
        raw_payload=raw_payload,
        result=result,
        error=error,
        options=options or Options(),
    )
