import base64
import json
import logging
from typing import Any, Mapping, Optional

from .constants import HEADER_AUTHORIZATION, LOGGER_NAME

_SEPARATOR = "-" * 80
_HANDLER_NAME = "napping-stream"


def setup_logging(debug: bool = False) -> None:
    """Attach a single stream handler to the napping logger.

    Calling it again only updates the level, so sessions created with
    ``log=True`` do not stack handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if debug else logging.WARNING
    logger.setLevel(level)

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    )
    logger.addHandler(handler)


def mask_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: "***" if key.lower() == HEADER_AUTHORIZATION.lower() else value
        for key, value in headers.items()
    }


def format_payload(payload: Any, raw_body: Optional[bytes]) -> str:
    if payload is None:
        return "None"
    if raw_body is not None:
        return base64.b64encode(raw_body).decode("ascii")
    return repr(payload)


def format_body(body: str) -> str:
    """Pretty-print JSON bodies, leave anything else as is."""
    if not body:
        return "Empty response body"
    try:
        return json.dumps(json.loads(body), indent=2)
    except ValueError:
        return body


def log_request(
    logger: logging.Logger,
    method: str,
    url: str,
    headers: Mapping[str, str],
    payload: Any,
    raw_body: Optional[bytes] = None,
) -> None:
    logger.debug(_SEPARATOR)
    logger.debug("REQUEST")
    logger.debug(_SEPARATOR)
    logger.debug(f"{method} {url}")
    logger.debug(f"HEADERS: {mask_headers(headers)}")
    logger.debug(f"Payload: {format_payload(payload, raw_body)}")


def log_response(
    logger: logging.Logger,
    status: int,
    headers: Mapping[str, str],
    body: str,
) -> None:
    logger.debug(_SEPARATOR)
    logger.debug("RESPONSE")
    logger.debug(_SEPARATOR)
    logger.debug(f"Status: {status}")
    logger.debug(f"HEADERS: {dict(headers)}")
    logger.debug(f"Body:\n{format_body(body)}")
