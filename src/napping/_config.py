from os import environ as env
from typing import Any, Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from ._utils._encoding import EncodingType, parse_encoding
from ._utils.constants import (
    ENV_ENCODING,
    ENV_LOG,
    ENV_TIMEOUT,
    ENV_UNSAFE_BASIC_AUTH,
)
from .models.errors import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}


def _merge_keywise(
    base: Optional[dict[str, str]],
    other: Optional[dict[str, str]],
    *,
    case_insensitive: bool = False,
) -> Optional[dict[str, str]]:
    if other is None:
        return None if base is None else dict(base)
    merged = dict(base or {})
    for key, value in other.items():
        if case_insensitive:
            for existing in [k for k in merged if k.lower() == key.lower()]:
                del merged[existing]
        merged[key] = value
    return merged


class Options(BaseModel):
    """Overridable per-call settings.

    The same model carries session defaults and per-call overrides; the
    effective settings of a call are ``defaults.merge(overrides)``.
    """

    model_config = ConfigDict(frozen=True)

    credentials: Optional[tuple[str, str]] = None
    headers: Optional[dict[str, str]] = None
    params: Optional[dict[str, str]] = None
    expected_status: Optional[int] = None
    timeout: Optional[float] = None

    def merge(self, other: Optional["Options"]) -> "Options":
        """Return a new Options where every field set on ``other`` wins.

        Headers and params are merged key by key instead of being replaced.
        Header names compare case-insensitively.
        """
        if other is None:
            return self.model_copy()

        return Options(
            credentials=(
                other.credentials if other.credentials is not None else self.credentials
            ),
            headers=_merge_keywise(self.headers, other.headers, case_insensitive=True),
            params=_merge_keywise(self.params, other.params),
            expected_status=other.expected_status or self.expected_status,
            timeout=other.timeout if other.timeout is not None else self.timeout,
        )


class SessionConfig(BaseModel):
    """Settings fixed for the lifetime of a Session.

    Built directly, an unknown ``encoding`` fails with pydantic's
    ``ValidationError`` (wrapping ``InvalidEncodingError``); ``resolve_config``
    and ``Session`` raise ``InvalidEncodingError`` itself.
    """

    encoding: EncodingType = EncodingType.JSON
    unsafe_basic_auth: bool = False
    log: bool = False
    timeout: Optional[float] = None
    defaults: Options = Options()

    @field_validator("encoding", mode="before")
    @classmethod
    def _validate_encoding(cls, value: Any) -> EncodingType:
        return parse_encoding(value)


def _env_flag(name: str) -> Optional[bool]:
    value = env.get(name)
    if value is None or value == "":
        return None
    return value.strip().lower() in _TRUTHY


def resolve_config(
    *,
    encoding: Union[EncodingType, str, None] = None,
    unsafe_basic_auth: Optional[bool] = None,
    log: Optional[bool] = None,
    timeout: Optional[float] = None,
    defaults: Optional[Options] = None,
) -> SessionConfig:
    """Build a SessionConfig, filling unset arguments from the environment.

    A ``.env`` file in the working directory is loaded first. Explicit
    arguments always win over environment variables.
    """
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)

    encoding_value = encoding or env.get(ENV_ENCODING) or EncodingType.JSON
    unsafe_value = (
        unsafe_basic_auth
        if unsafe_basic_auth is not None
        else _env_flag(ENV_UNSAFE_BASIC_AUTH)
    )
    log_value = log if log is not None else _env_flag(ENV_LOG)

    timeout_value = timeout
    if timeout_value is None and env.get(ENV_TIMEOUT):
        try:
            timeout_value = float(env[ENV_TIMEOUT])
        except ValueError as e:
            raise ConfigurationError(
                f"{ENV_TIMEOUT} must be a number of seconds, got {env[ENV_TIMEOUT]!r}"
            ) from e

    return SessionConfig(
        # parsed up front so InvalidEncodingError is not wrapped in a
        # pydantic ValidationError
        encoding=parse_encoding(encoding_value),
        unsafe_basic_auth=bool(unsafe_value),
        log=bool(log_value),
        timeout=timeout_value,
        defaults=defaults or Options(),
    )
