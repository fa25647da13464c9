import sys
from pathlib import Path
from typing import Generator

import pytest

# Ensure local source package (src/napping) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from napping import Session  # noqa: E402


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    monkeypatch.delenv("NAPPING_ENCODING", raising=False)
    monkeypatch.delenv("NAPPING_LOG", raising=False)
    monkeypatch.delenv("NAPPING_TIMEOUT", raising=False)
    monkeypatch.delenv("NAPPING_UNSAFE_BASIC_AUTH", raising=False)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def base_url() -> str:
    return "https://api.example.com"


@pytest.fixture
def session() -> Generator[Session, None, None]:
    with Session() as s:
        yield s


@pytest.fixture
def xml_session() -> Generator[Session, None, None]:
    with Session(encoding="xml") as s:
        yield s
