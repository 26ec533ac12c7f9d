from pathlib import Path

import pytest

from deepscan.config.settings import Settings
from tests.helpers import FakeClock


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A small JPEG-looking payload (SOI marker, JFIF header, padding, EOI)."""
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 2048 + b"\xff\xd9"


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(upload_dir: Path) -> Settings:
    """Settings with no provider credentials and no artificial audio delay."""
    return Settings(
        sightengine_user="",
        sightengine_secret="",
        resemble_api_key="",
        upload_dir=str(upload_dir),
        audio_demo_delay_seconds=0.0,
        rate_limit_storage_uri="",
    )
