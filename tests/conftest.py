"""Shared test fixtures."""

from pathlib import Path

import pytest

from msub.core.config import MsubConfig
from msub.core.models import Segment

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_srt(fixtures_dir: Path) -> Path:
    return fixtures_dir / "sample.srt"


@pytest.fixture
def base_segments() -> list[Segment]:
    return [
        Segment(start=0.0, end=1.5, text="大家好"),
        Segment(start=1.5, end=3.0, text="歡迎收看"),
        Segment(start=3.2, end=5.0, text="今天的節目"),
    ]


@pytest.fixture
def config(tmp_path: Path) -> MsubConfig:
    """Config with every directory under tmp_path and no retry delays."""
    return MsubConfig(
        temp_dir=tmp_path / "temp",
        output_dir=tmp_path / "out",
        translation={"retry_delay": 0.0, "pause_seconds": 0.0},
        server={"upload_dir": tmp_path / "uploads"},
    )
