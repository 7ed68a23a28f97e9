"""Shared test fixtures for debugapk tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from debugapk.config import PipelineConfig
from tests.fakes import FakeTools


@pytest.fixture
def fake_tools() -> Iterator[FakeTools]:
    tools = FakeTools()
    with patch("subprocess.run", side_effect=tools):
        yield tools


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig()


@pytest.fixture
def sample_apk(tmp_path: Path) -> Path:
    apk = tmp_path / "sample.apk"
    apk.write_bytes(b"PK\x03\x04release")
    return apk
