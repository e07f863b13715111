from __future__ import annotations

from pathlib import Path

import pytest

from toolloop.core.config import Settings
from toolloop.core.safety import Safety
from toolloop.tools.registry import build_registry

from .fakes import BASE_URL


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def safety(workspace: Path) -> Safety:
    return Safety(workspace)


@pytest.fixture
def registry(safety: Safety):
    return build_registry(safety)


@pytest.fixture
def settings(workspace: Path, tmp_path: Path) -> Settings:
    return Settings(api_key="test-key", base_url=BASE_URL, model="test/model", workspace=workspace, data_dir=tmp_path / "data")
