from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from lintbridge.config import AnalyzerConfig
from lintbridge.store import CommandStore
from tests.harness.server_harness import DummyServer


@pytest.fixture
def store() -> CommandStore:
    return CommandStore()


@pytest.fixture
def analyzer_config() -> AnalyzerConfig:
    return AnalyzerConfig(binary="tsqllint", platform="linux-x64", timeout_seconds=5.0)


@pytest.fixture
def dummy_server(tmp_path: Path, analyzer_config: AnalyzerConfig) -> DummyServer:
    return DummyServer(str(tmp_path), analyzer_config=analyzer_config)
