"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from witdart.core.models.config import InMemoryFiles, WitFile, default_generator_config


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def host_wit(fixtures_dir: Path) -> str:
    """The ``host`` world used by the end-to-end tests."""
    return (fixtures_dir / "host.wit").read_text(encoding="utf-8")


@pytest.fixture
def host_dart(fixtures_dir: Path) -> str:
    """Expected Dart output for ``host.wit`` with the default config."""
    return (fixtures_dir / "host.dart").read_text(encoding="utf-8")


@pytest.fixture
def host_wit_file(tmp_path: Path, host_wit: str) -> Path:
    """``host.wit`` written to its own temporary directory."""
    wit_dir = tmp_path / "wit"
    wit_dir.mkdir()
    path = wit_dir / "host.wit"
    path.write_text(host_wit, encoding="utf-8")
    return path


@pytest.fixture
def host_in_memory_config(host_wit: str):
    """Default config reading ``host.wit`` from memory."""
    return default_generator_config(
        InMemoryFiles(world_file=WitFile(path="host.wit", contents=host_wit)),
    )
