"""Shared pytest fixtures for globdiff tests."""
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from globdiff.infrastructure.config_manager import set_global_config
from globdiff.infrastructure.logger import set_global_logger


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample globdiff configuration."""
    return {
        "globdiff": {
            "pattern": {
                "escape_character": "~",
                "case_insensitive": True,
                "culture_invariant": False,
            },
            "diff": {
                "placeholder": "<captured>",
                "mismatch_hints": False,
                "enhanced": True,
            },
            "logging": {
                "level": "INFO",
                "file": None,
            },
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "globdiff.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture
def expected_output() -> str:
    """Expected program output, one wildcard pattern per line."""
    return "Build started at *\nCompiling [0-9]* files\nWarnings: ?\nDone\n"


@pytest.fixture
def actual_output() -> str:
    """Program output matching ``expected_output``."""
    return "Build started at 10:42\nCompiling 12 files\nWarnings: 0\nDone\n"


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset global logger/config and hide GLOBDIFF_* variables between tests."""
    for key in list(os.environ):
        if key.startswith("GLOBDIFF_"):
            monkeypatch.delenv(key)
    set_global_logger(None)
    set_global_config(None)
    yield
    set_global_logger(None)
    set_global_config(None)
