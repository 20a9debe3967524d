"""
Shared fixtures for the diff backend tests.
"""

import pathlib
import sys

import pytest

# Ensure "backend" is on the path so modules import without installation
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "backend"))

from services.config_manager import ConfigManager
from services.revision_store import RevisionStore


@pytest.fixture(autouse=True)
def isolated_singletons(tmp_path, monkeypatch):
    """Point config at a temp dir and start every test with empty singletons"""
    monkeypatch.setenv("REVIEW_DIFF_CONFIG_DIR", str(tmp_path / "config"))
    ConfigManager.reset_instance()
    RevisionStore.reset_instance()
    yield
    ConfigManager.reset_instance()
    RevisionStore.reset_instance()
