# tests/conftest.py
"""
Pytest configuration and fixtures.
Adds src to sys.path so imports work without an editable install.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
# Add src to path so `import litmind` works
src_root = project_root / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))


@pytest.fixture(autouse=True)
def _isolated_log_dir(tmp_path, monkeypatch):
    """Route file logs of every test into its own temporary directory."""
    from litmind.utils.logging_config import Logger

    monkeypatch.setenv("LITMIND_LOG_DIR", str(tmp_path / "logs"))
    Logger.close()
    Logger.init()
    yield
    Logger.close()
