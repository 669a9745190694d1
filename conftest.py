"""Global configuration for pytest"""

import pytest

from glfx.utils import logger


@pytest.fixture(autouse=True)
def glfx_log_propagation():
    """Make sure log records reach pytest's caplog, whatever GLFX_LOG_LEVEL is set to."""
    level = logger.level
    logger.setLevel("DEBUG")
    try:
        yield
    finally:
        logger.setLevel(level)


@pytest.fixture
def effect_files(tmp_path):
    """Write effect files to a temporary directory. Returns (write, base_dir)."""

    def write(relpath, text):
        path = tmp_path.joinpath(relpath)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)

    return write, str(tmp_path)
