"""Shared fixtures for texcreate tests."""

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks added by setup_logger so later tests never write to closed streams."""
    yield
    logger.remove()


@pytest.fixture
def project_dir(tmp_path):
    """Project directory with an existing out/ directory."""
    project = tmp_path / "report"
    (project / "out").mkdir(parents=True)
    return project
