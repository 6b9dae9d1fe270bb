from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from declshell.config import ShellConfig
from tests._fixtures.metadata_builder import MetadataBuilder


@pytest.fixture
def metadata_builder(tmp_path: Path) -> MetadataBuilder:
    """Provide a metadata document builder rooted at the pytest tmp_path."""
    return MetadataBuilder(tmp_path)


@pytest.fixture
def shell_config(tmp_path: Path) -> ShellConfig:
    """Plain configuration without banner or assembly info, four-space indents."""
    return ShellConfig(root=tmp_path, disable_assembly_info=True, emit_banner=False)


@pytest.fixture(autouse=True)
def _reset_declshell_logger() -> Iterator[None]:
    """Drop handlers the CLI installs so they never outlive a captured stream."""
    yield
    logger = logging.getLogger("declshell")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
