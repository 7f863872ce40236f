"""Shared fixtures for imagedown tests."""

import logging
from pathlib import Path

import pytest
from PIL import Image

from imagedown import logging as imagedown_logging


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset the logger state between tests."""
    imagedown_logging._logger = None
    logging.getLogger("imagedown").handlers.clear()
    yield
    imagedown_logging._logger = None
    logging.getLogger("imagedown").handlers.clear()


@pytest.fixture
def make_image(tmp_path):
    """Create a solid-colour image under tmp_path and return its path."""

    def _make(name: str = "photo.png", size: tuple[int, int] = (800, 600)) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, (200, 80, 40)).save(path)
        return path

    return _make
