"""Pytest configuration: fast-by-default TDD setup.

Slow tests (full-size photos through the whole pipeline) are skipped unless
--slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
import numpy as np
import pytest
from PIL import Image


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that push full-size images through every scanner",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: full-size image tests, run with --slow")


@pytest.fixture
def striped_text_rgb():
    """White 120x120 RGB image with 3-pixel black bars every 10 rows.

    The bars cover x 20..99 and y 20..99, which looks like lines of text to
    every scanner.
    """
    img = np.full((120, 120, 3), 255, dtype=np.uint8)
    for y in range(20, 100):
        if y % 10 in (0, 1, 2):
            img[y, 20:100] = 0
    return img


@pytest.fixture
def image_file(tmp_path, striped_text_rgb):
    """The striped text image saved as a PNG file."""
    path = tmp_path / "input.png"
    Image.fromarray(striped_text_rgb).save(path)
    return path
