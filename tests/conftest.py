"""Pytest configuration and fixtures."""

import numpy as np
import pytest

from bside.data import Bitmap

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)
CLEAR = (0, 0, 0, 0)


def bitmap_from_rows(rows):
    """Build a bitmap from rows of RGBA tuples."""
    return Bitmap(np.array(rows, dtype=np.uint8))


@pytest.fixture
def make_bitmap():
    """Factory turning rows of RGBA tuples into a Bitmap."""
    return bitmap_from_rows


@pytest.fixture
def staircase(make_bitmap):
    """Red pixel in the top-left corner of a 2x2 blue block."""
    return make_bitmap([[RED, BLUE], [BLUE, BLUE]])


@pytest.fixture
def red_blue_pair(make_bitmap):
    """2x1 source: opaque red on the left, opaque blue on the right."""
    return make_bitmap([[RED, BLUE]])
