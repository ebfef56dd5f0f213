"""
Conftest: shared fixtures for all Pixelsort test modules.

1. Synthetic frames (gradient, gray row, RGBA noise)
2. Image files on disk for pipeline and CLI tests
"""

import os
import sys

import numpy as np
import pytest
from PIL import Image

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _make_test_frame(width=32, height=16, channels=3):
    """Generate a synthetic test frame (gradient, not blank)."""
    frame = np.zeros((height, width, channels), dtype=np.uint8)
    frame[:, :, 0] = np.linspace(255, 0, width, dtype=np.uint8)  # R falls left to right
    if channels > 1:
        frame[:, :, 1] = 128  # constant G
    if channels > 2:
        frame[:, :, 2] = np.linspace(0, 255, width, dtype=np.uint8)  # B rises
    if channels > 3:
        frame[:, :, 3] = 255  # opaque
    return frame


@pytest.fixture
def gradient_frame():
    """16x32 RGB gradient frame."""
    return _make_test_frame()


@pytest.fixture
def noise_frame():
    """24x40 RGBA noise frame with a fixed seed."""
    rng = np.random.RandomState(42)
    return rng.randint(0, 256, (24, 40, 4), dtype=np.uint8)


@pytest.fixture
def gray_row():
    """4x1 single-channel image with lightness [10, 40, 20, 30]."""
    return np.array([[10, 40, 20, 30]], dtype=np.uint8)


@pytest.fixture
def image_file(tmp_path):
    """A 40x24 RGBA PNG on disk."""
    rng = np.random.RandomState(7)
    array = rng.randint(0, 256, (24, 40, 4), dtype=np.uint8)
    path = tmp_path / "photo.png"
    Image.fromarray(array, "RGBA").save(path)
    return path


@pytest.fixture
def mask_file(tmp_path):
    """A 40x24 mask: left half white, right half black."""
    array = np.zeros((24, 40), dtype=np.uint8)
    array[:, :20] = 255
    path = tmp_path / "mask.png"
    Image.fromarray(array, "L").save(path)
    return path
