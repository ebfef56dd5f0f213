"""
Pixelsort -- Pipeline & Image I/O Tests
End-to-end sorting on arrays and files, rotation, masks, load/save.

Run with: pytest tests/test_pipeline.py -v
"""

import os
import sys

import numpy as np
import pytest
from PIL import Image

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.image_io import (
    load_image, load_mask, save_image, to_gray, rotate, unrotate, ImageIOError,
)
from core.interval import IntervalError
from core.pipeline import pixelsort, build_intervals, run
from core.settings import SortSettings
from effects.sort_keys import lightness


# ---------------------------------------------------------------------------
# Image I/O
# ---------------------------------------------------------------------------

class TestImageIO:

    def test_load_image_is_rgba(self, image_file):
        image = load_image(image_file)
        assert image.shape == (24, 40, 4)
        assert image.dtype == np.uint8

    def test_load_mask_is_gray(self, mask_file):
        mask = load_mask(mask_file)
        assert mask.shape == (24, 40)
        assert mask[0, 0] == 255 and mask[0, 39] == 0

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ImageIOError):
            load_image(tmp_path / "nope.png")

    def test_garbage_file_raises(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image at all")
        with pytest.raises(ImageIOError):
            load_image(path)

    def test_save_and_reload(self, tmp_path, noise_frame):
        path = save_image(noise_frame, tmp_path / "out.png")
        np.testing.assert_array_equal(load_image(path), noise_frame)

    def test_save_rgba_as_jpeg(self, tmp_path, noise_frame):
        path = save_image(noise_frame, tmp_path / "out.jpg")
        with Image.open(path) as img:
            assert img.mode == "RGB"

    def test_to_gray_shapes(self, gradient_frame, noise_frame):
        assert to_gray(gradient_frame).shape == (16, 32)
        assert to_gray(noise_frame).shape == (24, 40)
        gray = np.array([[1, 2]], dtype=np.uint8)
        np.testing.assert_array_equal(to_gray(gray), gray)

    def test_to_gray_matches_luma(self):
        image = np.array([[[255, 255, 255], [0, 0, 0]]], dtype=np.uint8)
        assert to_gray(image).tolist() == [[255, 0]]

    @pytest.mark.parametrize("degrees", [0, 90, 180, 270, -90, 450])
    def test_rotate_roundtrip(self, gradient_frame, degrees):
        rotated = rotate(gradient_frame, degrees)
        np.testing.assert_array_equal(unrotate(rotated, degrees), gradient_frame)

    def test_rotate_90_is_clockwise(self):
        image = np.array([[1, 2], [3, 4]], dtype=np.uint8)
        assert rotate(image, 90).tolist() == [[3, 1], [4, 2]]

    def test_rotate_rejects_other_angles(self, gradient_frame):
        with pytest.raises(ValueError):
            rotate(gradient_frame, 45)


# ---------------------------------------------------------------------------
# pixelsort on arrays
# ---------------------------------------------------------------------------

class TestPixelsort:

    def test_defaults_sort_full_rows(self, gray_row):
        result = pixelsort(gray_row)
        assert result.tolist() == [[10, 20, 30, 40]]
        assert gray_row.tolist() == [[10, 40, 20, 30]]

    def test_shape_preserved(self, noise_frame):
        result = pixelsort(noise_frame, SortSettings(rotation=90))
        assert result.shape == noise_frame.shape

    def test_rotation_sorts_columns(self):
        image = np.array([[3], [1], [2]], dtype=np.uint8)
        result = pixelsort(image, SortSettings(rotation=90))
        # Rotated clockwise, the column reads bottom to top.
        assert result[:, 0].tolist() == [3, 2, 1]
        result = pixelsort(image, SortSettings(rotation=270))
        assert result[:, 0].tolist() == [1, 2, 3]

    def test_pixels_are_a_permutation_per_row(self, noise_frame):
        settings = SortSettings(interval="random", lower=2, upper=9, seed=5)
        result = pixelsort(noise_frame, settings)
        for before, after in zip(noise_frame, result):
            assert sorted(map(tuple, before)) == sorted(map(tuple, after))

    def test_mask_limits_sorting(self):
        image = np.array([[5, 4, 3, 2, 1, 0]], dtype=np.uint8)
        mask = np.array([[255, 255, 255, 0, 0, 0]], dtype=np.uint8)
        result = pixelsort(image, mask=mask)
        assert result.tolist() == [[3, 4, 5, 2, 1, 0]]

    def test_mask_rotated_with_image(self):
        image = np.array([[3, 9], [1, 9], [2, 9], [0, 9]], dtype=np.uint8)
        mask = np.array([[255, 0], [255, 0], [255, 0], [0, 0]], dtype=np.uint8)
        result = pixelsort(image, SortSettings(rotation=270), mask=mask)
        assert result[:, 0].tolist() == [1, 2, 3, 0]
        assert result[:, 1].tolist() == [9, 9, 9, 9]

    def test_mask_size_mismatch(self, gray_row):
        with pytest.raises(IntervalError):
            pixelsort(gray_row, mask=np.zeros((2, 4), dtype=np.uint8))

    def test_threshold_mode(self):
        image = np.array([[200, 90, 60, 10, 0]], dtype=np.uint8)
        settings = SortSettings(interval="threshold", lower=50, upper=100)
        assert pixelsort(image, settings).tolist() == [[200, 60, 90, 10, 0]]

    def test_split_mode(self):
        image = np.array([[4, 3, 2, 1]] * 2, dtype=np.uint8)
        settings = SortSettings(interval="split", num=2)
        # Step is rows // num == 1: rows split at column 1.
        assert pixelsort(image, settings).tolist() == [[4, 1, 2, 3]] * 2

    def test_edge_mode_runs(self, gradient_frame):
        settings = SortSettings(interval="edge", lower=50.0, upper=150.0)
        assert pixelsort(gradient_frame, settings).shape == gradient_frame.shape

    def test_random_mode_seeded(self, noise_frame):
        settings = SortSettings(interval="random", lower=3, upper=12, seed=9)
        np.testing.assert_array_equal(pixelsort(noise_frame, settings),
                                      pixelsort(noise_frame, settings))

    def test_build_intervals_random_covers_rows(self, noise_frame):
        settings = SortSettings(interval="random", lower=1, upper=4)
        intervals = build_intervals(noise_frame, settings, rng=np.random.RandomState(0))
        for s in intervals:
            assert s.full_range() == range(0, 40)
            assert sum(len(r) for r in s) == 40

    def test_sorted_rows_non_decreasing(self, noise_frame):
        result = pixelsort(noise_frame)
        for row in result:
            assert np.all(np.diff(lightness(row).astype(int)) >= 0)


# ---------------------------------------------------------------------------
# run on files
# ---------------------------------------------------------------------------

class TestRun:

    def test_default_output_path(self, image_file):
        output = run(image_file, SortSettings())
        assert output == image_file.with_name("photo.sorted.png")
        assert output.exists()

    def test_explicit_output_and_mask(self, image_file, mask_file, tmp_path):
        out = tmp_path / "result.png"
        settings = SortSettings(mask_path=mask_file, output_path=out)
        assert run(image_file, settings) == out
        original = load_image(image_file)
        result = load_image(out)
        # Black half of the mask is left alone.
        np.testing.assert_array_equal(result[:, 20:], original[:, 20:])

    def test_failed_run_writes_nothing(self, image_file, tmp_path):
        mask = np.zeros((5, 5), dtype=np.uint8)
        mask_path = tmp_path / "small_mask.png"
        Image.fromarray(mask, "L").save(mask_path)
        out = tmp_path / "never.png"
        settings = SortSettings(mask_path=mask_path, output_path=out)
        with pytest.raises(IntervalError):
            run(image_file, settings)
        assert not out.exists()
