"""
Pixelsort -- Interval Functions
Carve a Row Collection (one IntervalSet per image row) according to image
content or a partitioning policy.

Every function mutates the IntervalSets in place and returns None.

Mask convention:
    255 (white) -> pixel stays sortable
    0   (black) -> pixel is removed from its row's set
    anything else is ignored by the scan and belongs to the run it sits in
"""

import numpy as np

from core.interval import IntervalError, IntervalSet
from core.image_io import to_gray

WHITE = 255
BLACK = 0


def _as_mask(mask_image: np.ndarray) -> np.ndarray:
    mask_image = np.asarray(mask_image)
    if mask_image.ndim == 3 and mask_image.shape[2] == 1:
        mask_image = mask_image[:, :, 0]
    if mask_image.ndim != 2:
        raise IntervalError(
            f"Mask must be a single-channel (H, W) image. Got shape {mask_image.shape}"
        )
    return mask_image


def _mask_row(interval_set: IntervalSet, row: np.ndarray, keep_tail: bool) -> None:
    whites = np.flatnonzero(row == WHITE)
    blacks = np.flatnonzero(row == BLACK)
    cursor = 0
    while True:
        i = np.searchsorted(whites, cursor)
        if i == len(whites):
            # No white left: the rest of the row is excluded.
            interval_set.remove_range(cursor, None)
            return
        white = int(whites[i])
        # Black span that preceded this white run.
        interval_set.remove_range(cursor, white)

        j = np.searchsorted(blacks, white, side="right")
        if j == len(blacks):
            # White run reaches the row end without a closing black pixel.
            if not keep_tail:
                interval_set.remove_range(white, None)
            return
        cursor = int(blacks[j])


def mask(intervals: list[IntervalSet], mask_image: np.ndarray,
         keep_tail: bool = False) -> None:
    """Drop black runs of ``mask_image`` from each row's IntervalSet.

    Args:
        intervals: Row Collection, one IntervalSet per row.
        mask_image: (H, W) uint8 mask. Rows beyond either length are ignored.
        keep_tail: Keep a trailing white run that has no closing black pixel.
            By default such a tail is dropped.
    """
    mask_image = _as_mask(mask_image)
    for row, interval_set in zip(mask_image, intervals):
        _mask_row(interval_set, row, keep_tail)


def binarize(gray: np.ndarray, low: int, high: int) -> np.ndarray:
    """White where ``low <= gray < high``, black everywhere else."""
    selected = (gray >= low) & (gray < high)
    return np.where(selected, WHITE, BLACK).astype(np.uint8)


def threshold(intervals: list[IntervalSet], image: np.ndarray, low: int, high: int,
              keep_tail: bool = False) -> None:
    """Keep only pixels whose lightness falls in ``[low, high)``."""
    low, high = int(low), int(high)
    for name, value in (("low", low), ("high", high)):
        if not 0 <= value <= 255:
            raise IntervalError(f"Threshold {name} must be a byte (0-255). Got {value}")
    mask(intervals, binarize(to_gray(image), low, high), keep_tail=keep_tail)


def edges_canny(intervals: list[IntervalSet], image: np.ndarray,
                low_thresh: float, high_thresh: float,
                keep_tail: bool = False) -> None:
    """Keep only Canny edge pixels sortable.

    Thresholds are the Canny hysteresis pair. Useful values lie roughly in
    [0.0, 1140.39), the maximum gradient magnitude of an 8-bit image.
    """
    import cv2

    if low_thresh < 0 or high_thresh < 0:
        raise IntervalError(
            f"Edge thresholds must be non-negative. Got {low_thresh}, {high_thresh}"
        )
    edges = cv2.Canny(to_gray(image), float(low_thresh), float(high_thresh))
    mask(intervals, edges, keep_tail=keep_tail)


def random(intervals: list[IntervalSet], lower: int, upper: int,
           rng: np.random.RandomState | None = None) -> None:
    """Split every row into abutting intervals of random width in ``[lower, upper)``.

    Nothing is removed; each row just gets more, smaller intervals.
    Widths below 1 are never drawn, so every step advances.
    """
    lower, upper = int(lower), int(upper)
    lower = max(lower, 1)
    if upper <= lower:
        raise IntervalError(
            f"Random interval widths need 1 <= lower < upper. Got lower={lower}, upper={upper}"
        )
    if rng is None:
        rng = np.random.RandomState()

    for interval_set in intervals:
        width = interval_set.end()
        acc = 0
        while acc < width:
            acc += int(rng.randint(lower, upper))
            interval_set.split_at(acc)


def split_equal(intervals: list[IntervalSet], part_count: int) -> None:
    """Split every row at multiples of ``len(intervals) // part_count``.

    The step is derived from the number of rows, not the row width.
    A part_count of zero, a negative one, or one larger than the row count
    leaves the collection untouched.
    """
    part_count = int(part_count)
    if part_count <= 0 or part_count > len(intervals):
        return
    width = len(intervals) // part_count
    for interval_set in intervals:
        for part_id in range(part_count):
            interval_set.split_at(part_id * width)


def full(intervals: list[IntervalSet]) -> None:
    """Whole rows stay single intervals."""
    return None
