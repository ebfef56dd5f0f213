"""
Pixelsort -- Sort & Rewrite Engine
Stable-sorts the pixels of every interval by a sort key and writes them back
into the same columns of the same row.

The image is mutated in place. One scratch buffer is reused for every
interval, so peak extra memory is the widest single interval.
"""

import logging

import numpy as np

from core.interval import IntervalBoundsError, IntervalSet

logger = logging.getLogger(__name__)


class SortError(Exception):
    """A sort key produced unusable output."""
    pass


class ScratchBuffer:
    """Reusable pixel buffer. Capacity only ever grows."""

    def __init__(self, channels: int, dtype=np.uint8, capacity: int = 0):
        self.channels = channels
        self.dtype = np.dtype(dtype)
        self._data = np.empty((capacity, channels), dtype=self.dtype)
        self._len = 0

    @property
    def capacity(self) -> int:
        return self._data.shape[0]

    def __len__(self) -> int:
        return self._len

    def _reserve(self, count: int) -> None:
        if count <= self.capacity:
            return
        new_capacity = max(count, 2 * self.capacity)
        self._data = np.empty((new_capacity, self.channels), dtype=self.dtype)

    def take(self, pixels: np.ndarray) -> np.ndarray:
        """Copy ``pixels`` (N, C) into the buffer and return the filled view."""
        count = pixels.shape[0]
        self._reserve(count)
        self._data[:count] = pixels
        self._len = count
        return self._data[:count]

    def clear(self) -> None:
        self._len = 0


def _as_pixel_grid(image: np.ndarray) -> np.ndarray:
    if not isinstance(image, np.ndarray):
        raise TypeError(f"Image must be a numpy array. Got {type(image).__name__}")
    if image.ndim == 2:
        # View, so writes still land in the caller's array.
        return image[:, :, np.newaxis]
    if image.ndim != 3:
        raise ValueError(f"Image must be (H, W) or (H, W, C). Got shape {image.shape}")
    return image


def validate_intervals(intervals: list[IntervalSet], height: int, width: int) -> None:
    """Raise IntervalBoundsError if any range in the first ``height`` rows leaves [0, width)."""
    for row, interval_set in enumerate(intervals[:height]):
        for r in interval_set:
            if r.start < 0 or r.stop > width:
                raise IntervalBoundsError(
                    f"Row {row}: range [{r.start}, {r.stop}) exceeds image width {width}"
                )


def sort_image(image: np.ndarray, intervals: list[IntervalSet], sort_key,
               scratch: ScratchBuffer | None = None) -> ScratchBuffer:
    """Sort the pixels of every interval in place.

    Args:
        image: (H, W, C) or (H, W) array, mutated in place.
        intervals: Row Collection. Entries past the image height are ignored.
        sort_key: Pure function mapping (N, C) pixels to (N,) numeric keys.
        scratch: Buffer to reuse across calls. A new one is made if omitted.

    Returns:
        The scratch buffer that was used.

    Raises:
        IntervalBoundsError: A range exceeds the image width. Nothing has been
            written when this is raised.
        SortError: sort_key returned keys of the wrong shape.
    """
    grid = _as_pixel_grid(image)
    height, width, channels = grid.shape
    validate_intervals(intervals, height, width)

    if scratch is None or scratch.channels != channels or scratch.dtype != grid.dtype:
        scratch = ScratchBuffer(channels, dtype=grid.dtype)

    sorted_ranges = 0
    for row, interval_set in enumerate(intervals[:height]):
        pixel_row = grid[row]
        for r in interval_set:
            segment = scratch.take(pixel_row[r.start:r.stop])
            keys = np.asarray(sort_key(segment))
            if keys.shape != (len(segment),):
                raise SortError(
                    f"Sort key returned shape {keys.shape} for {len(segment)} pixels"
                )
            order = np.argsort(keys, kind="stable")
            np.take(segment, order, axis=0, out=pixel_row[r.start:r.stop])
            scratch.clear()
            sorted_ranges += 1

    logger.debug("Sorted %d intervals over %d rows", sorted_ranges, min(len(intervals), height))
    return scratch
