"""
Pixelsort -- Pipeline
Rotate, build intervals, mask, partition, sort, rotate back.

pixelsort() works on arrays only. run() adds file handling around it and
writes the output only once the whole image has been sorted.
"""

import logging
from pathlib import Path

import numpy as np

from core.image_io import load_image, load_mask, rotate, save_image, unrotate
from core.interval import IntervalError, IntervalSet
from core.interval_func import mask as apply_mask
from core.safety import check_dimensions, check_output_path, preflight
from core.settings import IntervalMode, SortSettings, default_output_path
from core.sorting import sort_image
from effects import get_interval_function, get_sort_key

logger = logging.getLogger(__name__)


def build_intervals(image: np.ndarray, settings: SortSettings,
                    mask: np.ndarray | None = None,
                    rng: np.random.RandomState | None = None) -> list[IntervalSet]:
    """Row Collection for an already rotated image."""
    intervals = IntervalSet.for_image(image)

    if mask is not None:
        if mask.shape[:2] != image.shape[:2]:
            raise IntervalError(
                f"Mask size {mask.shape[1]}x{mask.shape[0]} does not match "
                f"image size {image.shape[1]}x{image.shape[0]}"
            )
        apply_mask(intervals, mask, keep_tail=settings.keep_tail)

    mode = settings.interval
    fn = get_interval_function(mode.value)
    if mode == IntervalMode.FULL:
        fn(intervals)
    elif mode == IntervalMode.SPLIT:
        fn(intervals, settings.num)
    elif mode == IntervalMode.RANDOM:
        if rng is None:
            rng = np.random.RandomState(settings.seed)
        fn(intervals, int(settings.lower), int(settings.upper), rng=rng)
    elif mode == IntervalMode.THRESHOLD:
        fn(intervals, image, int(settings.lower), int(settings.upper),
           keep_tail=settings.keep_tail)
    elif mode == IntervalMode.EDGE:
        fn(intervals, image, settings.lower, settings.upper,
           keep_tail=settings.keep_tail)

    logger.debug("Built %d intervals with '%s'",
                 sum(len(s) for s in intervals), mode.value)
    return intervals


def pixelsort(image: np.ndarray, settings: SortSettings | None = None,
              mask: np.ndarray | None = None,
              rng: np.random.RandomState | None = None) -> np.ndarray:
    """Pixel-sort a copy of ``image``.

    Args:
        image: (H, W, C) or (H, W) uint8 array. Not modified.
        settings: Run settings; defaults sort full rows by lightness.
        mask: Optional (H, W) mask in the orientation of ``image``.
        rng: Random source for the random interval function.

    Returns:
        Sorted image with the same shape as ``image``.
    """
    if settings is None:
        settings = SortSettings()

    working = rotate(image.copy(), settings.rotation)
    if mask is not None:
        mask = rotate(mask, settings.rotation)

    intervals = build_intervals(working, settings, mask=mask, rng=rng)
    sort_image(working, intervals, get_sort_key(settings.sorting.value))

    return unrotate(working, settings.rotation)


def run(input_path, settings: SortSettings) -> Path:
    """Sort an image file and save the result. Returns the output path."""
    info = preflight(input_path)
    output_path = Path(settings.output_path or default_output_path(input_path))
    check_output_path(output_path)

    image = load_image(info["path"])
    check_dimensions(image.shape[1], image.shape[0])
    mask = None
    if settings.mask_path is not None:
        preflight(settings.mask_path)
        mask = load_mask(settings.mask_path)
    logger.info("Sorting %s (%dx%d) interval=%s sorting=%s rotation=%d",
                input_path, image.shape[1], image.shape[0],
                settings.interval.value, settings.sorting.value, settings.rotation)

    result = pixelsort(image, settings, mask=mask)

    save_image(result, output_path)
    logger.info("Saved %s", output_path)
    return output_path
