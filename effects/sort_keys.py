"""
Pixelsort -- Sort Keys
Map pixels to unsigned integer ordering keys.

Every key works on the last axis, so a single pixel (C,) gives a scalar and
a run of pixels (N, C) gives an (N,) array. Any channel count is accepted;
intensity, chan_min and chan_max include alpha when it is present.
"""

import numpy as np

# Integer Rec. 601 luma weights (per mille), as used by PIL's "L" conversion.
LUMA_WEIGHTS = np.array([299, 587, 114], dtype=np.uint32)


def _channels(pixels) -> np.ndarray:
    pixels = np.asarray(pixels)
    if pixels.ndim == 0:
        pixels = pixels.reshape(1)
    return pixels.astype(np.uint32)


def lightness(pixels) -> np.ndarray:
    """Luma: (299R + 587G + 114B) // 1000. Gray pixels use their first channel."""
    p = _channels(pixels)
    if p.shape[-1] < 3:
        return p[..., 0]
    return (p[..., :3] @ LUMA_WEIGHTS) // 1000


def intensity(pixels) -> np.ndarray:
    """Sum of all channels."""
    return _channels(pixels).sum(axis=-1, dtype=np.uint32)


def chan_min(pixels) -> np.ndarray:
    """Smallest channel value."""
    return _channels(pixels).min(axis=-1)


def chan_max(pixels) -> np.ndarray:
    """Largest channel value."""
    return _channels(pixels).max(axis=-1)
