"""
Pixelsort -- Image I/O
Decode/encode images as numpy arrays, grayscale conversion and rotation.
Uses Pillow for files and OpenCV for color conversion.
"""

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

VALID_ROTATIONS = (0, 90, 180, 270)


class ImageIOError(Exception):
    """An image or mask could not be read or written."""
    pass


def _open(path, mode: str) -> np.ndarray:
    try:
        with Image.open(str(path)) as img:
            return np.array(img.convert(mode))
    except FileNotFoundError:
        raise ImageIOError(f"Image not found: {path}")
    except (UnidentifiedImageError, OSError) as e:
        raise ImageIOError(f"Failed to decode image {path}: {e}")


def load_image(path) -> np.ndarray:
    """Load an image as an (H, W, 4) uint8 RGBA array."""
    return _open(path, "RGBA")


def load_mask(path) -> np.ndarray:
    """Load a mask as an (H, W) uint8 grayscale array."""
    return _open(path, "L")


def save_image(array: np.ndarray, output_path) -> Path:
    """Save an (H, W), (H, W, 3) or (H, W, 4) uint8 array. Format follows the extension."""
    output_path = Path(output_path)
    array = np.clip(array, 0, 255).astype(np.uint8)
    if array.ndim == 3 and array.shape[2] == 1:
        array = array[:, :, 0]
    img = Image.fromarray(array)
    # JPEG has no alpha channel.
    if img.mode == "RGBA" and output_path.suffix.lower() in (".jpg", ".jpeg"):
        img = img.convert("RGB")
    try:
        img.save(str(output_path))
    except (OSError, ValueError, KeyError) as e:
        raise ImageIOError(f"Failed to write image {output_path}: {e}")
    return output_path


def to_gray(image: np.ndarray) -> np.ndarray:
    """Single-channel (H, W) uint8 luma of an image with any channel count."""
    import cv2

    image = np.ascontiguousarray(image, dtype=np.uint8)
    if image.ndim == 2:
        return image
    channels = image.shape[2]
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
    # Gray or gray + alpha: the first channel already is the luma.
    return np.ascontiguousarray(image[:, :, 0])


def _quarter_turns(degrees: int) -> int:
    degrees = int(degrees) % 360
    if degrees not in VALID_ROTATIONS:
        raise ValueError(f"Rotation angle must be a multiple of 90. Got {degrees}")
    return degrees // 90


def rotate(image: np.ndarray, degrees: int) -> np.ndarray:
    """Rotate clockwise by a multiple of 90 degrees."""
    turns = _quarter_turns(degrees)
    if turns == 0:
        return image
    return np.ascontiguousarray(np.rot90(image, k=-turns))


def unrotate(image: np.ndarray, degrees: int) -> np.ndarray:
    """Undo ``rotate(image, degrees)``."""
    turns = _quarter_turns(degrees)
    if turns == 0:
        return image
    return np.ascontiguousarray(np.rot90(image, k=turns))
