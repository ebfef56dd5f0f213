"""
Pixelsort -- Safety & Resource Guards
Preflight checks run before any file is decoded or written.
"""

import os
from pathlib import Path

# --- Configurable Limits ---
MAX_FILE_MB = 200          # Maximum input file size
MAX_PIXELS = 100_000_000   # Decoded images must fit in memory
ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tif", ".tiff", ".webp"}


class SafetyError(Exception):
    """Raised when a preflight check fails."""
    pass


def preflight(input_path) -> dict:
    """Run all checks on an input image before decoding it.

    Returns:
        dict with file metadata (path, size_mb, extension).

    Raises:
        SafetyError: If any check fails.
        FileNotFoundError: If input doesn't exist.
    """
    input_path = str(input_path)
    real_path = os.path.realpath(input_path)

    # 1. File exists
    if not os.path.isfile(real_path):
        raise FileNotFoundError(f"Input file not found: {input_path}")

    # 2. File size check
    size_mb = os.path.getsize(real_path) / (1024 * 1024)
    if size_mb > MAX_FILE_MB:
        raise SafetyError(
            f"Input file is {size_mb:.0f}MB, exceeds {MAX_FILE_MB}MB limit."
        )

    # 3. File extension check
    ext = Path(real_path).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise SafetyError(
            f"File type '{ext}' not allowed. "
            f"Supported: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    return {
        "path": real_path,
        "size_mb": size_mb,
        "extension": ext,
    }


def check_output_path(output_path) -> None:
    """Make sure the output can be written before doing any work.

    Raises:
        SafetyError: Missing directory or unsupported extension.
    """
    output_path = Path(output_path)
    parent = output_path.parent
    if not parent.is_dir():
        raise SafetyError(f"Output directory does not exist: {parent}")
    ext = output_path.suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise SafetyError(
            f"Output type '{ext}' not allowed. "
            f"Supported: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )


def check_dimensions(width: int, height: int) -> None:
    """Reject images too large to sort in memory."""
    if width * height > MAX_PIXELS:
        raise SafetyError(
            f"Image is {width}x{height} ({width * height} pixels), "
            f"exceeds the {MAX_PIXELS} pixel limit."
        )
