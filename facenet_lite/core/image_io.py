"""Image input/output utilities for loading and converting images."""
from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

ImageLike = Union[Image.Image, np.ndarray]


def load_rgb(path: Path) -> Image.Image:
    """Load an image and convert to RGB format.

    Args:
        path: Path to image file.

    Returns:
        PIL Image in RGB mode.
    """
    return Image.open(path).convert("RGB")


def to_rgb_array(image: ImageLike) -> np.ndarray:
    """Convert a PIL image or array to a contiguous (H, W, 3) uint8 array.

    The input is never modified; a contiguous uint8 array is returned
    as-is rather than copied.

    Args:
        image: PIL image (any mode) or array with shape (H, W, 3).

    Returns:
        Array with shape (H, W, 3), dtype uint8, RGB channel order.

    Raises:
        ValueError: If an array input does not have shape (H, W, 3).
    """
    if isinstance(image, Image.Image):
        return np.asarray(image.convert("RGB"), dtype=np.uint8)

    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError(f"Expected (H,W,3) RGB array, got {arr.shape}")
    if arr.dtype != np.uint8:
        arr = arr.astype(np.uint8)
    return np.ascontiguousarray(arr)
