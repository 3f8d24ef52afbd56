"""Face crop preprocessing for the FaceNet input tensor.

A face crop goes through four steps before inference:

  1. optional 90 degree clockwise rotation of the whole source image
  2. crop of the region of interest
  3. nearest-neighbour resize to INPUT_SIZE x INPUT_SIZE
  4. column-major scan with per-channel normalization to [-1, 1)

The scan visits columns in the outer loop and rows in the inner loop. The
embedding model was exported against exactly this layout, so the order here
and the reshape in ``FaceEmbedder.embed`` must stay in sync.
"""
from __future__ import annotations

import cv2
import numpy as np

from facenet_lite.core.exceptions import InvalidRegion
from facenet_lite.core.image_io import ImageLike, to_rgb_array
from facenet_lite.core.logger import get_logger
from facenet_lite.core.types import Region

logger = get_logger("preprocess")

INPUT_SIZE = 160
INPUT_CHANNELS = 3
INPUT_LENGTH = INPUT_CHANNELS * INPUT_SIZE * INPUT_SIZE

PIXEL_CENTER = 128.0
PIXEL_SCALE = 128.0


def rotate_clockwise(image_rgb: np.ndarray) -> np.ndarray:
    """Rotate an image 90 degrees clockwise.

    Args:
        image_rgb: Array with shape (H, W, 3).

    Returns:
        New array with shape (W, H, 3).
    """
    return cv2.rotate(image_rgb, cv2.ROTATE_90_CLOCKWISE)


def crop_region(image_rgb: np.ndarray, region: Region) -> np.ndarray:
    """Cut a region out of an image.

    Args:
        image_rgb: Array with shape (H, W, 3).
        region: Region in the image's pixel coordinates.

    Returns:
        Array with shape (region.height, region.width, 3).

    Raises:
        InvalidRegion: If the region is empty or extends past the image.
    """
    height, width = image_rgb.shape[:2]
    if not region.fits_within(width, height):
        raise InvalidRegion(
            f"Region {region} does not fit inside a {width}x{height} image"
        )
    return image_rgb[region.top : region.bottom, region.left : region.right, :]


def resize_nearest(image_rgb: np.ndarray, size: int = INPUT_SIZE) -> np.ndarray:
    """Stretch an image to size x size without interpolation.

    Args:
        image_rgb: Array with shape (H, W, 3).
        size: Output edge length in pixels.

    Returns:
        Array with shape (size, size, 3), same dtype as the input.
    """
    return cv2.resize(
        np.ascontiguousarray(image_rgb),
        dsize=(size, size),
        interpolation=cv2.INTER_NEAREST,
    )


def normalize_pixels(image_rgb: np.ndarray) -> np.ndarray:
    """Map uint8 channel values to float32 (value - 128) / 128.

    Args:
        image_rgb: uint8 array of any shape.

    Returns:
        float32 array of the same shape with values in [-1.0, 0.9921875].
    """
    return (image_rgb.astype(np.float32) - PIXEL_CENTER) / PIXEL_SCALE


def to_input_buffer(chip_rgb: np.ndarray) -> np.ndarray:
    """Flatten a resized face chip into the model input buffer.

    Args:
        chip_rgb: uint8 array with shape (INPUT_SIZE, INPUT_SIZE, 3).

    Returns:
        Flat float32 array of length INPUT_LENGTH, R, G, B per pixel,
        columns in the outer loop and rows in the inner loop.

    Raises:
        ValueError: If the chip does not have the expected shape.
    """
    expected = (INPUT_SIZE, INPUT_SIZE, INPUT_CHANNELS)
    if chip_rgb.shape != expected:
        raise ValueError(f"Expected {expected}, got {chip_rgb.shape}")

    # (row, col, ch) -> (col, row, ch) so that columns vary slowest
    column_major = np.transpose(chip_rgb, (1, 0, 2))
    buffer = normalize_pixels(column_major).reshape(-1)
    return np.ascontiguousarray(buffer, dtype=np.float32)


def prepare_input(
    image: ImageLike, region: Region, pre_rotate: bool = False
) -> np.ndarray:
    """Turn a face region of a source image into a normalized input buffer.

    Args:
        image: Source image, PIL or (H, W, 3) array. Never modified.
        region: Face region. When pre_rotate is set it refers to the
            rotated image, whose width and height are swapped.
        pre_rotate: Rotate the source 90 degrees clockwise before cropping.

    Returns:
        Flat float32 array of length INPUT_LENGTH.

    Raises:
        InvalidRegion: If the region does not fit the (rotated) image.
    """
    arr = to_rgb_array(image)
    if pre_rotate:
        arr = rotate_clockwise(arr)

    crop = crop_region(arr, region)
    chip = resize_nearest(crop, INPUT_SIZE)
    logger.debug(
        f"Prepared {region.width}x{region.height} crop "
        f"(pre_rotate={pre_rotate}) from {arr.shape[1]}x{arr.shape[0]} image"
    )
    return to_input_buffer(chip)
