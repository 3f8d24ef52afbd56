"""Input validation utilities for facenet-lite."""

from __future__ import annotations

import re

from facenet_lite.core.exceptions import ValidationError
from facenet_lite.core.types import Region

_REGION_RE = re.compile(r"^\s*(-?\d+)\s*,\s*(-?\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*$")


def parse_region(value: str) -> Region:
    """Parse a region given as "left,top,width,height".

    Negative offsets are accepted here; bounds are checked when cropping.

    Args:
        value: Comma-separated integers.

    Returns:
        Parsed Region.

    Raises:
        ValidationError: If the string is not four integers.
    """
    if not value:
        raise ValidationError("region cannot be empty")

    m = _REGION_RE.match(value)
    if not m:
        raise ValidationError(
            f"region must look like 'left,top,width,height', got {value!r}"
        )

    left, top, width, height = (int(g) for g in m.groups())
    return Region(left=left, top=top, width=width, height=height)


def validate_num_threads(num_threads: int) -> bool:
    """Validate the interpreter thread-count hint.

    Args:
        num_threads: Thread count to validate.

    Returns:
        True if valid.

    Raises:
        ValidationError: If the value is not a positive integer.
    """
    if isinstance(num_threads, bool) or not isinstance(num_threads, int):
        raise ValidationError("num_threads must be an integer")

    if num_threads < 1:
        raise ValidationError("num_threads must be at least 1")

    return True


def validate_top_k(top_k: int) -> bool:
    """Validate the number of matches requested from a gallery.

    Args:
        top_k: Number of matches.

    Returns:
        True if valid.

    Raises:
        ValidationError: If top_k is not a positive integer.
    """
    if isinstance(top_k, bool) or not isinstance(top_k, int):
        raise ValidationError("top_k must be an integer")

    if top_k < 1:
        raise ValidationError("top_k must be at least 1")

    return True
