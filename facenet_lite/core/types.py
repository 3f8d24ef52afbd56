"""Data types shared by the preprocessing and matching code."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Region:
    """Axis-aligned region of interest in pixel coordinates.

    Attributes:
        left: Left edge x-coordinate.
        top: Top edge y-coordinate.
        width: Region width in pixels.
        height: Region height in pixels.
    """

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.left + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.top + self.height

    @classmethod
    def full(cls, width: int, height: int) -> "Region":
        """Region covering a whole image of the given size."""
        return cls(left=0, top=0, width=width, height=height)

    def fits_within(self, width: int, height: int) -> bool:
        """Check that the region has positive area and lies inside an image.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Returns:
            True if the region can be cropped from a width x height image.
        """
        return (
            self.left >= 0
            and self.top >= 0
            and self.width > 0
            and self.height > 0
            and self.right <= width
            and self.bottom <= height
        )


@dataclass(frozen=True)
class Match:
    """Similarity of a face embedding to one reference embedding.

    Attributes:
        name: Name of the reference embedding.
        similarity: Raw cosine similarity (higher is closer).
    """

    name: str
    similarity: float
