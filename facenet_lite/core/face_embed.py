"""Face embedding generation using the FaceNet model."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from facenet_lite.core.exceptions import ShapeMismatch
from facenet_lite.core.image_io import ImageLike
from facenet_lite.core.preprocess import INPUT_LENGTH, prepare_input
from facenet_lite.core.types import Region

if TYPE_CHECKING:
    from facenet_lite.core.tflite import TFLiteRunner

EMBEDDING_DIM = 128


@dataclass(frozen=True)
class FaceEmbedder:
    """Face embedding generator using FaceNet.

    Attributes:
        runner: TFLite model runner for inference.
    """

    runner: "TFLiteRunner"

    def __post_init__(self) -> None:
        """Check that the model input matches the preprocessor output.

        Raises:
            ShapeMismatch: If the model input tensor does not hold
                INPUT_LENGTH elements.
        """
        if self.runner.input_size != INPUT_LENGTH:
            raise ShapeMismatch(
                f"Model input {self.runner.input_shape} holds "
                f"{self.runner.input_size} values, expected {INPUT_LENGTH}"
            )

    def embed(self, buffer: np.ndarray) -> np.ndarray:
        """Generate an embedding from a normalized input buffer.

        Args:
            buffer: Flat float32 buffer from ``prepare_input``.

        Returns:
            Embedding with shape (EMBEDDING_DIM,) as float32.

        Raises:
            ShapeMismatch: If the buffer length is not INPUT_LENGTH.
            InferenceFailure: If the inference engine fails.
        """
        buffer = np.asarray(buffer, dtype=np.float32)
        if buffer.size != INPUT_LENGTH:
            raise ShapeMismatch(
                f"Expected buffer of {INPUT_LENGTH} floats, got {buffer.size}"
            )

        out = np.asarray(self.runner.invoke(buffer), dtype=np.float32)
        # (1, D) -> first and only row
        if out.ndim > 1:
            out = out[0]
        return out.reshape(-1)

    def embed_face(
        self, image: ImageLike, region: Region, pre_rotate: bool = False
    ) -> np.ndarray:
        """Crop, preprocess and embed one face.

        Args:
            image: Source image, PIL or (H, W, 3) array.
            region: Face region in the (possibly rotated) image.
            pre_rotate: Rotate the source 90 degrees clockwise first.

        Returns:
            Embedding with shape (EMBEDDING_DIM,) as float32.
        """
        return self.embed(prepare_input(image, region, pre_rotate=pre_rotate))
