"""Pytest fixtures and test configuration for facenet-lite tests."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import pytest
from PIL import Image

from facenet_lite.core.face_embed import EMBEDDING_DIM, FaceEmbedder
from facenet_lite.core.preprocess import INPUT_SIZE


class FakeRunner:
    """Stand-in for TFLiteRunner that needs no model file.

    The "embedding" samples every 600th input value (the red channel of
    every 200th pixel), so different images give different vectors and
    identical images give identical vectors.
    """

    def __init__(
        self,
        input_shape: tuple[int, ...] = (1, INPUT_SIZE, INPUT_SIZE, 3),
        error: Optional[Exception] = None,
    ) -> None:
        self.input_shape = input_shape
        self.error = error
        self.calls: list[np.ndarray] = []

    @property
    def input_size(self) -> int:
        return int(np.prod(self.input_shape))

    def invoke(self, input_float: np.ndarray) -> np.ndarray:
        self.calls.append(input_float)
        if self.error is not None:
            raise self.error
        sampled = input_float.reshape(-1)[::600][:EMBEDDING_DIM]
        return sampled.reshape(1, EMBEDDING_DIM).astype(np.float32)


def _gradient(width: int, height: int) -> np.ndarray:
    xs = np.linspace(0, 255, width, dtype=np.float32)
    ys = np.linspace(0, 255, height, dtype=np.float32)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[..., 0] = xs[np.newaxis, :]
    arr[..., 1] = ys[:, np.newaxis]
    arr[..., 2] = 255 - xs[np.newaxis, :]
    return arr


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Fake runner with the FaceNet input shape."""
    return FakeRunner()


@pytest.fixture
def runner_factory():
    """Factory for fake runners with custom shape or failure."""
    return FakeRunner


@pytest.fixture
def embedder(fake_runner: FakeRunner) -> FaceEmbedder:
    """FaceEmbedder backed by the fake runner."""
    return FaceEmbedder(fake_runner)


@pytest.fixture
def gray_image() -> Image.Image:
    """160x160 image with every channel at 128."""
    return Image.new("RGB", (INPUT_SIZE, INPUT_SIZE), color=(128, 128, 128))


@pytest.fixture
def gradient_array() -> np.ndarray:
    """320x240 (W x H) RGB gradient as a uint8 array."""
    return _gradient(320, 240)


@pytest.fixture
def image_files(tmp_path: Path) -> dict[str, Path]:
    """Two distinct gradient images and a copy of the first on disk."""
    first = Image.fromarray(_gradient(200, 120))
    second = Image.fromarray(_gradient(120, 200)[:, ::-1, :].copy())

    paths = {
        "first": tmp_path / "first.png",
        "first_copy": tmp_path / "first_copy.png",
        "second": tmp_path / "second.png",
    }
    first.save(paths["first"])
    first.save(paths["first_copy"])
    second.save(paths["second"])
    return paths
