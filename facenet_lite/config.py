"""Configuration paths and model resolution for facenet-lite."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from facenet_lite.core.exceptions import ValidationError
from facenet_lite.core.validation import validate_num_threads

MODEL_FILENAME = "facenet_int8_quant.tflite"
MODEL_FILENAME_EDGETPU = "facenet_int8_quant_edgetpu.tflite"
DEFAULT_NUM_THREADS = 4


@dataclass(frozen=True)
class Paths:
    """Configuration paths for data directory structure.

    Attributes:
        data_dir: Root data directory containing models.
    """

    data_dir: Path

    @property
    def models_dir(self) -> Path:
        """Return path to models directory."""
        return self.data_dir / "models"


@dataclass(frozen=True)
class ModelConfig:
    """Settings used to construct the FaceNet inference engine.

    Attributes:
        model_path: Path to the .tflite model file.
        num_threads: Thread-count hint passed to the interpreter.
        use_edgetpu: Whether to use Edge TPU acceleration.
    """

    model_path: Path
    num_threads: int = DEFAULT_NUM_THREADS
    use_edgetpu: bool = False


def get_data_dir_from_env(default: str = "./data") -> Path:
    """Get data directory path from environment variable.

    Args:
        default: Default path if DATA_DIR is not set.

    Returns:
        Path to data directory.
    """
    return Path(os.getenv("DATA_DIR", default))


def get_num_threads_from_env(default: int = DEFAULT_NUM_THREADS) -> int:
    """Get the interpreter thread-count hint from FACENET_NUM_THREADS.

    Args:
        default: Value used when the variable is not set.

    Returns:
        Positive thread count.

    Raises:
        ValidationError: If the variable is not a positive integer.
    """
    raw = os.getenv("FACENET_NUM_THREADS")
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValidationError(
            f"FACENET_NUM_THREADS must be an integer, got {raw!r}"
        ) from e
    validate_num_threads(value)
    return value


def resolve_model_path(paths: Paths, use_edgetpu: bool = False) -> Path:
    """Resolve the FaceNet model file path from the data directory.

    Args:
        paths: Configuration paths object.
        use_edgetpu: Whether to pick the Edge TPU compiled model.

    Returns:
        Path to the model file (existence is not checked here).
    """
    filename = MODEL_FILENAME_EDGETPU if use_edgetpu else MODEL_FILENAME
    return paths.models_dir / filename


def load_model_config(
    data_dir: Optional[Path] = None,
    model_path: Optional[Path] = None,
    num_threads: Optional[int] = None,
    use_edgetpu: bool = False,
) -> ModelConfig:
    """Build a ModelConfig from explicit arguments and the environment.

    An explicit model_path wins over FACENET_MODEL, which wins over the
    default location under the data directory.

    Args:
        data_dir: Data directory (defaults to DATA_DIR).
        model_path: Explicit model file path.
        num_threads: Explicit thread-count hint.
        use_edgetpu: Whether to use Edge TPU acceleration.

    Returns:
        Resolved model configuration.
    """
    if model_path is None:
        env_model = os.getenv("FACENET_MODEL")
        if env_model:
            model_path = Path(env_model)
        else:
            if data_dir is None:
                data_dir = get_data_dir_from_env()
            model_path = resolve_model_path(Paths(data_dir=data_dir), use_edgetpu)

    if num_threads is None:
        num_threads = get_num_threads_from_env()
    else:
        validate_num_threads(num_threads)

    return ModelConfig(
        model_path=model_path, num_threads=num_threads, use_edgetpu=use_edgetpu
    )
