"""Model caching utilities to avoid reloading models unnecessarily."""

from __future__ import annotations

import threading
from pathlib import Path

from facenet_lite.config import DEFAULT_NUM_THREADS
from facenet_lite.core.logger import get_logger
from facenet_lite.core.tflite import TFLiteRunner

logger = get_logger("model_cache")

_model_cache: dict[str, TFLiteRunner] = {}
_model_lock = threading.Lock()


def get_cached_model(
    model_path: Path,
    num_threads: int = DEFAULT_NUM_THREADS,
    use_edgetpu: bool = False,
) -> TFLiteRunner:
    """Get or create a cached TFLite model runner.

    Models are cached by path, thread hint and edgetpu flag. A failed load
    is not cached.

    Args:
        model_path: Path to the TensorFlow Lite model file.
        num_threads: Thread-count hint for the interpreter.
        use_edgetpu: Whether to use Edge TPU acceleration.

    Returns:
        Cached TFLiteRunner instance.

    Raises:
        ModelLoadError: If the model cannot be loaded.
    """
    cache_key = f"{model_path}:{num_threads}:{use_edgetpu}"

    with _model_lock:
        if cache_key not in _model_cache:
            logger.debug(
                f"Loading model into cache: {model_path} "
                f"(threads={num_threads}, edgetpu={use_edgetpu})"
            )
            _model_cache[cache_key] = TFLiteRunner(
                Path(model_path), num_threads=num_threads, use_edgetpu=use_edgetpu
            )
        else:
            logger.debug(f"Using cached model: {model_path}")

        return _model_cache[cache_key]


def clear_model_cache() -> None:
    """Clear the model cache.

    Useful for testing or when models need to be reloaded.
    """
    with _model_lock:
        _model_cache.clear()
        logger.info("Model cache cleared")


def get_cache_size() -> int:
    """Get the number of models currently cached.

    Returns:
        Number of cached models.
    """
    with _model_lock:
        return len(_model_cache)
