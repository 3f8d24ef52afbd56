"""TensorFlow Lite model runner with optional Edge TPU support."""
from __future__ import annotations

import threading
import time
import warnings
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from tflite_runtime.interpreter import Interpreter, load_delegate

from facenet_lite.config import DEFAULT_NUM_THREADS
from facenet_lite.core.exceptions import (
    InferenceFailure,
    ModelLoadError,
    ShapeMismatch,
)
from facenet_lite.core.logger import get_logger

logger = get_logger("tflite")


@dataclass(frozen=True)
class TFLiteRunner:
    """TensorFlow Lite model runner with optional Edge TPU acceleration.

    One runner owns one interpreter. ``invoke`` holds an internal lock, so a
    runner may be shared across threads but runs one inference at a time;
    create one runner per thread for parallel inference.

    Attributes:
        model_path: Path to the .tflite model file.
        num_threads: Thread-count hint for the interpreter's CPU kernels.
        use_edgetpu: Whether to use Edge TPU acceleration.
        delegate_path: Path to Edge TPU delegate library.
    """

    model_path: Path
    num_threads: int = DEFAULT_NUM_THREADS
    use_edgetpu: bool = False
    delegate_path: str = "libedgetpu.so.1.0"

    def __post_init__(self) -> None:
        """Load the model, allocate tensors and cache tensor details.

        Raises:
            ModelLoadError: If the model file is missing or cannot be loaded.
        """
        path = Path(self.model_path)
        if not path.is_file():
            raise ModelLoadError(f"Model file not found: {path}")

        try:
            interpreter = self._create_interpreter()
            interpreter.allocate_tensors()
            input_details = interpreter.get_input_details()[0]
            output_details = interpreter.get_output_details()[0]
        except (ValueError, RuntimeError, IndexError) as e:
            raise ModelLoadError(f"Failed to load model {path}: {e}") from e

        object.__setattr__(self, "_interpreter", interpreter)
        object.__setattr__(self, "_input_details", input_details)
        object.__setattr__(self, "_output_details", output_details)
        object.__setattr__(self, "_lock", threading.Lock())

        logger.info(
            f"Loaded model {path.name} "
            f"(input={tuple(input_details['shape'])}, "
            f"output={tuple(output_details['shape'])}, "
            f"threads={self.num_threads}, edgetpu={self.use_edgetpu})"
        )

    def _create_interpreter(self) -> Interpreter:
        """Create TFLite interpreter with or without Edge TPU delegate.

        Returns:
            Configured TFLite interpreter.

        Note:
            If Edge TPU is requested but not available, falls back to CPU
            and logs a warning.
        """
        if self.use_edgetpu:
            try:
                delegate = load_delegate(self.delegate_path)
                return Interpreter(
                    model_path=str(self.model_path),
                    experimental_delegates=[delegate],
                    num_threads=self.num_threads,
                )
            except (ValueError, OSError, RuntimeError) as e:
                error_msg = (
                    f"Edge TPU delegate not available ({type(e).__name__}: {e}), "
                    "falling back to CPU mode"
                )
                logger.warning(error_msg)
                warnings.warn(error_msg, RuntimeWarning, stacklevel=2)
                object.__setattr__(self, "use_edgetpu", False)
        return Interpreter(model_path=str(self.model_path), num_threads=self.num_threads)

    @property
    def input_shape(self) -> tuple[int, ...]:
        """Get the input tensor shape.

        Returns:
            Tuple representing input tensor dimensions.
        """
        return tuple(int(d) for d in self._input_details["shape"])

    @property
    def input_size(self) -> int:
        """Number of elements in the input tensor."""
        return int(np.prod(self.input_shape))

    @property
    def output_shape(self) -> tuple[int, ...]:
        """Get the output tensor shape."""
        return tuple(int(d) for d in self._output_details["shape"])

    def _quantize(self, input_float: np.ndarray) -> np.ndarray:
        dtype = self._input_details["dtype"]
        in_scale, in_zero = self._input_details.get("quantization", (0.0, 0))
        if not (in_scale and in_scale > 0):
            return input_float.astype(dtype, copy=False)

        info = np.iinfo(dtype)
        q = np.round(input_float / in_scale + in_zero)
        return np.clip(q, info.min, info.max).astype(dtype)

    def _dequantize(self, out: np.ndarray) -> np.ndarray:
        out_scale, out_zero = self._output_details.get("quantization", (0.0, 0))
        if out_scale and out_scale > 0:
            out = out_scale * (out.astype(np.float32) - out_zero)
        return out.astype(np.float32, copy=False)

    def invoke(self, input_float: np.ndarray) -> np.ndarray:
        """Run inference on input tensor, handling quantization automatically.

        Blocks the calling thread until the interpreter finishes.

        Args:
            input_float: Float input with exactly ``input_size`` elements.

        Returns:
            Output tensor as float32 array (dequantized if needed).

        Raises:
            ShapeMismatch: If the input size does not match the tensor.
            InferenceFailure: If the interpreter fails.
        """
        if input_float.size != self.input_size:
            raise ShapeMismatch(
                f"Input has {input_float.size} elements, "
                f"model expects {self.input_size} {self.input_shape}"
            )
        tensor = self._quantize(np.reshape(input_float, self.input_shape))

        with self._lock:
            start = time.perf_counter()
            try:
                self._interpreter.set_tensor(self._input_details["index"], tensor)
                self._interpreter.invoke()
                # Copy so the next invoke cannot overwrite the result
                out = self._interpreter.get_tensor(
                    self._output_details["index"]
                ).copy()
            except (ValueError, RuntimeError) as e:
                raise InferenceFailure(f"Inference failed: {e}") from e
            elapsed_ms = (time.perf_counter() - start) * 1000.0

        logger.debug(f"FaceNet inference took {elapsed_ms:.1f} ms")
        return self._dequantize(out)
