"""Custom exceptions for facenet-lite."""

from __future__ import annotations


class FaceNetLiteError(Exception):
    """Base exception for all facenet-lite errors."""

    pass


class InvalidRegion(FaceNetLiteError):
    """Region of interest falls outside the image bounds."""

    pass


class ModelLoadError(FaceNetLiteError):
    """Error loading TensorFlow Lite model."""

    pass


class ShapeMismatch(FaceNetLiteError):
    """Input buffer does not match the model input tensor size."""

    pass


class InferenceFailure(FaceNetLiteError):
    """The inference engine reported an error while running the model."""

    pass


class DimensionMismatch(FaceNetLiteError):
    """Two embedding vectors have different lengths."""

    pass


class ValidationError(FaceNetLiteError):
    """Input validation error."""

    pass
