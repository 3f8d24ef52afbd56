"""Embedding and comparison pipelines over image files."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import numpy as np
from PIL import Image

from facenet_lite.core.face_embed import FaceEmbedder
from facenet_lite.core.image_io import load_rgb
from facenet_lite.core.logger import get_logger
from facenet_lite.core.similarity import cosine_similarity
from facenet_lite.core.types import Region

if TYPE_CHECKING:
    from facenet_lite.config import ModelConfig
    from facenet_lite.core.recognition import ReferenceGallery

logger = get_logger("pipelines.compare")


def load_embedder(config: "ModelConfig") -> FaceEmbedder:
    """Create a FaceEmbedder backed by a cached TFLite runner.

    Args:
        config: Model path and interpreter settings.

    Returns:
        FaceEmbedder ready for inference.

    Raises:
        ModelLoadError: If the model is missing or malformed.
    """
    from facenet_lite.core.model_cache import get_cached_model

    runner = get_cached_model(
        config.model_path,
        num_threads=config.num_threads,
        use_edgetpu=config.use_edgetpu,
    )
    return FaceEmbedder(runner)


def _region_or_full(
    image_rgb: Image.Image, region: Optional[Region], pre_rotate: bool
) -> Region:
    if region is not None:
        return region
    width, height = image_rgb.size
    if pre_rotate:
        width, height = height, width
    return Region.full(width, height)


def _region_payload(region: Region) -> dict[str, int]:
    return {
        "left": region.left,
        "top": region.top,
        "width": region.width,
        "height": region.height,
    }


def _embed_file(
    embedder: FaceEmbedder,
    image_path: Path,
    region: Optional[Region],
    pre_rotate: bool,
) -> tuple[np.ndarray, Region]:
    image_rgb = load_rgb(image_path)
    region = _region_or_full(image_rgb, region, pre_rotate)
    emb = embedder.embed_face(image_rgb, region, pre_rotate=pre_rotate)
    logger.debug(f"Embedded {image_path} region={region}")
    return emb, region


def embed_image(
    *,
    embedder: FaceEmbedder,
    image_path: Path,
    region: Optional[Region] = None,
    pre_rotate: bool = False,
) -> dict[str, Any]:
    """Embed one face crop from an image file.

    Args:
        embedder: Face embedder to use.
        image_path: Image file.
        region: Face region; None means the whole (rotated) image.
        pre_rotate: Rotate the image 90 degrees clockwise before cropping.

    Returns:
        Dictionary with the image path, region used and embedding values.
    """
    emb, region = _embed_file(embedder, image_path, region, pre_rotate)
    return {
        "image_path": str(image_path),
        "region": _region_payload(region),
        "pre_rotate": pre_rotate,
        "embedding": [float(v) for v in emb],
    }


def compare_images(
    *,
    embedder: FaceEmbedder,
    image_a: Path,
    image_b: Path,
    region_a: Optional[Region] = None,
    region_b: Optional[Region] = None,
    pre_rotate: bool = False,
) -> dict[str, Any]:
    """Embed one face from each of two images and compare them.

    Args:
        embedder: Face embedder to use.
        image_a: First image file.
        image_b: Second image file.
        region_a: Face region in the first image (None = whole image).
        region_b: Face region in the second image (None = whole image).
        pre_rotate: Rotate both images 90 degrees clockwise before cropping.

    Returns:
        Dictionary with both inputs and the raw cosine similarity.
    """
    emb_a, region_a = _embed_file(embedder, image_a, region_a, pre_rotate)
    emb_b, region_b = _embed_file(embedder, image_b, region_b, pre_rotate)
    similarity = cosine_similarity(emb_a, emb_b)
    logger.info(f"Similarity {image_a.name} vs {image_b.name} = {similarity:.4f}")

    return {
        "a": {"image_path": str(image_a), "region": _region_payload(region_a)},
        "b": {"image_path": str(image_b), "region": _region_payload(region_b)},
        "pre_rotate": pre_rotate,
        "similarity": similarity,
    }


def rank_image(
    *,
    embedder: FaceEmbedder,
    gallery: "ReferenceGallery",
    image_path: Path,
    region: Optional[Region] = None,
    pre_rotate: bool = False,
    top_k: int = 3,
) -> dict[str, Any]:
    """Embed one face and rank the gallery references against it.

    Args:
        embedder: Face embedder to use.
        gallery: Reference embeddings to rank.
        image_path: Image file.
        region: Face region; None means the whole (rotated) image.
        pre_rotate: Rotate the image 90 degrees clockwise before cropping.
        top_k: Number of matches to return.

    Returns:
        Dictionary with the image path, region and ranked matches.
    """
    emb, region = _embed_file(embedder, image_path, region, pre_rotate)
    matches = gallery.rank(emb, top_k=top_k)

    return {
        "image_path": str(image_path),
        "region": _region_payload(region),
        "pre_rotate": pre_rotate,
        "matches": [{"name": m.name, "similarity": m.similarity} for m in matches],
    }
