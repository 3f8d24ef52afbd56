"""Ranking of a face embedding against named reference embeddings."""
from __future__ import annotations

import math
from pathlib import Path
from typing import Optional

import numpy as np

from facenet_lite.core.exceptions import ValidationError
from facenet_lite.core.logger import get_logger
from facenet_lite.core.similarity import cosine_similarity
from facenet_lite.core.types import Match
from facenet_lite.core.validation import validate_top_k

logger = get_logger("recognition")


class ReferenceGallery:
    """Named reference embeddings, one vector per name.

    The gallery only ranks; deciding whether the best match is the same
    identity is left to the caller.

    Attributes:
        references: Mapping of name to flattened embedding.
    """

    def __init__(self, references: Optional[dict[str, np.ndarray]] = None) -> None:
        """Initialize reference gallery.

        Args:
            references: Optional initial mapping of name to embedding.
        """
        self.references: dict[str, np.ndarray] = {}
        for name, emb in (references or {}).items():
            self.add(name, emb)

    def __len__(self) -> int:
        return len(self.references)

    @staticmethod
    def load(directory: Path) -> "ReferenceGallery":
        """Load all reference embeddings stored as ``<name>.npy`` files.

        Args:
            directory: Directory containing .npy files.

        Returns:
            ReferenceGallery with one entry per file.

        Raises:
            ValidationError: If the directory does not exist.
        """
        if not directory.is_dir():
            raise ValidationError(f"Gallery directory not found: {directory}")

        gallery = ReferenceGallery()
        for f in sorted(directory.glob("*.npy")):
            gallery.add(f.stem, np.load(f))

        logger.info(f"Loaded {len(gallery)} reference embeddings from {directory}")
        return gallery

    def add(self, name: str, embedding: np.ndarray) -> None:
        """Add or replace a reference embedding.

        Args:
            name: Reference name, also used as the file stem on save.
            embedding: Embedding vector (any shape, flattened).

        Raises:
            ValidationError: If the name is empty or contains a path separator.
        """
        if not name or "/" in name or "\\" in name:
            raise ValidationError(f"Invalid reference name: {name!r}")
        self.references[name] = np.asarray(embedding, dtype=np.float32).reshape(-1)

    def save(self, directory: Path) -> None:
        """Write every reference embedding as ``<name>.npy``.

        Args:
            directory: Target directory, created if missing.
        """
        directory.mkdir(parents=True, exist_ok=True)
        for name, emb in self.references.items():
            np.save(directory / f"{name}.npy", emb)

    def rank(self, embedding: np.ndarray, top_k: int = 3) -> list[Match]:
        """Rank references by cosine similarity to an embedding.

        Args:
            embedding: Query face embedding.
            top_k: Number of matches to return.

        Returns:
            Up to top_k Match objects, most similar first. NaN
            similarities sort last.

        Raises:
            DimensionMismatch: If a reference has a different length.
            ValidationError: If top_k is not a positive integer.
        """
        validate_top_k(top_k)

        matches = [
            Match(name=name, similarity=cosine_similarity(embedding, ref))
            for name, ref in self.references.items()
        ]
        matches.sort(
            key=lambda m: (not math.isnan(m.similarity), m.similarity), reverse=True
        )
        return matches[:top_k]
