"""Command-line interface for facenet-lite face embedding utilities."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn, Optional

import numpy as np
import typer

from facenet_lite.config import load_model_config
from facenet_lite.core.exceptions import FaceNetLiteError
from facenet_lite.core.face_embed import FaceEmbedder
from facenet_lite.core.logger import setup_logging
from facenet_lite.core.recognition import ReferenceGallery
from facenet_lite.core.similarity import cosine_similarity
from facenet_lite.core.types import Region
from facenet_lite.core.validation import parse_region
from facenet_lite.pipelines.compare import (
    compare_images,
    embed_image,
    load_embedder,
    rank_image,
)

app = typer.Typer(help="FaceNet face embeddings and cosine similarity on TFLite.")


def _fail(error: FaceNetLiteError) -> NoReturn:
    typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _configure_logging(log_level: str) -> None:
    try:
        setup_logging(log_level=log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e


def _region(value: Optional[str]) -> Optional[Region]:
    return parse_region(value) if value else None


def _embedder(
    data_dir: Optional[Path],
    model: Optional[Path],
    num_threads: Optional[int],
    use_edgetpu: bool,
) -> FaceEmbedder:
    config = load_model_config(
        data_dir=data_dir,
        model_path=model,
        num_threads=num_threads,
        use_edgetpu=use_edgetpu,
    )
    return load_embedder(config)


@app.command()
def embed(
    image: Path,
    roi: Optional[str] = typer.Option(None, help="Face region as left,top,width,height."),
    pre_rotate: bool = False,
    output: Optional[Path] = typer.Option(None, help="Write the embedding to a .npy file."),
    data_dir: Optional[Path] = None,
    model: Optional[Path] = None,
    num_threads: Optional[int] = None,
    use_edgetpu: bool = False,
    log_level: str = "INFO",
) -> None:
    """Embed one face crop: rotate -> crop -> resize -> normalize -> FaceNet."""
    _configure_logging(log_level)
    try:
        embedder = _embedder(data_dir, model, num_threads, use_edgetpu)
        result = embed_image(
            embedder=embedder,
            image_path=image,
            region=_region(roi),
            pre_rotate=pre_rotate,
        )
    except FaceNetLiteError as e:
        _fail(e)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        np.save(output, np.asarray(result["embedding"], dtype=np.float32))
        typer.echo(f"Wrote embedding to: {output}", err=True)

    _echo_json(result)


@app.command()
def compare(
    image_a: Path,
    image_b: Path,
    roi_a: Optional[str] = typer.Option(None, help="Face region in IMAGE_A."),
    roi_b: Optional[str] = typer.Option(None, help="Face region in IMAGE_B."),
    pre_rotate: bool = False,
    data_dir: Optional[Path] = None,
    model: Optional[Path] = None,
    num_threads: Optional[int] = None,
    use_edgetpu: bool = False,
    log_level: str = "INFO",
) -> None:
    """Embed a face from each image and print their cosine similarity."""
    _configure_logging(log_level)
    try:
        embedder = _embedder(data_dir, model, num_threads, use_edgetpu)
        result = compare_images(
            embedder=embedder,
            image_a=image_a,
            image_b=image_b,
            region_a=_region(roi_a),
            region_b=_region(roi_b),
            pre_rotate=pre_rotate,
        )
    except FaceNetLiteError as e:
        _fail(e)

    _echo_json(result)


@app.command()
def similarity(embedding_a: Path, embedding_b: Path) -> None:
    """Cosine similarity of two embeddings saved as .npy files."""
    try:
        score = cosine_similarity(np.load(embedding_a), np.load(embedding_b))
    except FaceNetLiteError as e:
        _fail(e)

    _echo_json(
        {"a": str(embedding_a), "b": str(embedding_b), "similarity": score}
    )


@app.command()
def enroll(
    name: str,
    image: Path,
    gallery: Path = typer.Option(..., help="Directory of reference .npy files."),
    roi: Optional[str] = typer.Option(None, help="Face region as left,top,width,height."),
    pre_rotate: bool = False,
    data_dir: Optional[Path] = None,
    model: Optional[Path] = None,
    num_threads: Optional[int] = None,
    use_edgetpu: bool = False,
    log_level: str = "INFO",
) -> None:
    """Embed a face and store it in the gallery under NAME."""
    _configure_logging(log_level)
    try:
        embedder = _embedder(data_dir, model, num_threads, use_edgetpu)
        result = embed_image(
            embedder=embedder,
            image_path=image,
            region=_region(roi),
            pre_rotate=pre_rotate,
        )
        refs = ReferenceGallery.load(gallery) if gallery.is_dir() else ReferenceGallery()
        refs.add(name, np.asarray(result["embedding"], dtype=np.float32))
        refs.save(gallery)
    except FaceNetLiteError as e:
        _fail(e)

    _echo_json(
        {
            "name": name,
            "image_path": result["image_path"],
            "region": result["region"],
            "gallery": str(gallery),
            "references": len(refs),
        }
    )


@app.command()
def rank(
    image: Path,
    gallery: Path = typer.Option(..., help="Directory of reference .npy files."),
    roi: Optional[str] = typer.Option(None, help="Face region as left,top,width,height."),
    pre_rotate: bool = False,
    top_k: int = 3,
    data_dir: Optional[Path] = None,
    model: Optional[Path] = None,
    num_threads: Optional[int] = None,
    use_edgetpu: bool = False,
    log_level: str = "INFO",
) -> None:
    """Rank gallery references by similarity to a face. No threshold is applied."""
    _configure_logging(log_level)
    try:
        refs = ReferenceGallery.load(gallery)
        embedder = _embedder(data_dir, model, num_threads, use_edgetpu)
        result = rank_image(
            embedder=embedder,
            gallery=refs,
            image_path=image,
            region=_region(roi),
            pre_rotate=pre_rotate,
            top_k=top_k,
        )
    except FaceNetLiteError as e:
        _fail(e)

    _echo_json(result)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
