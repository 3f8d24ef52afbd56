"""Tests for the typer command-line interface."""
from __future__ import annotations

import json

import numpy as np
import pytest
from typer.testing import CliRunner

from facenet_lite import cli
from facenet_lite.core.exceptions import ModelLoadError
from facenet_lite.core.logger import setup_logging

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """Rebind log handlers to the real stderr after each command."""
    yield
    setup_logging(log_level="INFO")


@pytest.fixture
def patched_embedder(monkeypatch, embedder):
    """Make every command use the fake-runner embedder."""
    monkeypatch.setattr(cli, "load_embedder", lambda config: embedder)
    return embedder


class TestSimilarityCommand:
    """Tests for the model-free similarity command."""

    def test_similarity(self, tmp_path):
        """Test two saved embeddings are compared."""
        a = np.zeros(128, dtype=np.float32)
        a[0] = 1.0
        np.save(tmp_path / "a.npy", a)
        np.save(tmp_path / "b.npy", a * 2)

        result = runner.invoke(
            cli.app, ["similarity", str(tmp_path / "a.npy"), str(tmp_path / "b.npy")]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["similarity"] == 1.0

    def test_similarity_dimension_mismatch(self, tmp_path):
        """Test mismatched lengths exit with an error."""
        np.save(tmp_path / "a.npy", np.ones(128, dtype=np.float32))
        np.save(tmp_path / "b.npy", np.ones(64, dtype=np.float32))

        result = runner.invoke(
            cli.app, ["similarity", str(tmp_path / "a.npy"), str(tmp_path / "b.npy")]
        )
        assert result.exit_code == 1


class TestModelCommands:
    """Tests for commands that run the embedder."""

    def test_embed_writes_npy(self, patched_embedder, image_files, tmp_path):
        """Test embed prints JSON and saves the vector."""
        out = tmp_path / "out" / "emb.npy"
        result = runner.invoke(
            cli.app,
            [
                "embed",
                str(image_files["first"]),
                "--roi",
                "0,0,100,100",
                "--output",
                str(out),
                "--model",
                "unused.tflite",
                "--log-level",
                "WARNING",
            ],
        )

        assert result.exit_code == 0, result.output
        assert np.load(out).shape == (128,)

    def test_embed_invalid_roi(self, patched_embedder, image_files):
        """Test an out-of-bounds region exits with code 1."""
        result = runner.invoke(
            cli.app,
            [
                "embed",
                str(image_files["first"]),
                "--roi",
                "150,0,100,100",
                "--model",
                "unused.tflite",
                "--log-level",
                "WARNING",
            ],
        )
        assert result.exit_code == 1

    def test_model_load_error(self, monkeypatch, image_files):
        """Test a missing model is reported instead of a traceback."""

        def _missing(config):
            raise ModelLoadError(f"Model file not found: {config.model_path}")

        monkeypatch.setattr(cli, "load_embedder", _missing)
        result = runner.invoke(
            cli.app,
            [
                "compare",
                str(image_files["first"]),
                str(image_files["second"]),
                "--model",
                "missing.tflite",
                "--log-level",
                "WARNING",
            ],
        )
        assert result.exit_code == 1
        assert not isinstance(result.exception, ModelLoadError)

    def test_enroll_then_rank(self, patched_embedder, image_files, tmp_path):
        """Test enrolled faces are ranked by the rank command."""
        gallery = tmp_path / "gallery"
        for name, key in (("alice", "first"), ("bob", "second")):
            result = runner.invoke(
                cli.app,
                [
                    "enroll",
                    name,
                    str(image_files[key]),
                    "--gallery",
                    str(gallery),
                    "--model",
                    "unused.tflite",
                    "--log-level",
                    "WARNING",
                ],
            )
            assert result.exit_code == 0, result.output

        assert sorted(p.name for p in gallery.glob("*.npy")) == ["alice.npy", "bob.npy"]

        result = runner.invoke(
            cli.app,
            [
                "rank",
                str(image_files["first_copy"]),
                "--gallery",
                str(gallery),
                "--model",
                "unused.tflite",
                "--log-level",
                "WARNING",
            ],
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["matches"][0]["name"] == "alice"


class TestLogLevelOption:
    """Tests for --log-level handling."""

    def test_unknown_level_is_usage_error(self, image_files):
        """Test an unknown level name is rejected before any work."""
        result = runner.invoke(
            cli.app, ["embed", str(image_files["first"]), "--log-level", "chatty"]
        )
        assert result.exit_code == 2
