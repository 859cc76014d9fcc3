"""Shared fixtures for signature serving tests."""

import json

import joblib
import pytest

from sigserve.swagger.types import Signature, TensorInfo
from tests.simple_estimators import LinearEstimator


@pytest.fixture
def image_signature():
    """Single float input with a dynamic batch dimension."""
    return Signature(
        name="serving_default",
        inputs={"image_input": TensorInfo("float32", (None, 784))},
        outputs={"scores": TensorInfo("float32", (None, 10))},
    )


@pytest.fixture
def mtcars_signature():
    """Two rank-1 batched inputs, as exported by a linear model on mtcars."""
    return Signature(
        name="serving_default",
        inputs={
            "disp": TensorInfo("float64", (None,)),
            "cyl": TensorInfo("float64", (None,)),
        },
        outputs={"mpg": TensorInfo("float64", (None,))},
    )


def write_manifest(model_dir, manifest):
    with open(model_dir / "signatures.json", "w") as f:
        json.dump(manifest, f)


@pytest.fixture
def joblib_manifest():
    """Manifest with the default signature listed second."""
    return {
        "signatures": {
            "features": {
                "method": "predict",
                "inputs": {"x": {"dtype": "float32", "shape": [-1, 2]}},
                "outputs": {"y": {"dtype": "float32", "shape": [-1]}},
            },
            "serving_default": {
                "inputs": {
                    "disp": {"dtype": "float64", "shape": [-1]},
                    "cyl": {"dtype": "float64", "shape": [None]},
                },
                "outputs": {"mpg": {"dtype": "float64", "shape": [-1]}},
            },
            "parts": {
                "method": "score_parts",
                "inputs": {"x": {"dtype": "float32", "shape": [-1, 2]}},
            },
        }
    }


@pytest.fixture
def joblib_model_dir(tmp_path, joblib_manifest):
    """Model directory with ``model.joblib`` and ``signatures.json``."""
    model_dir = tmp_path / "model"
    model_dir.mkdir()
    joblib.dump(LinearEstimator(weights=[1.0, 10.0], bias=0.5), model_dir / "model.joblib")
    write_manifest(model_dir, joblib_manifest)
    return model_dir


@pytest.fixture
def mixed_signature():
    """One batched input next to one fixed-shape input."""
    return Signature(
        name="serving_default",
        inputs={
            "history": TensorInfo("float32", (None, 3)),
            "region": TensorInfo("float32", (2,)),
        },
        outputs={"score": TensorInfo("float64", (None,))},
    )


@pytest.fixture
def mixed_model_dir(tmp_path):
    """Joblib model whose only signature mixes batched and fixed-shape inputs."""
    model_dir = tmp_path / "mixed"
    model_dir.mkdir()
    joblib.dump(
        LinearEstimator(weights=[1.0, 1.0, 1.0, 10.0, 100.0], bias=0.5),
        model_dir / "model.joblib",
    )
    write_manifest(model_dir, {
        "signatures": {
            "serving_default": {
                "inputs": {
                    "history": {"dtype": "float32", "shape": [-1, 3]},
                    "region": {"dtype": "float32", "shape": [2]},
                },
                "outputs": {"score": {"dtype": "float64", "shape": [-1]}},
            },
        }
    })
    return model_dir
