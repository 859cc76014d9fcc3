"""Tests for signature sources, runtimes and framework detection."""

import json

import numpy as np
import pytest

from sigserve.runtime.base import read_signatures
from sigserve.runtime.errors import ModelLoadError, UnknownSignatureError
from sigserve.runtime.joblib_runtime import JoblibModelRuntime
from sigserve.runtime.loader import detect_framework, load_runtime
from sigserve.runtime.manifest import ManifestSignatureSource
from sigserve.runtime.tensors import batches_to_predictions, instances_to_batches
from sigserve.swagger.types import TensorInfo


def test_manifest_source(joblib_manifest):
    source = ManifestSignatureSource(joblib_manifest)

    assert source.signature_names() == ["features", "serving_default", "parts"]
    assert source.input_names("serving_default") == ["disp", "cyl"]
    assert source.tensor_info("features", "x") == TensorInfo("float32", (None, 2))
    assert source.tensor_info("serving_default", "cyl").shape == (None,)
    assert source.output_names("parts") == []
    assert source.method_name("parts") == "score_parts"
    assert source.method_name("serving_default") == ""


def test_manifest_unknown_signature(joblib_manifest):
    source = ManifestSignatureSource(joblib_manifest)

    with pytest.raises(UnknownSignatureError):
        source.input_names("missing")


def test_manifest_requires_signatures():
    with pytest.raises(ModelLoadError):
        ManifestSignatureSource({"models": {}})


def test_manifest_requires_dtype():
    with pytest.raises(ModelLoadError, match="no dtype"):
        ManifestSignatureSource({"signatures": {"s": {"inputs": {"x": {"shape": [1]}}}}})


def test_manifest_from_file(tmp_path, joblib_manifest):
    (tmp_path / "signatures.json").write_text(json.dumps(joblib_manifest))

    source = ManifestSignatureSource.from_file(tmp_path)

    assert source.signature_names()[0] == "features"


def test_manifest_from_file_errors(tmp_path):
    with pytest.raises(ModelLoadError, match="not found"):
        ManifestSignatureSource.from_file(tmp_path)

    (tmp_path / "signatures.json").write_text("{not json")
    with pytest.raises(ModelLoadError, match="not valid JSON"):
        ManifestSignatureSource.from_file(tmp_path)


def test_read_signatures_keeps_discovery_order(joblib_manifest):
    signatures = read_signatures(ManifestSignatureSource(joblib_manifest))

    assert [signature.name for signature in signatures] == ["features", "serving_default", "parts"]
    assert list(signatures[1].inputs) == ["disp", "cyl"]
    assert list(signatures[1].outputs) == ["mpg"]
    assert signatures[0].method_name == "predict"


def test_joblib_runtime_multi_input(joblib_model_dir):
    runtime = JoblibModelRuntime.load(joblib_model_dir)

    outputs = runtime.predict(
        "serving_default",
        {"disp": np.array([100.0, 200.0]), "cyl": np.array([4.0, 6.0])},
    )

    np.testing.assert_allclose(outputs["mpg"], [140.5, 260.5])


def test_joblib_runtime_single_input(joblib_model_dir):
    runtime = JoblibModelRuntime.load(joblib_model_dir)

    outputs = runtime.predict("features", {"x": np.array([[1.0, 1.0]], dtype=np.float32)})

    np.testing.assert_allclose(outputs["y"], [11.5])


def test_joblib_runtime_mapping_result(joblib_model_dir):
    runtime = JoblibModelRuntime.load(joblib_model_dir)

    outputs = runtime.predict("parts", {"x": np.array([[2.0, 0.0]])})

    assert set(outputs) == {"linear", "bias"}
    np.testing.assert_allclose(outputs["linear"], [2.0])


def test_joblib_runtime_unknown_signature(joblib_model_dir):
    runtime = JoblibModelRuntime.load(joblib_model_dir)

    with pytest.raises(UnknownSignatureError):
        runtime.predict("missing", {})


def test_joblib_runtime_missing_model(tmp_path):
    with pytest.raises(ModelLoadError, match="not found"):
        JoblibModelRuntime.load(tmp_path)


def test_detect_framework(tmp_path, joblib_model_dir):
    assert detect_framework(joblib_model_dir) == "joblib"

    (tmp_path / "saved").mkdir()
    (tmp_path / "saved" / "saved_model.pb").write_bytes(b"")
    assert detect_framework(tmp_path / "saved") == "tensorflow"

    (tmp_path / "empty").mkdir()
    with pytest.raises(ModelLoadError, match="Could not detect"):
        detect_framework(tmp_path / "empty")

    with pytest.raises(ModelLoadError, match="not found"):
        detect_framework(tmp_path / "missing")


def test_load_runtime(joblib_model_dir):
    runtime = load_runtime(joblib_model_dir)

    assert isinstance(runtime, JoblibModelRuntime)
    assert runtime.framework == "joblib"
    assert runtime.default_signature_name == "serving_default"

    with pytest.raises(ModelLoadError, match="Unsupported framework"):
        load_runtime(joblib_model_dir, framework="onnx")


def test_joblib_runtime_mixed_inputs(mixed_model_dir, mixed_signature):
    runtime = JoblibModelRuntime.load(mixed_model_dir)
    instances = [
        {"history": [1.0, 2.0, 3.0], "region": [1.0, 0.0]},
        {"history": [0.0, 0.0, 0.0], "region": [0.0, 1.0]},
    ]

    batches, batched = instances_to_batches(mixed_signature, instances)
    outputs = [runtime.predict("serving_default", batch) for batch in batches]

    assert batches_to_predictions(outputs, batched, len(instances)) == [16.5, 100.5]
