"""Tests for request/response tensor conversion."""

import base64

import numpy as np
import pytest

from sigserve.runtime.errors import InvalidInstanceError, RuntimeErrorBase
from sigserve.runtime.tensors import (
    batches_to_predictions,
    decode_b64,
    instances_to_batches,
    is_batchable,
    numpy_dtype,
    to_json_value,
)
from sigserve.swagger.schema import build_signature_schema
from sigserve.swagger.types import Signature, TensorInfo


def test_numpy_dtype_aliases():
    assert numpy_dtype("float32") == np.float32
    assert numpy_dtype("double") == np.float64
    assert numpy_dtype("string") == np.object_
    assert numpy_dtype("bool") == np.bool_
    assert numpy_dtype("int64") == np.int64


def test_numpy_dtype_unknown():
    with pytest.raises(InvalidInstanceError):
        numpy_dtype("variant")


def test_decode_b64_nested():
    encoded = base64.b64encode(b"\x00\x01").decode("ascii")

    assert decode_b64({"b64": encoded}) == b"\x00\x01"
    assert decode_b64([{"b64": encoded}, "plain"]) == [b"\x00\x01", "plain"]


def test_decode_b64_invalid():
    with pytest.raises(InvalidInstanceError):
        decode_b64({"b64": "not base64!"})


def test_batched_instances_are_stacked(mtcars_signature):
    instances = [{"disp": 160.0, "cyl": 6}, {"disp": 108.0, "cyl": 4}]

    batches, batched = instances_to_batches(mtcars_signature, instances)

    assert batched is True
    assert len(batches) == 1
    np.testing.assert_array_equal(batches[0]["disp"], np.array([160.0, 108.0]))
    np.testing.assert_array_equal(batches[0]["cyl"], np.array([6.0, 4.0]))
    assert batches[0]["cyl"].dtype == np.float64


def test_single_input_shorthand(image_signature):
    """A bare value is accepted for single-input signatures."""
    instances = [[0.5] * 784, {"image_input": [0.25] * 784}]

    batches, batched = instances_to_batches(image_signature, instances)

    assert batched is True
    assert batches[0]["image_input"].shape == (2, 784)
    assert batches[0]["image_input"].dtype == np.float32


def test_static_dimension_mismatch(image_signature):
    with pytest.raises(InvalidInstanceError, match="expected 784"):
        instances_to_batches(image_signature, [[0.0] * 10])


def test_ragged_instances_rejected(image_signature):
    with pytest.raises(InvalidInstanceError):
        instances_to_batches(image_signature, [[0.0] * 784, [0.0] * 3])


def test_missing_and_unknown_inputs(mtcars_signature):
    with pytest.raises(InvalidInstanceError, match="missing"):
        instances_to_batches(mtcars_signature, [{"disp": 1.0}])
    with pytest.raises(InvalidInstanceError, match="unknown"):
        instances_to_batches(mtcars_signature, [{"disp": 1.0, "cyl": 4, "hp": 110}])
    with pytest.raises(InvalidInstanceError, match="must be an object"):
        instances_to_batches(mtcars_signature, [1.0])


def test_empty_instances(mtcars_signature):
    with pytest.raises(InvalidInstanceError):
        instances_to_batches(mtcars_signature, [])


def test_unbatched_signature_runs_per_instance():
    """Without a dynamic leading dim each instance is its own call."""
    signature = Signature(name="fixed", inputs={"x": TensorInfo("int32", (2,))})

    batches, batched = instances_to_batches(signature, [[1, 2], {"x": [3, 4]}])

    assert batched is False
    assert len(batches) == 2
    np.testing.assert_array_equal(batches[1]["x"], np.array([3, 4], dtype=np.int32))


def test_string_input_with_b64():
    signature = Signature(name="text", inputs={"text": TensorInfo("string", (None,))})
    encoded = base64.b64encode(b"\xff\xfe").decode("ascii")

    batches, batched = instances_to_batches(signature, ["hello", {"b64": encoded}])

    assert batched is True
    assert list(batches[0]["text"]) == ["hello", b"\xff\xfe"]


def test_is_batchable(mtcars_signature):
    mixed = Signature(
        name="mixed",
        inputs={"a": TensorInfo("float32", (None,)), "b": TensorInfo("float32", (3,))},
    )

    assert is_batchable(mtcars_signature)
    assert not is_batchable(mixed)
    assert not is_batchable(Signature(name="empty"))


def test_to_json_value():
    assert to_json_value(np.array([[1, 2], [3, 4]], dtype=np.int64)) == [[1, 2], [3, 4]]
    assert to_json_value(np.float32(1.5)) == 1.5
    assert to_json_value(b"text") == "text"
    assert to_json_value(b"\xff") == {"b64": base64.b64encode(b"\xff").decode("ascii")}


def test_batched_predictions_single_output():
    outputs = [{"mpg": np.array([21.0, 22.8])}]

    assert batches_to_predictions(outputs, batched=True, count=2) == [21.0, 22.8]


def test_batched_predictions_multiple_outputs():
    outputs = [{"classes": np.array([1, 0]), "scores": np.array([[0.1, 0.9], [0.8, 0.2]])}]

    predictions = batches_to_predictions(outputs, batched=True, count=2)

    assert predictions == [
        {"classes": 1, "scores": [0.1, 0.9]},
        {"classes": 0, "scores": [0.8, 0.2]},
    ]


def test_unbatched_predictions():
    outputs = [{"y": np.array([1.0, 2.0])}, {"y": np.array([3.0, 4.0])}]

    assert batches_to_predictions(outputs, batched=False, count=2) == [[1.0, 2.0], [3.0, 4.0]]


def test_batched_output_row_mismatch():
    with pytest.raises(RuntimeErrorBase):
        batches_to_predictions([{"y": np.array([1.0])}], batched=True, count=2)


def test_empty_object_is_not_a_bare_value(image_signature):
    with pytest.raises(InvalidInstanceError, match="missing"):
        instances_to_batches(image_signature, [{}])


def test_mixed_signature_accepts_documented_example(mixed_signature):
    """Batched inputs keep a size-1 batch axis when instances run one by one."""
    schema = build_signature_schema(mixed_signature).to_dict()
    properties = schema["properties"]["instances"]["items"]["properties"]
    instance = {name: prop["example"] for name, prop in properties.items()}

    batches, batched = instances_to_batches(mixed_signature, [instance, instance])

    assert batched is True
    assert len(batches) == 2
    assert batches[0]["history"].shape == (1, 3)
    assert batches[0]["region"].shape == (2,)


def test_mixed_signature_checks_row_shape(mixed_signature):
    with pytest.raises(InvalidInstanceError, match="expected 3"):
        instances_to_batches(mixed_signature, [{"history": [0.0] * 4, "region": [0.0, 0.0]}])
    with pytest.raises(InvalidInstanceError, match="rank"):
        instances_to_batches(mixed_signature, [{"history": [[0.0] * 3], "region": [0.0, 0.0]}])


def test_per_instance_batches_are_split_into_rows():
    outputs = [{"score": np.array([1.0])}, {"score": np.array([2.0])}]

    assert batches_to_predictions(outputs, batched=True, count=2) == [1.0, 2.0]


def test_outputs_with_different_row_counts():
    outputs = [{"a": np.array([1.0, 2.0]), "b": np.array([1.0])}]

    with pytest.raises(RuntimeErrorBase, match="leading instance dimension"):
        batches_to_predictions(outputs, batched=True, count=2)
