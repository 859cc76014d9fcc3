"""Conversion between JSON request payloads and named numpy tensors.

Requests follow the documented envelope ``{"instances": [...]}``. Each
instance maps input names to values; a signature with a single input also
accepts the bare value. Binary values are sent as ``{"b64": "<base64>"}``.

When every input of a signature carries a dynamic leading (batch)
dimension, all instances are stacked and run in one call. Otherwise each
instance is run on its own, with a batch axis of size 1 on its
multi-instance inputs.
"""

import base64
import binascii
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import numpy as np

from ..swagger.schema import is_multi_instance
from ..swagger.types import DYNAMIC_DIM, Signature, TensorInfo
from .errors import InvalidInstanceError, RuntimeErrorBase

_DTYPE_ALIASES = {
    "string": np.object_,
    "double": np.float64,
    "half": np.float16,
    "float": np.float32,
    "bool": np.bool_,
    "bfloat16": np.float32,
}


def numpy_dtype(dtype_name: str) -> np.dtype:
    """Numpy dtype used to hold values of ``dtype_name``."""
    name = str(dtype_name).lower()
    if name in _DTYPE_ALIASES:
        return np.dtype(_DTYPE_ALIASES[name])
    try:
        return np.dtype(name)
    except TypeError as e:
        raise InvalidInstanceError(f"Unsupported tensor dtype '{dtype_name}'") from e


def decode_b64(value: Any) -> Any:
    """Replace ``{"b64": ...}`` objects with decoded bytes, recursively."""
    if isinstance(value, Mapping):
        if set(value) == {"b64"}:
            try:
                return base64.b64decode(value["b64"], validate=True)
            except (binascii.Error, TypeError) as e:
                raise InvalidInstanceError(f"Invalid base64 value: {e}") from e
        return {key: decode_b64(item) for key, item in value.items()}
    if isinstance(value, list):
        return [decode_b64(item) for item in value]
    return value


def _split_instance(signature: Signature, instance: Any, index: int) -> Dict[str, Any]:
    input_names = list(signature.inputs)
    if isinstance(instance, Mapping) and set(instance) != {"b64"}:
        missing = [name for name in input_names if name not in instance]
        unknown = [name for name in instance if name not in signature.inputs]
        if unknown:
            raise InvalidInstanceError(
                f"Instance {index} has unknown inputs {unknown} for signature '{signature.name}'"
            )
        if missing:
            raise InvalidInstanceError(
                f"Instance {index} is missing inputs {missing} for signature '{signature.name}'"
            )
        return {name: instance[name] for name in input_names}
    if len(input_names) == 1:
        return {input_names[0]: instance}
    raise InvalidInstanceError(
        f"Instance {index} must be an object with inputs {input_names} for signature '{signature.name}'"
    )


def _to_array(value: Any, tensor: TensorInfo, name: str) -> np.ndarray:
    dtype = numpy_dtype(tensor.dtype)
    value = decode_b64(value)
    try:
        if dtype == np.object_:
            array = np.array(value, dtype=object)
        else:
            array = np.asarray(value, dtype=dtype)
    except (ValueError, TypeError) as e:
        raise InvalidInstanceError(f"Input '{name}' cannot be converted to {tensor.dtype}: {e}") from e
    return array


def _check_shape(array: np.ndarray, expected: Tuple[Any, ...], name: str) -> None:
    if array.ndim != len(expected):
        raise InvalidInstanceError(
            f"Input '{name}' has rank {array.ndim}, expected {len(expected)}"
        )
    for axis, (actual, declared) in enumerate(zip(array.shape, expected)):
        if declared is not DYNAMIC_DIM and actual != declared:
            raise InvalidInstanceError(
                f"Input '{name}' has size {actual} at dimension {axis}, expected {declared}"
            )


def is_batchable(signature: Signature) -> bool:
    """True when every input carries a dynamic leading dimension."""
    return bool(signature.inputs) and all(
        is_multi_instance(tensor) for tensor in signature.inputs.values()
    )


def instances_to_batches(
    signature: Signature, instances: Sequence[Any]
) -> Tuple[List[Dict[str, np.ndarray]], bool]:
    """Convert request instances into runtime inputs.

    Returns the list of input mappings to run and whether their outputs carry
    a leading instance axis.
    """
    if not instances:
        raise InvalidInstanceError("Request must contain at least one instance")

    rows = [_split_instance(signature, instance, index) for index, instance in enumerate(instances)]

    if is_batchable(signature):
        batch = {}
        for name, tensor in signature.inputs.items():
            array = _to_array([row[name] for row in rows], tensor, name)
            _check_shape(array, tensor.shape, name)
            batch[name] = array
        return [batch], True

    # Multi-instance inputs still get their batch axis, of size 1.
    expanded = any(is_multi_instance(tensor) for tensor in signature.inputs.values())
    batches = []
    for row in rows:
        converted = {}
        for name, tensor in signature.inputs.items():
            array = _to_array(row[name], tensor, name)
            if is_multi_instance(tensor):
                _check_shape(array, tensor.shape[1:], name)
                array = array[np.newaxis]
            else:
                _check_shape(array, tensor.shape, name)
            converted[name] = array
        batches.append(converted)
    return batches, expanded


def to_json_value(value: Any) -> Any:
    """Convert numpy values (and bytes) into JSON-serializable values."""
    if isinstance(value, np.ndarray):
        return [to_json_value(item) for item in value] if value.ndim else to_json_value(value.item())
    if isinstance(value, np.generic):
        return to_json_value(value.item())
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return {"b64": base64.b64encode(value).decode("ascii")}
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    return value


def _prediction(row: Dict[str, Any]) -> Any:
    if len(row) == 1:
        return to_json_value(next(iter(row.values())))
    return {name: to_json_value(value) for name, value in row.items()}


def batches_to_predictions(
    outputs: Sequence[Dict[str, np.ndarray]], batched: bool, count: int
) -> List[Any]:
    """One JSON prediction per request instance.

    When ``batched`` each output is split along its leading axis. A single
    named output is emitted as its value; several outputs are emitted as a
    mapping of output name to value.
    """
    if not batched:
        return [_prediction(result) for result in outputs]

    predictions = []
    for result in outputs:
        values = {name: np.asarray(value) for name, value in result.items()}
        rows = {value.shape[0] if value.ndim else None for value in values.values()}
        if len(rows) != 1 or None in rows:
            raise RuntimeErrorBase("Outputs do not share a leading instance dimension")
        for index in range(rows.pop()):
            predictions.append(_prediction({name: value[index] for name, value in values.items()}))

    if len(predictions) != count:
        raise RuntimeErrorBase(
            f"Model returned {len(predictions)} rows for {count} instances"
        )
    return predictions
