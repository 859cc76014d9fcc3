"""Runtime for TensorFlow SavedModel directories.

Requires the optional ``tensorflow`` dependency
(``pip install signature-serving[tensorflow]``); it is imported when a
SavedModel is loaded so the rest of the package works without it.
"""

from pathlib import Path
from typing import Any, Dict, List, Union

import numpy as np
import structlog

from ..swagger.types import TensorInfo
from .base import ModelRuntime
from .errors import ModelLoadError, UnknownSignatureError

logger = structlog.get_logger("runtime.tensorflow")

SAVED_MODEL_FILENAME = "saved_model.pb"


def _tensor_info(spec: Any) -> TensorInfo:
    if spec.shape.rank is None:
        raise ModelLoadError(f"Tensor '{spec.name}' has unknown rank")
    return TensorInfo.from_dims(spec.dtype.name, spec.shape.as_list())


class TensorFlowModelRuntime(ModelRuntime):
    """Serve the signatures of a loaded SavedModel."""

    framework = "tensorflow"

    def __init__(self, loaded: Any, default_signature_name: str):
        self.loaded = loaded
        self.default_signature_name = default_signature_name
        self._functions = dict(loaded.signatures)
        self._inputs: Dict[str, Dict[str, Any]] = {}
        self._outputs: Dict[str, Dict[str, Any]] = {}
        for name, function in self._functions.items():
            _, input_specs = function.structured_input_signature
            self._inputs[name] = dict(input_specs)
            outputs = function.structured_outputs
            self._outputs[name] = dict(outputs) if isinstance(outputs, dict) else {}

    @classmethod
    def load(cls, model_path: Union[str, Path]) -> "TensorFlowModelRuntime":
        model_dir = Path(model_path)
        if not (model_dir / SAVED_MODEL_FILENAME).exists():
            raise ModelLoadError(f"SavedModel not found: {model_dir}")

        import tensorflow as tf

        loaded = tf.saved_model.load(str(model_dir))
        runtime = cls(loaded, tf.saved_model.DEFAULT_SERVING_SIGNATURE_DEF_KEY)
        logger.info(
            "Loaded SavedModel",
            model_path=str(model_dir),
            signatures=runtime.signature_names(),
        )
        return runtime

    def _specs(self, table: Dict[str, Dict[str, Any]], signature_name: str) -> Dict[str, Any]:
        try:
            return table[signature_name]
        except KeyError:
            raise UnknownSignatureError(signature_name) from None

    def signature_names(self) -> List[str]:
        return list(self._functions)

    def input_names(self, signature_name: str) -> List[str]:
        return list(self._specs(self._inputs, signature_name))

    def tensor_info(self, signature_name: str, input_name: str) -> TensorInfo:
        return _tensor_info(self._specs(self._inputs, signature_name)[input_name])

    def output_names(self, signature_name: str) -> List[str]:
        return list(self._specs(self._outputs, signature_name))

    def output_info(self, signature_name: str, output_name: str) -> TensorInfo:
        return _tensor_info(self._specs(self._outputs, signature_name)[output_name])

    def predict(self, signature_name: str, inputs: Dict[str, np.ndarray]) -> Dict[str, np.ndarray]:
        import tensorflow as tf

        function = self._functions.get(signature_name)
        if function is None:
            raise UnknownSignatureError(signature_name)

        specs = self._inputs[signature_name]
        feeds = {
            name: tf.constant(value, dtype=specs[name].dtype)
            for name, value in inputs.items()
        }
        outputs = function(**feeds)
        return {name: tensor.numpy() for name, tensor in outputs.items()}
