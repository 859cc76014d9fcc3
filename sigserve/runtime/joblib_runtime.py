"""Runtime for joblib-serialized estimators.

The model directory holds ``model.joblib`` and a ``signatures.json``
manifest (see ``manifest``). Each signature calls one estimator method
(``predict`` unless the manifest says otherwise):

- a single input is passed to the method as-is;
- several inputs are flattened per row and column-stacked in declared order,
  which is what tabular estimators expect.

The result is bound to the first declared output (``predictions`` when the
manifest declares none). Methods returning a mapping are passed through.
"""

from pathlib import Path
from typing import Any, Dict, List, Union

import joblib
import numpy as np
import structlog

from ..swagger.schema import is_multi_instance
from ..swagger.types import TensorInfo
from .base import ModelRuntime
from .errors import ModelLoadError, UnknownSignatureError
from .manifest import MANIFEST_FILENAME, ManifestSignatureSource

logger = structlog.get_logger("runtime.joblib")

MODEL_FILENAME = "model.joblib"
DEFAULT_OUTPUT_NAME = "predictions"


class JoblibModelRuntime(ModelRuntime):
    """Serve an estimator loaded with ``joblib``."""

    framework = "joblib"

    def __init__(self, estimator: Any, signatures: ManifestSignatureSource):
        self.estimator = estimator
        self.signatures = signatures

    @classmethod
    def load(cls, model_path: Union[str, Path]) -> "JoblibModelRuntime":
        model_dir = Path(model_path)
        model_file = model_dir / MODEL_FILENAME
        if not model_file.exists():
            raise ModelLoadError(f"Joblib model not found: {model_file}")

        signatures = ManifestSignatureSource.from_file(model_dir / MANIFEST_FILENAME)
        estimator = joblib.load(str(model_file))

        logger.info(
            "Loaded joblib model",
            model_path=str(model_dir),
            estimator=type(estimator).__name__,
            signatures=signatures.signature_names(),
        )
        return cls(estimator, signatures)

    def signature_names(self) -> List[str]:
        return self.signatures.signature_names()

    def input_names(self, signature_name: str) -> List[str]:
        return self.signatures.input_names(signature_name)

    def tensor_info(self, signature_name: str, input_name: str) -> TensorInfo:
        return self.signatures.tensor_info(signature_name, input_name)

    def output_names(self, signature_name: str) -> List[str]:
        return self.signatures.output_names(signature_name)

    def output_info(self, signature_name: str, output_name: str) -> TensorInfo:
        return self.signatures.output_info(signature_name, output_name)

    def method_name(self, signature_name: str) -> str:
        return self.signatures.method_name(signature_name)

    def predict(self, signature_name: str, inputs: Dict[str, np.ndarray]) -> Dict[str, np.ndarray]:
        if signature_name not in self.signature_names():
            raise UnknownSignatureError(signature_name)

        method_name = self.method_name(signature_name) or "predict"
        method = getattr(self.estimator, method_name, None)
        if method is None:
            raise ModelLoadError(
                f"Estimator {type(self.estimator).__name__} has no method '{method_name}'"
            )

        input_names = self.input_names(signature_name)
        if len(input_names) == 1:
            features = inputs[input_names[0]]
        else:
            columns = []
            for name in input_names:
                value = np.asarray(inputs[name])
                if is_multi_instance(self.tensor_info(signature_name, name)) and value.ndim:
                    columns.append(value.reshape(value.shape[0], -1))
                else:
                    columns.append(value.reshape(1, -1))
            features = np.hstack(columns)

        result = method(features)
        if isinstance(result, dict):
            return {name: np.asarray(value) for name, value in result.items()}

        output_names = self.output_names(signature_name) or [DEFAULT_OUTPUT_NAME]
        return {output_names[0]: np.asarray(result)}
