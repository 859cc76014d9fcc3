"""Runtime interfaces.

``SignatureSource`` is the narrow, read-only view the interface synthesis
needs: signature names and per-tensor metadata. ``ModelRuntime`` adds the
ability to run a signature.
"""

from abc import ABC, abstractmethod
from typing import Dict, List

import numpy as np

from ..swagger.types import DEFAULT_SERVING_SIGNATURE, Signature, TensorInfo


class SignatureSource(ABC):
    """Read-only access to a model's signature metadata."""

    @abstractmethod
    def signature_names(self) -> List[str]:
        """Signature names in discovery order."""

    @abstractmethod
    def input_names(self, signature_name: str) -> List[str]:
        """Input tensor names of a signature in declared order."""

    @abstractmethod
    def tensor_info(self, signature_name: str, input_name: str) -> TensorInfo:
        """Metadata of one input tensor."""

    def output_names(self, signature_name: str) -> List[str]:
        return []

    def output_info(self, signature_name: str, output_name: str) -> TensorInfo:
        raise KeyError(output_name)

    def method_name(self, signature_name: str) -> str:
        return ""


def read_signatures(source: SignatureSource) -> List[Signature]:
    """Materialize every signature of ``source`` in discovery order."""
    signatures = []
    for name in source.signature_names():
        inputs = {
            input_name: source.tensor_info(name, input_name)
            for input_name in source.input_names(name)
        }
        outputs = {
            output_name: source.output_info(name, output_name)
            for output_name in source.output_names(name)
        }
        signatures.append(
            Signature(
                name=name,
                inputs=inputs,
                outputs=outputs,
                method_name=source.method_name(name),
            )
        )
    return signatures


class ModelRuntime(SignatureSource):
    """A loaded model that can run its signatures."""

    framework = "unknown"
    default_signature_name = DEFAULT_SERVING_SIGNATURE

    @abstractmethod
    def predict(self, signature_name: str, inputs: Dict[str, np.ndarray]) -> Dict[str, np.ndarray]:
        """Run ``signature_name`` on named input arrays and return named outputs."""

    def close(self) -> None:
        """Release resources held by the runtime."""
