"""Signature metadata from a JSON manifest.

Layout of ``signatures.json``::

    {
      "signatures": {
        "serving_default": {
          "method": "predict",
          "inputs": {"x": {"dtype": "float32", "shape": [-1, 4]}},
          "outputs": {"y": {"dtype": "float32", "shape": [-1]}}
        }
      }
    }

Dynamic dimensions may be written as ``-1`` or ``null``. Signature and
tensor order follow the file.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import structlog

from ..swagger.types import TensorInfo
from .base import SignatureSource
from .errors import ModelLoadError, UnknownSignatureError

logger = structlog.get_logger("runtime.manifest")

MANIFEST_FILENAME = "signatures.json"


class ManifestSignatureSource(SignatureSource):
    """``SignatureSource`` backed by a parsed manifest."""

    def __init__(self, manifest: Dict[str, Any]):
        signatures = manifest.get("signatures")
        if not isinstance(signatures, dict):
            raise ModelLoadError("Manifest must contain a 'signatures' mapping")
        self._signatures: Dict[str, Dict[str, Any]] = {}
        for name, entry in signatures.items():
            self._signatures[name] = {
                "method": entry.get("method", ""),
                "inputs": self._parse_tensors(name, entry.get("inputs", {})),
                "outputs": self._parse_tensors(name, entry.get("outputs", {})),
            }

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ManifestSignatureSource":
        path = Path(path)
        if path.is_dir():
            path = path / MANIFEST_FILENAME
        try:
            with open(path, "r") as f:
                manifest = json.load(f)
        except FileNotFoundError as e:
            raise ModelLoadError(f"Signature manifest not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ModelLoadError(f"Signature manifest is not valid JSON: {e}") from e

        logger.info("Loaded signature manifest", path=str(path))
        return cls(manifest)

    @staticmethod
    def _parse_tensors(signature_name: str, tensors: Dict[str, Any]) -> Dict[str, TensorInfo]:
        parsed = {}
        for tensor_name, spec in tensors.items():
            if "dtype" not in spec:
                raise ModelLoadError(
                    f"Tensor '{tensor_name}' of signature '{signature_name}' has no dtype"
                )
            parsed[tensor_name] = TensorInfo.from_dims(spec["dtype"], spec.get("shape"))
        return parsed

    def _entry(self, signature_name: str) -> Dict[str, Any]:
        try:
            return self._signatures[signature_name]
        except KeyError:
            raise UnknownSignatureError(signature_name) from None

    def signature_names(self) -> List[str]:
        return list(self._signatures)

    def input_names(self, signature_name: str) -> List[str]:
        return list(self._entry(signature_name)["inputs"])

    def tensor_info(self, signature_name: str, input_name: str) -> TensorInfo:
        return self._entry(signature_name)["inputs"][input_name]

    def output_names(self, signature_name: str) -> List[str]:
        return list(self._entry(signature_name)["outputs"])

    def output_info(self, signature_name: str, output_name: str) -> TensorInfo:
        return self._entry(signature_name)["outputs"][output_name]

    def method_name(self, signature_name: str) -> str:
        return self._entry(signature_name)["method"]
