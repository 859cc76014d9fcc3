"""Model runtimes and signature sources.

A runtime exposes its signatures through the read-only ``SignatureSource``
capability and runs predictions on named numpy inputs. Request payloads are
converted to those inputs by ``tensors``.

Backends
- ``JoblibModelRuntime``: joblib estimator plus a ``signatures.json`` manifest
- ``TensorFlowModelRuntime``: SavedModel directory (requires ``tensorflow``)
"""

from .base import ModelRuntime, SignatureSource, read_signatures
from .errors import InvalidInstanceError, ModelLoadError, RuntimeErrorBase, UnknownSignatureError
from .joblib_runtime import JoblibModelRuntime
from .loader import detect_framework, load_runtime
from .manifest import ManifestSignatureSource

__all__ = [
    "InvalidInstanceError",
    "JoblibModelRuntime",
    "ManifestSignatureSource",
    "ModelLoadError",
    "ModelRuntime",
    "RuntimeErrorBase",
    "SignatureSource",
    "UnknownSignatureError",
    "detect_framework",
    "load_runtime",
    "read_signatures",
]
