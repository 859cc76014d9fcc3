"""Framework detection and runtime construction for model directories."""

from pathlib import Path
from typing import Callable, Dict, Optional, Union

from .base import ModelRuntime
from .errors import ModelLoadError
from .joblib_runtime import MODEL_FILENAME, JoblibModelRuntime
from .manifest import MANIFEST_FILENAME
from .tensorflow_runtime import SAVED_MODEL_FILENAME, TensorFlowModelRuntime

FRAMEWORK_LOADERS: Dict[str, Callable[[Union[str, Path]], ModelRuntime]] = {
    "tensorflow": TensorFlowModelRuntime.load,
    "joblib": JoblibModelRuntime.load,
}


def detect_framework(model_path: Union[str, Path]) -> str:
    """Detect the framework from the files in ``model_path``."""
    model_dir = Path(model_path)
    if not model_dir.is_dir():
        raise ModelLoadError(f"Model directory not found: {model_path}")

    if (model_dir / SAVED_MODEL_FILENAME).exists():
        return "tensorflow"
    if (model_dir / MODEL_FILENAME).exists() and (model_dir / MANIFEST_FILENAME).exists():
        return "joblib"

    raise ModelLoadError(f"Could not detect model framework in {model_path}")


def load_runtime(model_path: Union[str, Path], framework: Optional[str] = None) -> ModelRuntime:
    """Load ``model_path`` with the given or detected framework."""
    framework = framework or detect_framework(model_path)
    if framework not in FRAMEWORK_LOADERS:
        raise ModelLoadError(
            f"Unsupported framework '{framework}'. Expected one of {sorted(FRAMEWORK_LOADERS)}"
        )
    return FRAMEWORK_LOADERS[framework](model_path)
