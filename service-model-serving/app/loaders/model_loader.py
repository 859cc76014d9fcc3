"""Model loaders for the supported runtimes."""

import asyncio
import time
from typing import Optional

import structlog

from sigserve.runtime.base import ModelRuntime
from sigserve.runtime.loader import detect_framework, load_runtime

logger = structlog.get_logger("model_loader")


class ModelLoader:
    """Handles loading models from different frameworks."""

    async def load_model(self, model_path: str, framework: Optional[str] = None) -> ModelRuntime:
        """Load a model from a local directory.

        The framework is detected from the directory contents when not given.
        Loading runs in a worker thread since SavedModel loading can be slow.
        """
        start_time = time.time()
        try:
            if framework is None:
                framework = detect_framework(model_path)

            runtime = await asyncio.to_thread(load_runtime, model_path, framework)

            logger.info(
                "Model loaded successfully",
                framework=framework,
                model_path=model_path,
                signatures=runtime.signature_names(),
                duration_ms=(time.time() - start_time) * 1000,
            )
            return runtime

        except Exception as e:
            logger.error(
                "Failed to load model",
                framework=framework,
                model_path=model_path,
                error=str(e),
            )
            raise


def create_model_loader() -> ModelLoader:
    """Factory function for model loader."""
    return ModelLoader()
