"""Model manager for the serving shim.

Owns the loaded runtime, its signatures and the interface document
synthesized from them. The document is computed once when the model is
loaded and shared read-only by every request.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional, Sequence

import structlog

from sigserve.common.config import ModelServingConfig
from sigserve.common.logging import log_performance
from sigserve.common.metrics import measure_time
from sigserve.runtime.base import ModelRuntime, read_signatures
from sigserve.runtime.errors import UnknownSignatureError
from sigserve.runtime.tensors import batches_to_predictions, instances_to_batches
from sigserve.swagger.document import InterfaceDocument, assemble
from sigserve.swagger.types import Signature
from ..loaders.model_loader import ModelLoader, create_model_loader

logger = structlog.get_logger("model_serving.model_manager")


@measure_time("assemble_interface_document")
def build_document(signatures: Sequence[Signature], default_signature: str) -> InterfaceDocument:
    """Synthesize the interface document for ``signatures``."""
    return assemble(signatures, default_signature=default_signature)


class ModelManager:
    """Manages the served model and its interface description.

    Design
    - One model per process, loaded from ``ml_model_path`` at startup
    - Signatures are read once; the document is assembled once
    - Predictions run in a worker thread to keep the event loop free
    """

    def __init__(self, config: ModelServingConfig, loader: Optional[ModelLoader] = None):
        """Create a model manager.

        Parameters
        - config: ``ModelServingConfig`` with model path and limits
        - loader: Optional ``ModelLoader`` (injected for testing)
        """
        self.config = config
        self.loader = loader or create_model_loader()
        self.runtime: Optional[ModelRuntime] = None
        self.signatures: Dict[str, Signature] = {}
        self.document: Optional[InterfaceDocument] = None
        self.loaded_at: Optional[float] = None

    async def initialize(self) -> None:
        """Load the configured model and synthesize its document.

        Any failure (missing artifact, unsupported dtype) propagates so the
        service does not start with an incomplete description.
        """
        runtime = await self.loader.load_model(
            self.config.ml_model_path,
            framework=self.config.ml_model_framework,
        )
        self.attach_runtime(runtime)
        logger.info("Model manager initialized successfully", model_path=self.config.ml_model_path)

    def attach_runtime(self, runtime: ModelRuntime) -> None:
        """Serve ``runtime``: read its signatures and assemble the document."""
        signatures = read_signatures(runtime)
        default_signature = self.config.ml_default_signature or runtime.default_signature_name
        document = build_document(signatures, default_signature)

        self.runtime = runtime
        self.signatures = {signature.name: signature for signature in signatures}
        self.document = document
        self.loaded_at = time.time()

        logger.info(
            "Model attached",
            framework=runtime.framework,
            signatures=document.signature_names,
        )

    def get_signature(self, signature_name: str) -> Signature:
        try:
            return self.signatures[signature_name]
        except KeyError:
            raise UnknownSignatureError(signature_name) from None

    def list_signatures(self) -> List[Dict[str, Any]]:
        """Signature metadata in document order."""
        if self.document is None:
            return []
        result = []
        for name in self.document.signature_names:
            signature = self.signatures[name]
            result.append({
                "name": name,
                "path": f"/{name}/predict/",
                "inputs": {key: tensor.to_dict() for key, tensor in signature.inputs.items()},
                "outputs": {key: tensor.to_dict() for key, tensor in signature.outputs.items()},
            })
        return result

    def _run(self, signature: Signature, instances: Sequence[Any]) -> List[Any]:
        batches, batched = instances_to_batches(signature, instances)
        outputs = [self.runtime.predict(signature.name, batch) for batch in batches]
        return batches_to_predictions(outputs, batched, len(instances))

    async def predict(self, signature_name: str, instances: Sequence[Any]) -> List[Any]:
        """Run ``signature_name`` on request instances and return predictions."""
        if self.runtime is None:
            raise RuntimeError("No model loaded")

        signature = self.get_signature(signature_name)
        start_time = time.time()
        predictions = await asyncio.to_thread(self._run, signature, instances)

        log_performance(
            "predict",
            (time.time() - start_time) * 1000,
            signature=signature_name,
            instance_count=len(instances),
        )
        return predictions

    async def health_check(self) -> bool:
        """Check if a model is loaded and described."""
        return self.runtime is not None and self.document is not None

    async def cleanup(self) -> None:
        """Release the runtime."""
        if self.runtime is not None:
            self.runtime.close()
        self.runtime = None
        self.signatures = {}
        self.document = None
        logger.info("Model manager cleanup completed")
