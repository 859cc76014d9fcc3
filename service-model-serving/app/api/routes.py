"""API routes for the model serving service."""

import time
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
import structlog

from sigserve.runtime.errors import InvalidInstanceError, UnknownSignatureError
from ..runtime.model_manager import ModelManager

logger = structlog.get_logger("model_serving.api")

router = APIRouter()


class PredictRequest(BaseModel):
    """Request body of a signature's predict endpoint."""
    instances: List[Any] = Field(..., description="Prediction instances")


class PredictResponse(BaseModel):
    """Response body of a signature's predict endpoint."""
    predictions: List[Any] = Field(..., description="One prediction per instance")


class TensorSpec(BaseModel):
    """Declared tensor metadata."""
    dtype: str = Field(..., description="Element type name")
    shape: List[Any] = Field(..., description="Dimension sizes, null when dynamic")


class SignatureInfo(BaseModel):
    """Signature information model."""
    name: str = Field(..., description="Signature name")
    path: str = Field(..., description="Predict endpoint path")
    inputs: Dict[str, TensorSpec] = Field(..., description="Input tensors")
    outputs: Dict[str, TensorSpec] = Field(..., description="Output tensors")


def get_model_manager(request: Request) -> ModelManager:
    """Get model manager from application state."""
    manager = getattr(request.app.state, "model_manager", None)
    if manager is None or manager.document is None:
        raise HTTPException(status_code=503, detail="Model not loaded")
    return manager


def get_metrics(request: Request):
    """Get metrics collector from application state."""
    return getattr(request.app.state, "metrics_collector", None)


@router.get("/swagger.json")
async def swagger_document(
    model_manager: ModelManager = Depends(get_model_manager)
) -> Dict[str, Any]:
    """Swagger 2.0 description of the predict endpoints."""
    return model_manager.document.to_dict()


@router.get("/signatures", response_model=List[SignatureInfo])
async def list_signatures(
    model_manager: ModelManager = Depends(get_model_manager)
):
    """List the model's signatures in document order."""
    signatures = model_manager.list_signatures()
    logger.info("Signatures listed", count=len(signatures))
    return signatures


@router.post("/{signature_name}/predict/", response_model=PredictResponse)
async def predict(
    signature_name: str,
    request: PredictRequest,
    http_request: Request,
    model_manager: ModelManager = Depends(get_model_manager),
    metrics_collector=Depends(get_metrics)
):
    """Run one signature on the request instances."""
    try:
        model_manager.get_signature(signature_name)
    except UnknownSignatureError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    max_batch_size = http_request.app.state.config.ml_max_batch_size
    if len(request.instances) > max_batch_size:
        raise HTTPException(
            status_code=400,
            detail=f"Too many instances: {len(request.instances)} > {max_batch_size}"
        )

    start_time = time.time()
    status = "success"
    try:
        predictions = await model_manager.predict(signature_name, request.instances)

        logger.info(
            "Prediction completed",
            signature=signature_name,
            instance_count=len(request.instances),
            latency_ms=(time.time() - start_time) * 1000
        )
        return PredictResponse(predictions=predictions)

    except InvalidInstanceError as e:
        status = "invalid"
        logger.warning("Invalid prediction request", signature=signature_name, error=str(e))
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        status = "error"
        logger.error("Prediction failed", signature=signature_name, error=str(e))
        raise HTTPException(status_code=500, detail=f"Prediction failed: {str(e)}") from e
    finally:
        if metrics_collector is not None:
            metrics_collector.record_inference(
                signature=signature_name,
                duration=time.time() - start_time,
                instance_count=len(request.instances),
                status=status
            )
