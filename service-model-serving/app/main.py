"""Model serving service main application."""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from .api.routes import router as api_router
from .runtime.model_manager import ModelManager
from sigserve.common.metrics import MetricsCollector
from sigserve.common.config import ModelServingConfig
from sigserve.common.logging import configure_logging

logger = structlog.get_logger("model_serving")

SERVICE_NAME = "model-serving"


def create_app(
    config: Optional[ModelServingConfig] = None,
    model_manager: Optional[ModelManager] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Parameters
    - config: Service configuration (read from the environment when omitted)
    - model_manager: A ready manager; when omitted one is created at startup
      and loads ``config.ml_model_path``
    """
    config = config or ModelServingConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Startup
        configure_logging(SERVICE_NAME, config.ml_log_level, config.ml_log_format)
        logger.info("Starting model serving service", model_path=config.ml_model_path)

        app.state.metrics_collector = MetricsCollector(SERVICE_NAME) if config.ml_metrics_enabled else None

        manager = model_manager
        if manager is None:
            manager = ModelManager(config)
            # Failures here abort startup: never serve a partial description.
            await manager.initialize()
        app.state.model_manager = manager

        if app.state.metrics_collector is not None:
            app.state.metrics_collector.set_signatures_loaded(len(manager.signatures))

        logger.info("Model serving service started successfully", signatures=len(manager.signatures))

        yield

        # Shutdown
        logger.info("Shutting down model serving service")
        await manager.cleanup()
        logger.info("Model serving service shutdown complete")

    app = FastAPI(
        title="Model Serving Service",
        description="REST predict endpoints synthesized from model signatures",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header and record HTTP metrics."""
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("Unhandled request error", path=request.url.path, error=str(e))
            response = JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "detail": str(e)}
            )
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        collector = getattr(app.state, "metrics_collector", None)
        if collector is not None:
            route = request.scope.get("route")
            collector.record_http_request(
                method=request.method,
                endpoint=getattr(route, "path", request.url.path),
                status=response.status_code,
                duration=process_time
            )
        return response

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        manager = getattr(app.state, "model_manager", None)
        if manager is not None and await manager.health_check():
            return {"status": "healthy", "service": SERVICE_NAME}
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "service": SERVICE_NAME}
        )

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        collector = getattr(app.state, "metrics_collector", None)
        if collector is None:
            return Response(content="# No metrics available\n", media_type="text/plain")
        return Response(content=collector.get_metrics(), media_type="text/plain")

    @app.get("/")
    async def root():
        """Root endpoint."""
        manager = getattr(app.state, "model_manager", None)
        document = manager.document if manager is not None else None
        return {
            "service": SERVICE_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "health": "/health",
                "metrics": "/metrics",
                "swagger": "/swagger.json",
                "signatures": "/signatures",
                "predict": list(document.paths) if document is not None else [],
            }
        }

    app.include_router(api_router)
    return app


app = create_app()


if __name__ == "__main__":
    serving_config = ModelServingConfig()
    uvicorn.run(
        "app.main:app",
        host=serving_config.ml_model_serving_host,
        port=serving_config.ml_model_serving_port,
        log_level=serving_config.ml_log_level.lower()
    )
