"""
SensorCal FastAPI Application
=============================
REST front end for the calibration pipeline.

Endpoints:
    GET  /                        Service info
    GET  /health                  Liveness check
    POST /calibration/process     Clean samples and compute coefficients
    POST /calibration/export      Same, returned as CSV
    GET  /calibration/methods     Accepted method and filter names
"""

from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sensorcal import __version__
from sensorcal.api.routes import calibration
from sensorcal.api.schemas import HealthResponse
from sensorcal.config import get_config


def create_app() -> FastAPI:
    """Build the application with routers and CORS from the current config."""
    config = get_config()

    application = FastAPI(
        title="SensorCal API",
        description="Outlier rejection, smoothing and calibration of multi-channel sensor data",
        version=__version__,
    )

    # No cookies or auth headers are used, so credentials stay disabled
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    application.include_router(calibration.router, prefix="/calibration", tags=["Calibration"])
    return application


app = create_app()


@app.get("/", tags=["Health"])
async def root():
    """Service name, version and where to find the docs."""
    return {
        "service": "SensorCal API",
        "version": __version__,
        "docs": "/docs",
        "methods": "/calibration/methods",
    }


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        version=__version__
    )


if __name__ == "__main__":
    import uvicorn
    from sensorcal.logging_setup import setup_logging

    config = get_config()
    setup_logging(config.log_level)
    uvicorn.run(app, host=config.api_host, port=config.api_port)
