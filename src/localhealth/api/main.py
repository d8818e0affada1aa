"""
FastAPI Main Application

Local Health Indicators REST API for the property compliance dashboard.
"""
from datetime import datetime
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from src.localhealth import __version__
from src.localhealth.api.schemas import HealthCheck
from src.localhealth.api.routers import health_data
from src.localhealth.utils.logger import setup_logging

setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Local Health Indicators API",
    description="Public health benchmarks for the area around a property, compared with England",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS for the dashboard frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_data.router)


@app.get("/health", response_model=HealthCheck, tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return HealthCheck(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow(),
    )


@app.get("/", tags=["root"])
def root():
    """
    Root endpoint.

    Returns:
        API information
    """
    return {
        "name": "Local Health Indicators API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "features": [
            "Address to area resolution",
            "Debounced area search",
            "Indicator comparison with England",
        ]
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.localhealth.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
