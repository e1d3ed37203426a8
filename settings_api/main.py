"""
App Settings API - FastAPI Application
======================================
REST API for reading and saving application settings.

Features:
- Settings page data (sections, fields, current values)
- Form and JSON submission with rule validation
- File and image settings stored on named disks
"""

import os
import logging
from pathlib import Path
from datetime import datetime
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load .env from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

from appsettings.settings import HandlerNotFoundError, get_settings_manager
from settings_api.models.responses import HealthStatus
from settings_api.routers import settings, storage

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SETTINGS_URL = "/" + os.getenv("SETTINGS_URL", "/settings").strip("/")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("App Settings API starting up...")
    manager = get_settings_manager()
    logger.info(f"{len(manager.get_all_setting_fields())} settings declared")

    yield

    # Shutdown
    logger.info("App Settings API shutting down...")


# Create FastAPI app
app = FastAPI(
    title="App Settings API",
    description="""
## Application Settings - REST API

- **Settings**: read the declared sections and current values
- **Save**: submit a settings form (multipart for file and image settings)
- **Storage**: download files stored by file and image settings
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Add CORS middleware
_cors_origins = os.getenv("CORS_ORIGINS", "http://localhost,http://localhost:8000").split(",")
_cors_origins = [origin.strip() for origin in _cors_origins if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With"],
)


# ============================================
# Include Routers
# ============================================

app.include_router(
    settings.router,
    prefix=f"/api/v1{SETTINGS_URL}",
    tags=["Settings"]
)

app.include_router(
    storage.router,
    prefix="/storage",
    tags=["Storage"]
)


# ============================================
# Root Endpoints
# ============================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": "App Settings API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "settings": f"/api/v1{SETTINGS_URL}"
    }


@app.get("/health", tags=["Root"], response_model=HealthStatus)
async def health():
    """Simple health check endpoint."""
    manager = get_settings_manager()
    return HealthStatus(
        status="healthy",
        settings_declared=len(manager.get_all_setting_fields()),
    )


# ============================================
# Exception Handlers
# ============================================

@app.exception_handler(HandlerNotFoundError)
async def handler_not_found(request: Request, exc: HandlerNotFoundError):
    """A field names an accessor/mutator that was never registered."""
    logger.error(str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": "HANDLER_NOT_FOUND",
                "message": str(exc)
            },
            "meta": {
                "timestamp": datetime.now().isoformat(),
                "path": str(request.url)
            }
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.exception(f"Unhandled error on {request.url}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": "INTERNAL_ERROR",
                "message": str(exc)
            },
            "meta": {
                "timestamp": datetime.now().isoformat(),
                "path": str(request.url)
            }
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "settings_api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("API_PORT", 8000)),
        reload=os.getenv("API_RELOAD", "false").lower() == "true"
    )
