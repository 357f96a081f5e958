"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pageforge.config import get_settings
from pageforge.api.router import api_router
from pageforge.exceptions import ConfigurationError, UnsupportedKeyType

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting %s in %s mode", settings.app_name, settings.environment)
    yield
    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Paginated, searchable list endpoints over relational data",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/api/docs" if not settings.is_production else None,
    redoc_url="/api/redoc" if not settings.is_production else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("List query misconfigured for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "List query is misconfigured"})


@app.exception_handler(UnsupportedKeyType)
async def unsupported_key_handler(request: Request, exc: UnsupportedKeyType):
    logger.error("Cannot correlate rows for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Unsupported primary key type"})


# Include API router
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers."""
    return {"status": "healthy", "environment": settings.environment}
