"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dagflow.api.routes import router
from dagflow.catalog import CatalogUnavailableError, get_catalog_gateway
from dagflow.utils.config import get_settings
from dagflow.utils.logger import get_logger, setup_logging

logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings = get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    key_status = settings.validate_api_keys()
    missing_keys = [k for k, v in key_status.items() if not v]
    if missing_keys:
        logger.warning(f"Missing API keys for: {', '.join(missing_keys)}; /api/analyze will fail")

    # Warm the catalog; requests report 503 until a fetch succeeds
    try:
        await asyncio.to_thread(get_catalog_gateway().load)
    except CatalogUnavailableError as e:
        logger.warning(f"Catalog warm-up failed: {e}")

    yield


app = FastAPI(
    title="dagflow",
    description="Validation, port sanitization and layered layout for task DAGs",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "dagflow",
        "description": "Validation, port sanitization and layered layout for task DAGs",
        "version": "0.1.0",
        "endpoints": {
            "catalog": "GET /api/catalog",
            "refresh_catalog": "POST /api/catalog/refresh",
            "process_graph": "POST /api/graph",
            "analyze": "POST /api/analyze",
            "session_graph": "GET /api/sessions/{session_id}/graph",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "catalog_loaded": get_catalog_gateway().is_loaded,
        "api_keys": settings.validate_api_keys(),
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "dagflow.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
