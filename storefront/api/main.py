"""FastAPI application main module.

This module defines the main FastAPI application instance for the storefront
catalog service: the product routes, health and metrics endpoints, request
logging, and the handlers that render storefront exceptions as JSON.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.dependencies import get_catalog_service, get_settings
from storefront.api.logging_config import RequestLoggingMiddleware, setup_logging
from storefront.api.routes import products
from storefront.catalog.service import CatalogService
from storefront.exceptions import StorefrontException
from storefront.metrics import metrics_service

setup_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

# Create FastAPI application instance
app = FastAPI(
    title="Storefront Catalog API",
    description="Product catalog service with a cached featured listing",
    version="0.1.0",
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(products.router)


@app.exception_handler(StorefrontException)
async def storefront_exception_handler(
    request: Request, exc: StorefrontException
) -> JSONResponse:
    """Render storefront exceptions.

    404s carry only a message; server errors carry a generic message plus
    the underlying error text.
    """
    if exc.status_code >= 500:
        content = {"message": "server error", "error": exc.message}
    else:
        content = {"message": exc.message}
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render unparseable request bodies as server errors.

    Product fields are never validated, so this only fires for bodies that
    are not a JSON object.
    """
    logger.error(f"Rejected request body for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500, content={"message": "server error", "error": str(exc)}
    )


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Returns a simple status response to verify the API is running.

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/health")
def health(service: CatalogService = Depends(get_catalog_service)) -> Dict[str, Any]:
    """Report store and cache reachability."""
    dependencies = service.health()
    return {
        "status": "ok" if all(dependencies.values()) else "degraded",
        "dependencies": {
            name: "ok" if up else "down" for name, up in dependencies.items()
        },
        "image_host": "configured" if service.image_host else "disabled",
    }


@app.get("/metrics")
def metrics() -> Dict[str, Any]:
    """Return request, cache and side-effect counters."""
    return metrics_service.get_metrics()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.api.main:app",
        host="0.0.0.0",
        port=5000,
        reload=True,
    )
