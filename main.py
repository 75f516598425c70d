import json
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.errors import (
    ApplyError,
    AssetUnavailableError,
    EntityNotFoundError,
    HasDependentsError,
    IllegalTransitionError,
    InvalidReferenceError,
    LifecycleError,
    StatusLockedError,
    UnknownEntityTypeError,
    UnknownStatusError,
)
from core.log_config import configure_logging
from api.tenants.views import router as tenants_router
from api.people.views import router as people_router
from api.reference_data.views import categories_router, locations_router, vendors_router
from api.assets.views import router as assets_router
from api.assignments.views import router as assignments_router
from api.maintenance.views import router as maintenance_router
from api.procurement.views import router as procurement_router

logger = logging.getLogger(__name__)


def get_cors_origins() -> list[str]:
    """Get CORS origins from environment variable or use defaults."""
    cors_env = os.environ.get("CORS_ORIGINS", "")

    # Try to parse as JSON array
    if cors_env:
        try:
            origins = json.loads(cors_env)
            if isinstance(origins, list):
                return origins
        except json.JSONDecodeError:
            # If not valid JSON, treat as comma-separated
            return [o.strip() for o in cors_env.split(",") if o.strip()]

    # Default origins for local frontends
    return [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]


def status_for(exc: LifecycleError) -> int:
    """HTTP status for a lifecycle error that no view translated itself."""
    if isinstance(exc, EntityNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (InvalidReferenceError, UnknownStatusError, UnknownEntityTypeError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, (IllegalTransitionError, AssetUnavailableError, StatusLockedError, HasDependentsError)):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ApplyError) and exc.conflict:
        return status.HTTP_409_CONFLICT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Asset lifecycle API starting")
    yield


app = FastAPI(
    title="Asset Lifecycle API",
    description="Multi-tenant asset, assignment, maintenance and procurement management",
    version="1.0.0",
    lifespan=lifespan,
)

# Get CORS origins from environment or use defaults
cors_origins = get_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(request: Request, exc: LifecycleError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=code, content={"detail": str(exc)})


# Tenants are managed outside any tenant scope
app.include_router(tenants_router, prefix="/api/v1")

# Tenant-scoped endpoints
app.include_router(people_router, prefix="/api/v1")
app.include_router(categories_router, prefix="/api/v1")
app.include_router(locations_router, prefix="/api/v1")
app.include_router(vendors_router, prefix="/api/v1")
app.include_router(assets_router, prefix="/api/v1")
app.include_router(assignments_router, prefix="/api/v1")
app.include_router(maintenance_router, prefix="/api/v1")
app.include_router(procurement_router, prefix="/api/v1")


# Health check endpoint
@app.get("/health", tags=["system"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
