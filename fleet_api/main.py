# fleet_api/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fleet_api.routers import health, vehicles
from fleet_api.database import SessionLocal, create_tables
from fleet_api.config import settings
from fleet_api.exceptions import VehicleRegistryError
from fleet_api.services.seed_service import load_seed_file, seed_vehicles
from fleet_api.services.vehicle_service import VehicleRegistry
from fleet_api.services.vehicle_store import SQLVehicleStore
from fleet_api.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Fleet Vehicle Registry API",
    description="Vehicle fleet CRUD with plate uniqueness, status transitions and a maintenance cap.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (the dashboard is served from a different origin) ──────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error Handlers ───────────────────────────────────────────────────────────
@app.exception_handler(VehicleRegistryError)
async def registry_error_handler(request: Request, exc: VehicleRegistryError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are reported like any other rejected input
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg', 'invalid request')}" if field else first.get("msg", "Invalid request")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(vehicles.router, prefix=settings.API_PREFIX, tags=["Vehicles"])
app.include_router(health.router,   prefix=settings.API_PREFIX, tags=["Health"])


def seed_from_settings():
    """Seed an empty fleet from SEED_FILE, if configured."""
    if not settings.SEED_FILE:
        return 0
    db = SessionLocal()
    try:
        return seed_vehicles(VehicleRegistry(SQLVehicleStore(db)), load_seed_file(settings.SEED_FILE))
    finally:
        db.close()


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Fleet backend starting up...")
    create_tables()
    logger.info("Database tables ready")
    seed_from_settings()
    logger.info(f"Maintenance cap: {settings.MAINTENANCE_CAP_PERCENT}% of fleet")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Fleet backend shutting down...")
