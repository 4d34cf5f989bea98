# --- START OF FILE: src/wellcoach/interfaces/api/main.py ---
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from wellcoach.config import settings
from wellcoach.boot import build_services
from wellcoach.logging_conf import setup_logging
from wellcoach.domain.errors import (
    DependencyError, NotFoundError, ValidationError, format_field_errors,
)
from wellcoach.infrastructure.db.uow import create_tables
from wellcoach.interfaces.api.metrics import LATENCY, REQUESTS, router as metrics_router
from wellcoach.interfaces.api.routers import dashboard as dashboard_router
from wellcoach.interfaces.api.routers import modules as modules_router
from wellcoach.interfaces.api.routers import recommendations as recommendations_router
from wellcoach.interfaces.api.routers import users as users_router
from wellcoach.interfaces.webhook import billing as billing_webhook

log = logging.getLogger(__name__)

# --- FastAPI App ---
app = FastAPI(title="WellCoach API", version="1.0.0")
app.state.services = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    setup_logging()
    log.info("Application startup sequence initiated...")
    if settings.AUTO_CREATE_TABLES:
        create_tables()
    app.state.services = build_services()
    log.info("Application startup complete.")


@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    LATENCY.observe(time.perf_counter() - start)
    REQUESTS.labels(method=request.method, status=str(response.status_code)).inc()
    return response

# --- Error mapping ---

@app.exception_handler(ValidationError)
async def handle_validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"message": exc.message, "errors": exc.errors})


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request data", "errors": format_field_errors(exc.errors())},
    )


@app.exception_handler(NotFoundError)
async def handle_not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"message": str(exc) or "Not found"})


@app.exception_handler(DependencyError)
async def handle_dependency_error(request: Request, exc: DependencyError):
    log.error("Dependency failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError):
    log.error("Database failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})

# --- Routes ---

@app.get("/")
def root(): return {"message": "WellCoach API Running"}

@app.get("/health")
def health_check(): return {"status": "ok"}

app.include_router(modules_router.router)
app.include_router(recommendations_router.router)
app.include_router(dashboard_router.router)
app.include_router(users_router.router)
app.include_router(billing_webhook.router)
if settings.METRICS_ENABLED:
    app.include_router(metrics_router)


def run():
    """Console entry point: `wellcoach-api`."""
    import os
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
# --- END OF FILE ---
