"""
Patient Dashboard - Main FastAPI Application

REST API behind the patient list dashboard: create, read, update and delete
patient records, and list them with search, sorting and pagination.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from patient_dashboard.config import get_settings
from patient_dashboard.database import init_db
from patient_dashboard.exceptions import PatientDashboardError
from patient_dashboard.logging_config import setup_logging
from patient_dashboard.routers import patients_router

settings = get_settings()

setup_logging(use_json=settings.json_logs, log_level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    logger.info("Starting Patient Dashboard API...")
    init_db()
    logger.info("Application started successfully")

    yield

    logger.info("Patient Dashboard API shutdown complete")


app = FastAPI(
    title=settings.project_name,
    description="""
## Patient Dashboard

Manage patient records:
- **Create**, **update** and **delete** patients
- **List** patients with search, sorting by name, date of birth, status or
  location, and pagination
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PatientDashboardError)
async def dashboard_error_handler(request: Request, exc: PatientDashboardError):
    """Render dashboard errors as ``{"error": message}``."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors, reported like any other."""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {message}"})


app.include_router(patients_router, prefix=settings.api_prefix)


@app.get("/", tags=["Health Check"])
async def root():
    """Root endpoint - API health check."""
    return {
        "status": "healthy",
        "application": settings.project_name,
        "version": "1.0.0",
        "documentation": "/docs"
    }


@app.get("/health", tags=["Health Check"])
async def health_check():
    """Detailed health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "services": {
            "patients": "available"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "patient_dashboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
