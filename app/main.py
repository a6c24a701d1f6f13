"""
Main FastAPI application module.

This module initializes the FastAPI application with proper middleware,
database connections, and routing configuration.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.config import settings
from app.core.exceptions import ScheduleError
from app.core.logging import setup_logging
from app.core.middleware import LoggingMiddleware
from app.core.postgres import init_db, close_postgres
from app.routers.schedules import router as schedules_router

# Configure logging before creating the app
setup_logging(
    log_level=settings.LOG_LEVEL,
    json_format=settings.ENABLE_JSON_LOGS,
    enable_file_logging=settings.ENABLE_FILE_LOGS,
)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    The database must be reachable at startup; a failure propagates and
    stops the process.
    """
    try:
        await init_db()
    except Exception as e:
        logger.critical(f"Failed to initialize database, shutting down: {e}")
        raise
    logger.info("API started successfully")

    yield

    try:
        await close_postgres()
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")

    logger.info("API stopped")


app = FastAPI(
    title="Schedules API",
    description="API for managing academic schedules",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.add_middleware(LoggingMiddleware)

app.include_router(schedules_router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors: 400 instead of FastAPI's 422."""
    errors = "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    logger.warning(f"Rejected request body for {request.url.path}: {errors}")
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request body", "error": errors},
    )


@app.exception_handler(ScheduleError)
async def schedule_error_handler(request: Request, exc: ScheduleError):
    """Domain errors raised outside a route body, e.g. by the pool dependency."""
    content = {"message": exc.message}
    if exc.error:
        content["error"] = exc.error
    return JSONResponse(status_code=exc.status_code, content=content)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "message": "API is running",
        "status": "healthy",
        "version": VERSION,
    }


@app.get("/health")
async def health_check():
    """Detailed health check endpoint."""
    return {
        "status": "healthy",
        "service": "schedules-api",
        "version": VERSION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "schedules": "/schedules",
            "health": "/health",
            "docs": "/docs",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
