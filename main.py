from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from jobly.core.config import settings
from jobly.core.database import init_db
from jobly.core.exceptions import JoblyError
from jobly.core.logging_config import setup_logging, get_logger
from jobly.api.endpoints import auth, companies, jobs, users

setup_logging(settings.LOG_LEVEL, settings.JSON_LOGS)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting up Jobly API...")
    init_db()
    logger.info("Database initialized successfully")

    yield

    logger.info("Shutting down Jobly API...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Job board API for companies, jobs, users and applications",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(JoblyError)
async def jobly_exception_handler(request: Request, exc: JoblyError):
    """Map application errors to their HTTP status"""
    if exc.status_code >= 500:
        logger.error(f"Application error: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


app.include_router(auth.router, prefix=settings.API_V1_STR)
app.include_router(companies.router, prefix=settings.API_V1_STR)
app.include_router(jobs.router, prefix=settings.API_V1_STR)
app.include_router(users.router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": "Jobly API",
        "version": "1.0.0",
        "status": "healthy"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
