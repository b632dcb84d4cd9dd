import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError


from app.core.config import settings
from app.router import router
from app.database.session_sql import (
    connect_to_postgres,
    close_postgres_connection,
    AsyncSessionLocal,
)
from app.database.blob_storage import verify_containers, close_blob_service_client
from app.utils.exception_utils import DetailedHTTPException
from app.utils.seed import seed_data
from app.utils.logger_utils import get_logger
from app.middlewares.exception_handler import (
    custom_http_exception_handler,
    unhandled_exception_handler,
    integrity_exception_handler,
    validation_exception_handler,
)
from app.middlewares.rate_limit_middleware import rate_limit_middleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage FastAPI application lifecycle events.

    Args:
        app (FastAPI): The FastAPI application instance.
    """
    logger.info("Starting up...")

    await connect_to_postgres()
    await verify_containers()
    logger.info("Database schema and blob container verified.")

    # Super admin and default dealership
    async with AsyncSessionLocal() as session:
        await seed_data(session)

    if settings.RATE_LIMIT_ENABLED and await rate_limit_middleware.ping():
        logger.info("Redis client connected.")

    logger.info("Startup complete.")

    yield

    logger.info("Shutting down...")
    await close_blob_service_client()
    await rate_limit_middleware.close()
    await close_postgres_connection()
    logger.info("Shutdown complete.")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.PROJECT_DESCRIPTION,
    lifespan=lifespan,
)


# Custom exception handlers
app.add_exception_handler(DetailedHTTPException, custom_http_exception_handler)
app.add_exception_handler(IntegrityError, integrity_exception_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[
        "Retry-After",
        "X-RateLimit-Limit-Minute",
        "X-RateLimit-Remaining-Minute",
        "X-RateLimit-Reset-Minute",
        "X-RateLimit-Limit-Hour",
        "X-RateLimit-Remaining-Hour",
        "X-RateLimit-Reset-Hour",
    ],
)


# Trusted hosts
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)


# Rate-limit middleware
app.middleware("http")(rate_limit_middleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log incoming request details and processing time.

    Args:
        request (Request): Incoming HTTP request
        call_next (callable): Next handler in the chain

    Returns:
        Response: HTTP response from next handler
    """
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    logger.info(
        f"Method: {request.method} | "
        f"URL: {request.url} | "
        f"Status: {response.status_code} | "
        f"Process Time: {process_time:.4f}s"
    )
    return response


# Register main router
app.include_router(router, prefix=settings.API_STR)


@app.get("/")
def read_root():
    """
    Root endpoint returning a welcome message.

    Returns:
        dict: Welcome message with project name.
    """
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}


@app.get("/health")
def health():
    return {"status": "ok"}
