"""
FastAPI Main Application

Real-estate marketing site REST API.
"""
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from config.settings import settings
from src.estatesite.api.dependencies import get_db
from src.estatesite.api.errors import register_exception_handlers
from src.estatesite.api.schemas import HealthCheck
from src.estatesite.api.routers import auth, blogs, callbacks, contacts, leads, newsletter, properties
from src.estatesite.db.base import utcnow
from src.estatesite.db.session import close_connections, health_check as database_health_check
from src.estatesite.utils.logger import bind_request_context, clear_request_context, get_logger, setup_logging

API_VERSION = "1.0.0"

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("api_starting", environment=settings.environment, version=API_VERSION)
    yield
    close_connections()
    logger.info("api_stopped")


# Create FastAPI app
app = FastAPI(
    title="Estatesite API",
    description="REST API for property listings, blog posts, leads and admin authentication",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS for the site frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag log events with a request id and echo it back in X-Request-ID."""
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    bind_request_context(request_id, request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["X-Request-ID"] = request_id
    return response

# Include routers
app.include_router(auth.router)
app.include_router(properties.router)
app.include_router(blogs.router)
app.include_router(contacts.router)
app.include_router(callbacks.router)
app.include_router(newsletter.router)
app.include_router(leads.router)


@app.get("/health", response_model=HealthCheck, tags=["health"])
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
        Health status with database connectivity check
    """
    database_ok = database_health_check(db)

    return HealthCheck(
        status="healthy" if database_ok else "degraded",
        version=API_VERSION,
        database="connected" if database_ok else "unavailable",
        timestamp=utcnow(),
    )


@app.get("/", tags=["root"])
def root():
    """
    Root endpoint.

    Returns:
        API information
    """
    return {
        "name": "Estatesite API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "resources": [
            "/api/properties",
            "/api/blogs",
            "/api/auth",
            "/api/contacts",
            "/api/callbacks",
            "/api/newsletter",
            "/api/leads",
        ],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.estatesite.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
