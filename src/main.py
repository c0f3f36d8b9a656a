"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from src.api import auth, users
from src.api.errors import register_exception_handlers
from src.config import get_settings
from src.middleware import SecurityHeadersMiddleware, UnhandledErrorMiddleware

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"Starting user accounts API ({settings.environment})")
    yield
    logger.info("Shutting down user accounts API")


app = FastAPI(
    title="User Accounts API",
    description="Email/password signup, JWT login and self-service user records",
    version="0.1.0",
    lifespan=lifespan,
)

# Last added runs first: CORS, compression, security headers, then the error catch-all
app.add_middleware(UnhandledErrorMiddleware)
app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)
app.add_middleware(GZipMiddleware, minimum_size=500)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
app.include_router(auth.router)
app.include_router(users.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run("src.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
