"""
FastAPI application entry point for the Dex contact search API.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from dex_mcp.config.logging_setup import configure_logging
from dex_mcp.config.settings import get_settings
from dex_mcp.api import contacts, search
from dex_mcp.dependencies import close_client, get_client

settings = get_settings()
configure_logging(settings)

logger = logging.getLogger(__name__)


async def check_dex_connectivity() -> bool:
    """
    Check that the Dex API accepts the configured key.

    A failure only logs an error so the API can still serve /health.
    """
    if not settings.dex_api_key:
        logger.error("DEX_API_KEY is not set; contact endpoints will fail")
        return False

    logger.info(f"Checking Dex API connectivity at {settings.dex_api_base_url}")
    if await get_client().check_connection():
        logger.info("[OK] Successfully connected to Dex API")
        return True

    logger.error(f"Cannot connect to Dex API at {settings.dex_api_base_url}")
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting Dex contact search API v{settings.version}")
    if settings.log_file:
        logger.info(f"Logging to file: {settings.log_file}")

    await check_dex_connectivity()

    yield
    await close_client()
    logger.info("Shutting down Dex contact search API")


# Create FastAPI app
app = FastAPI(
    title="Dex Contact Search API",
    description="Fuzzy contact matching and full-text search over a Dex personal CRM",
    version=settings.version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Local-only, so accept all origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(contacts.router, prefix="/api", tags=["contacts"])
app.include_router(search.router, prefix="/api", tags=["search"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Dex Contact Search API",
        "version": settings.version,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def run():
    """Run the API with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
