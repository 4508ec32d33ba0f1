"""FastAPI application entry point"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .api import router
from .client import close_vault_client
from .config import get_settings
from .middleware import ObservabilityMiddleware, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_vault_client()


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    settings = get_settings()

    setup_logging(log_level=settings.log_level)

    app = FastAPI(
        title="vaultlink",
        description="File tools and search over a remote Obsidian vault",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(ObservabilityMiddleware)
    app.include_router(router)

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "vaultlink.main:app",
        host=settings.host,
        port=settings.port,
    )
