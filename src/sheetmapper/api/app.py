"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from ..embeddings import EmbeddingState
from ..mapping import MappingManager
from .routes import router

logger = logging.getLogger(__name__)

# Process-wide manager owning the similarity cache and embedding session
_manager: Optional[MappingManager] = None


def get_manager() -> MappingManager:
    """Get the global mapping manager instance."""
    global _manager
    if _manager is None:
        _manager = MappingManager()
    return _manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Resolve the embedding mode before serving, release the client on shutdown."""
    global _manager
    manager = get_manager()
    await manager.initialize()
    app.state.manager = manager

    if manager.embeddings.state == EmbeddingState.AVAILABLE:
        logger.info(f"Serving with semantic matching ({settings.huggingface_model})")
    else:
        logger.warning(
            f"Serving with keyword matching only: {manager.embeddings.last_error}"
        )

    yield

    cache_stats = manager.cache.stats()
    logger.info(
        f"Shutting down (cache size {cache_stats['size']}, hit rate {cache_stats['hit_rate']:.2f})"
    )
    await manager.close()
    _manager = None


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="SheetMapper",
        description="Spreadsheet header classification and schema mapping",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(router, prefix="/api")

    return app
