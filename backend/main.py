"""
Code Review Diff Backend - FastAPI Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import config, diff, review
from services.config_manager import ConfigManager
from services.revision_store import RevisionStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    logger.info("[Backend] Starting Code Review Diff Backend...")
    config_manager = ConfigManager.get_instance()
    diff_config = config_manager.get("diff", {})
    logger.info(f"[Backend] ConfigManager initialized (diff tool: {diff_config.get('executable', 'diff')})")
    RevisionStore.get_instance()
    logger.info("[Backend] RevisionStore initialized")

    yield
    logger.info("[Backend] Shutting down Code Review Diff Backend...")


app = FastAPI(
    title="Code Review Diff Backend",
    description="Hunk parsing, revision reconstruction and aligned diff rendering for code review",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for the review web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(diff.router, prefix="/api/diff", tags=["diff"])
app.include_router(review.router, prefix="/api/review", tags=["review"])
app.include_router(config.router, prefix="/api/config", tags=["config"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "review-diff-backend"}


if __name__ == "__main__":
    import uvicorn

    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "0.0.0.0"), port=server.get("port", 8000))
