"""
FastAPI main application.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .routes import loot, pity, trial

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Cultivation Reward Engine API",
    description="Loot, pity, shard exchange and final trial engine",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(loot.router, prefix="/api/loot", tags=["Loot"])
app.include_router(pity.router, prefix="/api/pity", tags=["Pity"])
app.include_router(trial.router, prefix="/api/trial", tags=["Final Trial"])


@app.get("/")
async def root():
    """API status check."""
    return {
        "status": "ok",
        "name": "Cultivation Reward Engine API",
        "version": "1.0.0",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
