"""API services."""

from .engine_service import RewardEngineService, build_service

__all__ = [
    "RewardEngineService",
    "build_service",
]
