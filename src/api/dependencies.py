"""
Dependency injection for API services.
"""

from functools import lru_cache

from .services.engine_service import RewardEngineService, build_service


@lru_cache()
def get_engine_service() -> RewardEngineService:
    """Get RewardEngineService singleton."""
    return build_service()
