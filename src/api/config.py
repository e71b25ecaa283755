"""
API configuration settings.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """API settings."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Rolling
    DEFAULT_SEED: Optional[int] = None  # None = fresh entropy per request
    MAX_ROLLS_PER_REQUEST: int = 50

    # Simulation
    DEFAULT_SIMULATION_COUNT: int = 1000
    MAX_SIMULATION_COUNT: int = 20000

    class Config:
        env_file = ".env"


settings = Settings()
