"""
Configuration settings for the application.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Durable storage
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    CART_STORAGE_KEY: str = os.getenv("CART_STORAGE_KEY", "vanisarees-cart")
    WISHLIST_STORAGE_KEY: str = os.getenv(
        "WISHLIST_STORAGE_KEY",
        "vanisarees-wishlist",
    )

    # Sessions kept in memory before the least recently used is evicted
    MAX_SESSIONS: int = int(os.getenv("MAX_SESSIONS", "1000"))

    # Catalog listing
    CATALOG_PAGE_SIZE: int = int(os.getenv("CATALOG_PAGE_SIZE", "12"))
    HOVER_PREVIEW_DELAY_MS: int = int(os.getenv("HOVER_PREVIEW_DELAY_MS", "2000"))
    PRICE_RANGE_MIN: float = float(os.getenv("PRICE_RANGE_MIN", "0"))
    PRICE_RANGE_MAX: float = float(os.getenv("PRICE_RANGE_MAX", "50000"))
    PLACEHOLDER_IMAGE: str = os.getenv("PLACEHOLDER_IMAGE", "/placeholder-saree.jpg")

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    @property
    def hover_preview_delay(self) -> float:
        """Dwell time before a hover preview activates, in seconds."""
        return self.HOVER_PREVIEW_DELAY_MS / 1000

    def __init__(self):
        self.env = os.getenv("ENV", "dev")
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)
        self.logger = logging.getLogger(__name__)

        self.logger.debug(
            f"Config initialized with env={self.env}, debug={self.debug}, "
            f"log_level={self.log_level}"
        )


# Create a global settings instance for import
settings = Settings()
