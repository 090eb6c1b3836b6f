"""
Core configuration for the food ordering API
"""
import os
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings"""

    # API Configuration
    PROJECT_NAME: str = "Food Ordering API"
    API_PREFIX: str = "/api"
    SESSION_HEADER: str = "X-Session-Id"

    # Database Configuration
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./foodorder.db"  # SQLite for development
    )

    # CORS Configuration
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5000",
    ]

    # Order defaults and pricing policy (whole rupees)
    DEFAULT_ESTIMATED_DELIVERY_MINUTES: int = 35
    TAX_RATE: float = 0.10
    EXPRESS_DELIVERY_FEE: int = 50
    ENFORCE_ORDER_TOTAL: bool = False

    # Typed by the admin before all orders are wiped
    RESET_CONFIRMATION_PHRASE: str = "RESET"

    # Polling intervals handed to clients (seconds)
    TRACKING_POLL_SECONDS: int = 3
    ORDER_LIST_POLL_SECONDS: int = 10
    ADMIN_ORDERS_POLL_SECONDS: int = 5
    ADMIN_STATS_POLL_SECONDS: int = 30

    # Startup seed
    SEED_SAMPLE_DATA: bool = True
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@foodorder.local")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "admin123")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

# Global settings instance
settings = Settings()
