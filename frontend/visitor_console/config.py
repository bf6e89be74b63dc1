from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    # Backend
    API_BASE_URL: str = "http://localhost:3001"
    API_TOKEN: Optional[str] = None
    REQUEST_TIMEOUT: int = 30

    # Refresh intervals (seconds)
    VISITS_REFRESH_SECONDS: int = 120
    DASHBOARD_REFRESH_SECONDS: int = 300
    MESSAGE_TIMEOUT_SECONDS: int = 5

    # Dashboard
    MAX_PARALLEL_REQUESTS: int = 8
    MOCK_DATA_FALLBACK: bool = True

    DEBUG: bool = False

    class Config:
        env_file = ".env"
        extra = "allow"


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()
