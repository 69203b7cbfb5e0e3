# fleetflow/config.py
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache

DEFAULT_SECRET_KEY = "change-me"

class Settings(BaseSettings):
    # MongoDB settings
    MONGODB_URI: str
    MONGODB_DB_NAME: str = "fleetflow"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = True
    LOG_LEVEL: str = "INFO"

    # API settings
    API_PREFIX: str = "/api"

    # Session tokens
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # Bootstrap account, created on start-up when no user with this email exists
    FIRST_MANAGER_EMAIL: Optional[str] = None
    FIRST_MANAGER_PASSWORD: Optional[str] = None

    # Driver compliance sweep
    ENABLE_CHANGE_STREAMS: bool = False  # needs a replica set
    COMPLIANCE_SWEEP_INTERVAL: int = 300  # seconds

    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings():
    return Settings()
