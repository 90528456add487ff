# salonsmart/config.py
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./salon.db"
    DEMO_MODE: bool = True

    JWT_SECRET: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Demo sign-in accepts any credentials and hands out this role
    DEFAULT_ROLE: str = "admin"
    DEMO_EMAIL: str = "demo@salonsmart.com"

    PREVENT_DOUBLE_BOOKING: bool = False
    BOOKING_SESSION_IDLE_MINUTES: int = 30

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"

settings = Settings()
