# app/core/config.py

from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Friendship Ledger API"
    API_PREFIX: str = "/api/v1"

    DATABASE_URL: str = "sqlite:///./friends.db"

    SECRET_KEY: str = "CHANGE_THIS_TO_A_SUPER_SECRET_KEY"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    class Config:
        """
        Values come from the environment first, then from a .env file
        in the working directory.
        """
        env_file = ".env"

settings = Settings()
