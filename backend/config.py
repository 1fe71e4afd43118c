# backend/config.py
from functools import lru_cache
from pathlib import Path
from typing import ClassVar, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    LOG_LEVEL: str = "INFO"
    FRONTEND_URL: Optional[str] = None

    # Run Base.metadata.create_all on startup (alembic is used in production)
    AUTO_CREATE_TABLES: bool = True

    class Config:
        env_file: ClassVar[str] = str(env_path)

    @field_validator("DATABASE_URL")
    @classmethod
    def _normalize_scheme(cls, v: str) -> str:
        # SQLAlchemy requires postgresql://, hosting providers often hand out postgres://
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    """Settings loaded from the environment, built once per process."""
    return Settings()
